"""
Slot availability rules for the shop calendar.

Pure functions only: callers load the appointments for a day and pass them
in. A start time is bookable when the booking interval [start, start + d)
stays clear of the lunch blackout and of every active appointment on that
day, and ends no later than the day's closing time.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from barbershop.application.exceptions import RuleViolation
from barbershop.application.utils.date_parser import format_store_date, from_minutes, to_minutes
from barbershop.domain.entities.appointment import Appointment
from barbershop.domain.entities.schedule_rules import ScheduleRules

DATE_MESSAGES = {
    "closed_weekday": "The shop is closed on this weekday.",
    "disabled_date": "This date is not available for booking.",
    "past_date": "This date has already passed.",
    "outside_window": "This date is too far ahead to book.",
}

SLOT_MESSAGES = {
    "outside_hours": "The shop is not open at this time.",
    "off_grid": "Appointments start on the half hour.",
    "past_time": "This time has already passed.",
    "lunch": "The shop is closed for lunch at this time.",
    "after_hours": "The appointment would end after closing time.",
    "conflict": "This time is already booked.",
}


def _overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    # Empty intervals never overlap anything.
    if start_a >= end_a or start_b >= end_b:
        return False
    return start_a < end_b and start_b < end_a


def date_rejection(
    day: date,
    rules: ScheduleRules,
    today: date,
    disabled_dates: Iterable[date] = (),
    enforce_window: bool = True,
) -> str | None:
    """Reason code for a date that cannot be booked at all, or None."""
    if rules.is_closed_weekday(day):
        return "closed_weekday"
    if day in set(disabled_dates):
        return "disabled_date"
    if day < today:
        return "past_date"
    if enforce_window and day > today + timedelta(days=rules.booking_window_days):
        return "outside_window"
    return None


def ensure_date_bookable(
    day: date,
    rules: ScheduleRules,
    today: date,
    disabled_dates: Iterable[date] = (),
    enforce_window: bool = True,
) -> None:
    reason = date_rejection(day, rules, today, disabled_dates, enforce_window)
    if reason:
        raise RuleViolation(reason, f"{DATE_MESSAGES[reason]} ({format_store_date(day)})")


def slot_grid(day: date, rules: ScheduleRules) -> list[time]:
    """Every start time from opening up to (not including) the day's closing time."""
    opening = to_minutes(rules.opening_time)
    closing = to_minutes(rules.closing_time_for(day))
    return [from_minutes(minute) for minute in range(opening, closing, rules.slot_step_minutes)]


def slot_rejection(
    day: date,
    start: time,
    duration_minutes: int,
    existing: Iterable[Appointment],
    rules: ScheduleRules,
    now: datetime | None = None,
) -> str | None:
    """Reason code for a start time that cannot take a booking of duration_minutes, or None."""
    opening = to_minutes(rules.opening_time)
    closing = to_minutes(rules.closing_time_for(day))
    start_minutes = to_minutes(start)
    end_minutes = start_minutes + duration_minutes

    if start_minutes < opening or start_minutes >= closing:
        return "outside_hours"
    if (start_minutes - opening) % rules.slot_step_minutes:
        return "off_grid"

    if now is not None:
        local_now = now.replace(tzinfo=None)
        if datetime.combine(day, start) <= local_now:
            return "past_time"

    lunch_start = to_minutes(rules.lunch_start)
    lunch_end = to_minutes(rules.lunch_end)
    if lunch_start <= start_minutes < lunch_end or _overlaps(start_minutes, end_minutes, lunch_start, lunch_end):
        return "lunch"

    if end_minutes > closing:
        return "after_hours"

    for appointment in existing:
        if not appointment.is_active or appointment.day != day:
            continue
        if _overlaps(start_minutes, end_minutes, appointment.start_minutes, appointment.end_minutes):
            return "conflict"

    return None


def is_slot_valid(
    day: date,
    start: time,
    duration_minutes: int,
    existing: Iterable[Appointment],
    rules: ScheduleRules,
    now: datetime | None = None,
) -> bool:
    return slot_rejection(day, start, duration_minutes, list(existing), rules, now) is None


def candidate_slots(
    day: date,
    duration_minutes: int,
    existing: Iterable[Appointment],
    rules: ScheduleRules,
    now: datetime | None = None,
    disabled_dates: Iterable[date] = (),
) -> list[time]:
    """
    Bookable start times for day, in chronological order.

    Closed weekdays, manually disabled dates and past dates give an empty
    list. A zero duration never conflicts with existing appointments, but
    start times inside the lunch blackout are still excluded.
    """
    if rules.is_closed_weekday(day) or day in set(disabled_dates):
        return []
    if now is not None and day < now.date():
        return []

    appointments = [a for a in existing if a.is_active and a.day == day]
    return [
        start
        for start in slot_grid(day, rules)
        if slot_rejection(day, start, duration_minutes, appointments, rules, now) is None
    ]

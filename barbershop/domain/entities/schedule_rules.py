from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

SATURDAY = 5


@dataclass(frozen=True)
class ScheduleRules:
    opening_time: time = time(9, 0)
    weekday_closing_time: time = time(20, 0)
    saturday_closing_time: time = time(17, 0)
    lunch_start: time = time(12, 0)
    lunch_end: time = time(13, 0)
    slot_step_minutes: int = 30
    closed_weekdays: frozenset[int] = frozenset({6, 0})  # date.weekday(): Sunday, Monday
    booking_window_days: int = 14
    default_appointment_minutes: int = 30
    admin_earliest_time: time = time(8, 0)
    admin_latest_time: time = time(22, 0)

    def closing_time_for(self, day: date) -> time:
        if day.weekday() == SATURDAY:
            return self.saturday_closing_time
        return self.weekday_closing_time

    def is_closed_weekday(self, day: date) -> bool:
        return day.weekday() in self.closed_weekdays

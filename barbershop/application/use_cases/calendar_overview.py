from __future__ import annotations

import calendar
import logging
import threading
from dataclasses import dataclass
from datetime import date

from barbershop.application.ports.appointment_store import AppointmentStorePort
from barbershop.application.ports.document_store import Unsubscribe
from barbershop.domain.entities.appointment import AppointmentStatus


@dataclass(frozen=True)
class DayStats:
    active: int = 0
    completed: int = 0
    cancelled: int = 0
    disabled: bool = False


class CalendarOverview:
    """
    Per-day appointment counts for the staff calendar.

    Store notifications only mark the cached counts stale; the recount runs
    when a caller asks for a snapshot, never inside the notification.
    """

    def __init__(self, appointments: AppointmentStorePort) -> None:
        self._appointments = appointments
        self._lock = threading.Lock()
        self._stale = True
        self._cache: dict[date, DayStats] = {}
        self._unsubscribers: list[Unsubscribe] = []
        self._logger = logging.getLogger(__name__)

    @property
    def stale(self) -> bool:
        return self._stale

    def watch(self) -> None:
        if self._unsubscribers:
            return
        for path in self._appointments.watched_paths():
            self._unsubscribers.append(self._appointments.subscribe(path, self._mark_stale))

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def snapshot(self) -> dict[date, DayStats]:
        with self._lock:
            if self._stale:
                # Cleared first so a change arriving mid-recount marks it stale again.
                self._stale = False
                try:
                    self._cache = self._recount()
                except Exception:
                    self._stale = True
                    raise
            return dict(self._cache)

    def month(self, year: int, month: int) -> dict[date, DayStats]:
        stats = self.snapshot()
        days = calendar.monthrange(year, month)[1]
        return {
            date(year, month, number): stats.get(date(year, month, number), DayStats())
            for number in range(1, days + 1)
        }

    def _mark_stale(self, path: str) -> None:
        self._stale = True
        self._logger.debug("Calendar marked stale", extra={"path": path})

    def _recount(self) -> dict[date, DayStats]:
        counts: dict[date, dict[str, int]] = {}
        for appointment in self._appointments.list_appointments():
            day_counts = counts.setdefault(appointment.day, {"active": 0, "completed": 0, "cancelled": 0})
            if appointment.status == AppointmentStatus.ACTIVE:
                day_counts["active"] += 1
            elif appointment.status == AppointmentStatus.COMPLETED:
                day_counts["completed"] += 1
            else:
                day_counts["cancelled"] += 1

        disabled = self._appointments.get_disabled_dates()
        stats = {day: DayStats(disabled=day in disabled, **day_counts) for day, day_counts in counts.items()}
        for day in disabled - counts.keys():
            stats[day] = DayStats(disabled=True)
        return stats

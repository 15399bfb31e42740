from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from barbershop.domain.entities.booking_session import BookingSession


class BookingError(RuntimeError):
    """Base for failures reported back to whoever started the operation."""
    pass


class InvalidSelection(BookingError):
    """Raised when services, date, time or customer data are missing at a step that needs them."""
    pass


class RuleViolation(BookingError):
    """Raised when a date or time breaks a fixed calendar rule (closed weekday, past time, after hours)."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class SlotConflict(BookingError):
    """Raised when the chosen slot was taken between listing and confirming."""

    def __init__(self, message: str, session: BookingSession) -> None:
        super().__init__(message)
        self.session = session


class StoreUnavailable(BookingError):
    """Raised when the document store cannot be read or written (network, disk, bad payload)."""

    def __init__(self, message: str, session: BookingSession | None = None) -> None:
        super().__init__(message)
        self.session = session


class AppointmentNotFound(BookingError):
    """Raised when a status change or staff edit names an appointment that does not exist or is no longer active."""
    pass

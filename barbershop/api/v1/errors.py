from fastapi import HTTPException

from barbershop.application.exceptions import (
    AppointmentNotFound,
    BookingError,
    InvalidSelection,
    RuleViolation,
    SlotConflict,
    StoreUnavailable,
)


def to_http_error(e: BookingError) -> HTTPException:
    if isinstance(e, SlotConflict):
        return HTTPException(
            status_code=409,
            detail={
                "message": str(e),
                "available_slots": [slot.strftime("%H:%M") for slot in e.session.available_slots],
            },
        )
    if isinstance(e, RuleViolation):
        return HTTPException(status_code=422, detail={"message": str(e), "reason": e.reason})
    if isinstance(e, InvalidSelection):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, AppointmentNotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, StoreUnavailable):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))

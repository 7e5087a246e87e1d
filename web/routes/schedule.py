"""Per-user schedule routes: /users/{user_id}/*"""

from fastapi import APIRouter, Depends, Form

from shuttle.service import ShuttleService
from web import get_service
from web.auth import require_auth

router = APIRouter(prefix="/users/{user_id}")


@router.put("/time")
def set_time(user_id: str, value: str = Form(...),
             service: ShuttleService = Depends(get_service),
             _user: str = Depends(require_auth)):
    tod = service.set_time(user_id, value)
    return {"message": f"Time set to {tod}", "time": str(tod)}


@router.put("/departure")
def set_departure(user_id: str, value: str = Form(...),
                  service: ShuttleService = Depends(get_service),
                  _user: str = Depends(require_auth)):
    record = service.set_departure_id(user_id, value)
    return {
        "message": f"Departure id set to {record.departure_label}",
        "departure_id": record.departure_label,
        "predicted": record.predicted,
    }


@router.post("/schedule")
def schedule(user_id: str, service: ShuttleService = Depends(get_service),
             _user: str = Depends(require_auth)):
    armed = service.schedule(user_id)
    verb = "rescheduled" if armed.replaced else "scheduled"
    return {
        "message": f"Booking of departure {armed.departure} {verb} for {armed.run_at.strftime('%H:%M:%S')}",
        "run_at": armed.run_at.isoformat(),
        "delay_seconds": armed.delay.total_seconds(),
        "replaced": armed.replaced,
    }


@router.post("/cancel")
def cancel(user_id: str, service: ShuttleService = Depends(get_service),
           _user: str = Depends(require_auth)):
    if service.cancel(user_id):
        return {"cancelled": True, "message": "Scheduled booking cancelled."}
    return {"cancelled": False, "message": "Nothing to cancel."}


@router.get("/status")
def status(user_id: str, service: ShuttleService = Depends(get_service),
           _user: str = Depends(require_auth)):
    return service.status(user_id)


@router.post("/book")
def book_now(user_id: str, departure_id: str | None = Form(None),
             service: ShuttleService = Depends(get_service),
             _user: str = Depends(require_auth)):
    outcome = service.book_now(user_id, departure_id)
    return {
        "success": outcome.success,
        "departure_id": outcome.departure_id,
        "detail": outcome.detail,
    }

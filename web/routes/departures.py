"""Departure listing routes: /users/{user_id}/departures/*"""

from fastapi import APIRouter, Depends

from shuttle.prediction import DepartureRecord, PredictedDeparture
from shuttle.service import ShuttleService
from web import get_service
from web.auth import require_auth

router = APIRouter(prefix="/users/{user_id}/departures")


def _departure(d: DepartureRecord) -> dict:
    return {
        "id": d.id,
        "name": d.name,
        "bus_id": d.bus_id,
        "bus_name": d.bus_name,
        "available_time": str(d.available_time) if d.available_time else None,
        "departure_time": str(d.departure_time) if d.departure_time else None,
        "no_return": d.no_return,
    }


def _predicted(p: PredictedDeparture) -> dict:
    return {**_departure(p.departure), "predicted_id": p.predicted_id, "label": p.label}


@router.get("/current")
def current(user_id: str, service: ShuttleService = Depends(get_service),
            _user: str = Depends(require_auth)):
    departures = service.current_departures(user_id)
    if not departures:
        return {"departures": [], "message": "No active buses found right now."}
    return {"departures": [_departure(d) for d in departures]}


@router.get("/predicted")
def predicted(user_id: str, service: ShuttleService = Depends(get_service),
              _user: str = Depends(require_auth)):
    result = service.predict(user_id)
    if result.is_empty:
        return {
            "status": "no_departures_in_window",
            "last_current_id": result.last_current_id,
            "departures": [],
        }
    return {
        "status": "ok",
        "last_current_id": result.last_current_id,
        "departures": [_predicted(p) for p in result.departures],
    }

"""History route: GET /history"""

from fastapi import APIRouter, Depends

from shuttle.service import ShuttleService
from web import get_service
from web.auth import require_auth

router = APIRouter()


@router.get("/history")
def history(limit: int = 100, service: ShuttleService = Depends(get_service),
            _user: str = Depends(require_auth)):
    return {"lines": service.history(limit=limit)}

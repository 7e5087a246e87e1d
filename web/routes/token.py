"""Token routes: /token"""

from fastapi import APIRouter, Depends, Form

from shuttle.service import ShuttleService
from web import get_service
from web.auth import require_auth

router = APIRouter(prefix="/token")


@router.get("")
def token_status(service: ShuttleService = Depends(get_service),
                 _user: str = Depends(require_auth)):
    present = service.auth.present
    return {"present": present, "masked": service.auth.masked() if present else None}


@router.put("")
def set_token(value: str = Form(...), service: ShuttleService = Depends(get_service),
              _user: str = Depends(require_auth)):
    masked = service.set_token(value)
    return {"message": "Token saved successfully.", "masked": masked}


@router.post("/acquire")
async def acquire_token(service: ShuttleService = Depends(get_service),
                        _user: str = Depends(require_auth)):
    masked = await service.acquire_token()
    return {"message": "Token obtained and saved.", "masked": masked}

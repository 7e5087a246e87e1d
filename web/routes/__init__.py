from fastapi import APIRouter

from .schedule import router as schedule_router
from .departures import router as departures_router
from .token import router as token_router
from .history import router as history_router

router = APIRouter()
router.include_router(schedule_router)
router.include_router(departures_router)
router.include_router(token_router)
router.include_router(history_router)

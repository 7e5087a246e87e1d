"""FastAPI application with APScheduler lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shuttle.exceptions import (AcquisitionError, AuthError, BookingError, FormatError,
                                NetworkError, PreconditionError)
from shuttle.service import ShuttleService, build_service
from web.routes import router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FormatError)
    async def format_error(request: Request, exc: FormatError):
        return _error(422, str(exc))

    @app.exception_handler(PreconditionError)
    async def precondition_error(request: Request, exc: PreconditionError):
        return _error(409, str(exc), missing=exc.missing)

    @app.exception_handler(AuthError)
    async def auth_error(request: Request, exc: AuthError):
        return _error(401, "Token invalid: it might be expired. Set or acquire a new one.")

    @app.exception_handler(NetworkError)
    @app.exception_handler(BookingError)
    async def upstream_error(request: Request, exc: Exception):
        log.warning("Platform call failed: %s", exc)
        return _error(502, str(exc))

    @app.exception_handler(AcquisitionError)
    async def acquisition_error(request: Request, exc: AcquisitionError):
        return _error(502, "Could not obtain a token. Check the server log.")


def create_app(service: ShuttleService | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.service = service or build_service()
        app.state.service.start()
        yield
        app.state.service.shutdown()

    app = FastAPI(title="Shuttle Seat Booker", lifespan=lifespan)
    app.include_router(router)
    _register_error_handlers(app)
    return app


app = create_app()

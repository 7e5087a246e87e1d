from fastapi import Request

from shuttle.service import ShuttleService


def get_service(request: Request) -> ShuttleService:
    return request.app.state.service

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger

from src.auth import get_caller
from src.config import settings
from src.dispatcher import NotificationDispatcher
from src.providers import FirebaseMessagingProvider, FirestoreUserDirectory
from src.schemas import CallerContext

router = APIRouter(tags=["REST"])

notification_dispatcher = NotificationDispatcher(
    FirestoreUserDirectory(), FirebaseMessagingProvider()
)


def get_dispatcher() -> NotificationDispatcher:
    return notification_dispatcher


async def _callable_data(request: Request) -> Any:
    """Unwrap the {"data": ...} envelope; anything unreadable yields None."""
    try:
        envelope = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(envelope, dict):
        return None
    return envelope.get("data")


@router.get("/")
async def root():
    """Root endpoint for checking server status"""
    logger.info("[GET][/] Root endpoint accessed")
    return JSONResponse(
        {
            "status": "ok",
            "service": "Broadcast Notification Service",
            "endpoints": {
                "sendGlobalNotification": "/sendGlobalNotification",
                "status": "/status",
            },
        }
    )


@router.get("/status")
async def get_status():
    """Service configuration summary"""
    logger.info("[GET][/status] Status endpoint accessed")
    return {
        "status": "running",
        "project_id": settings.firebase_project_id,
        "default_topic": settings.default_topic,
        "dry_run": settings.notification_dry_run,
    }


@router.post("/sendGlobalNotification")
async def send_global_notification(
    request: Request,
    caller: Optional[CallerContext] = Depends(get_caller),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """
    Callable endpoint: broadcast a notification to a topic.
    Only callers whose directory role is "admin" may use it.
    """
    logger.info(
        f"[POST][/sendGlobalNotification] called by {caller.uid if caller else 'anonymous'}"
    )
    payload = await _callable_data(request)
    result = await dispatcher.dispatch(caller, payload)
    return {"result": result.model_dump(by_alias=True)}

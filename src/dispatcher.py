from typing import Any, Optional, Protocol

from loguru import logger
from pydantic import ValidationError

from src.config import (
    ADMIN_ROLE,
    CLICK_ACTION,
    NOTIFICATION_TITLE_STRIP,
    settings,
)
from src.errors import (
    DirectoryError,
    Internal,
    InvalidArgument,
    PermissionDenied,
    ProviderError,
    Unauthenticated,
)
from src.schemas import (
    AndroidHints,
    CallerContext,
    DispatchResult,
    NotificationRequest,
    OutboundMessage,
    UserRecord,
)


class UserDirectory(Protocol):
    async def get_user_record(self, uid: str) -> Optional[UserRecord]: ...


class MessagingProvider(Protocol):
    async def send(self, message: OutboundMessage) -> str: ...


def build_message(
    request: NotificationRequest,
    default_topic: Optional[str] = None,
    android_channel_id: Optional[str] = None,
) -> OutboundMessage:
    """
    Build the provider-neutral message for a validated request.
    The click-action marker always overrides a caller key of the same name.
    """
    return OutboundMessage(
        title=request.title,
        body=request.body,
        data={**(request.data or {}), "click_action": CLICK_ACTION},
        topic=request.topic or default_topic or settings.default_topic,
        android=AndroidHints(
            channel_id=android_channel_id or settings.android_channel_id
        ),
    )


def _short(text: str) -> str:
    if len(text) > NOTIFICATION_TITLE_STRIP:
        return text[:NOTIFICATION_TITLE_STRIP] + "..."
    return text


class NotificationDispatcher:
    """
    Broadcasts a notification on behalf of an admin caller:
    - rejects anonymous callers before touching any collaborator
    - separates "lookup failed" (internal) from "not admin" (permission-denied)
    - validates the payload only after authorization
    - single send attempt, no retry
    """

    def __init__(
        self,
        directory: UserDirectory,
        provider: MessagingProvider,
        default_topic: Optional[str] = None,
        android_channel_id: Optional[str] = None,
    ) -> None:
        self.directory = directory
        self.provider = provider
        self.default_topic = default_topic
        self.android_channel_id = android_channel_id

    async def dispatch(
        self, caller: Optional[CallerContext], payload: Any
    ) -> DispatchResult:
        if caller is None:
            raise Unauthenticated("The function must be called while authenticated.")

        await self._ensure_admin(caller)

        request = self._parse(payload)
        message = build_message(request, self.default_topic, self.android_channel_id)

        logger.info(
            f'Sending notification: "{_short(request.title)}" to topic {message.topic}'
        )
        try:
            message_id = await self.provider.send(message)
        except ProviderError as exc:
            logger.error(f"Error sending notification: {exc}")
            raise Internal(f"Error sending notification: {exc}") from exc
        except Exception as exc:
            logger.exception(f"Unexpected provider failure: {exc}")
            raise Internal(f"Error sending notification: {exc}") from exc

        logger.info(f"Successfully sent notification: {message_id}")
        return DispatchResult(success=True, message_id=message_id)

    async def _ensure_admin(self, caller: CallerContext) -> None:
        try:
            record = await self.directory.get_user_record(caller.uid)
        except DirectoryError as exc:
            logger.error(f"Error verifying admin status for {caller.uid}: {exc}")
            raise Internal("Error verifying admin status.") from exc
        except Exception as exc:
            logger.exception(f"Unexpected directory failure for {caller.uid}: {exc}")
            raise Internal("Error verifying admin status.") from exc

        if record is None or record.role != ADMIN_ROLE:
            logger.warning(f"Broadcast refused: {caller.uid} is not an admin")
            raise PermissionDenied("Only admins can send global notifications.")

    @staticmethod
    def _parse(payload: Any) -> NotificationRequest:
        if not isinstance(payload, dict):
            raise InvalidArgument("The request data must be an object.")
        try:
            return NotificationRequest.model_validate(payload)
        except ValidationError as exc:
            logger.warning(f"Rejected notification payload: {exc.error_count()} errors")
            raise InvalidArgument(
                'The function must be called with "title" and "body" arguments.'
            ) from exc

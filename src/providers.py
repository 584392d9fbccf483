import asyncio
import threading
from typing import Optional

import firebase_admin
from firebase_admin import auth, firestore, messaging
from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from loguru import logger

from src.config import settings
from src.errors import (
    DirectoryError,
    Internal,
    ProviderError,
    Unauthenticated,
)
from src.schemas import CallerContext, OutboundMessage, UserRecord

_app_lock = threading.Lock()


def get_firebase_app() -> firebase_admin.App:
    """
    Return the default Firebase app, initializing it on first use.
    Credentials come from GOOGLE_APPLICATION_CREDENTIALS or the runtime's
    application default credentials. Safe to call from worker threads.
    """
    with _app_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            project_id = settings.firebase_project_id
            options = {"projectId": project_id} if project_id else None
            logger.info(f"Initializing Firebase app (project: {project_id or 'default'})")
            return firebase_admin.initialize_app(options=options)


class FirestoreUserDirectory:
    """Role lookup against users/{uid} documents in Firestore."""

    def __init__(self, collection: Optional[str] = None, client=None) -> None:
        self.collection = collection or settings.users_collection
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = firestore.client(app=get_firebase_app())
        return self._client

    async def get_user_record(self, uid: str) -> Optional[UserRecord]:
        return await asyncio.to_thread(self._read, uid)

    def _read(self, uid: str) -> Optional[UserRecord]:
        try:
            snapshot = self.client.collection(self.collection).document(uid).get()
        except (GoogleAPIError, GoogleAuthError, FirebaseError, ValueError) as exc:
            raise DirectoryError(f"User lookup failed for {uid}: {exc}") from exc

        if not snapshot.exists:
            return None

        data = snapshot.to_dict()
        if not isinstance(data, dict):
            raise DirectoryError(f"Malformed user record for {uid}")

        role = data.get("role")
        if role is not None and not isinstance(role, str):
            raise DirectoryError(f"Malformed role for {uid}: {role!r}")

        return UserRecord(role=role)


class FirebaseMessagingProvider:
    """Sends OutboundMessage objects through Firebase Cloud Messaging."""

    def __init__(self, dry_run: Optional[bool] = None) -> None:
        self.dry_run = settings.notification_dry_run if dry_run is None else dry_run

    @staticmethod
    def to_firebase(message: OutboundMessage) -> messaging.Message:
        android = message.android
        return messaging.Message(
            notification=messaging.Notification(title=message.title, body=message.body),
            data=dict(message.data),
            topic=message.topic,
            android=messaging.AndroidConfig(
                priority=android.priority,
                notification=messaging.AndroidNotification(
                    sound=android.sound,
                    priority=android.notification_priority,
                    default_sound=android.default_sound,
                    default_vibrate_timings=android.default_vibrate_timings,
                    channel_id=android.channel_id,
                ),
            ),
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(
                    aps=messaging.Aps(sound=message.apns.sound, badge=message.apns.badge)
                )
            ),
        )

    async def send(self, message: OutboundMessage) -> str:
        return await asyncio.to_thread(self._send, self.to_firebase(message))

    def _send(self, message: messaging.Message) -> str:
        try:
            return messaging.send(message, dry_run=self.dry_run, app=get_firebase_app())
        except (FirebaseError, GoogleAuthError, ValueError) as exc:
            raise ProviderError(str(exc)) from exc


class FirebaseTokenVerifier:
    """Turns a Firebase ID token into a CallerContext."""

    def __init__(self, check_revoked: bool = False) -> None:
        self.check_revoked = check_revoked

    async def verify(self, id_token: str) -> CallerContext:
        return await asyncio.to_thread(self._verify, id_token)

    def _verify(self, id_token: str) -> CallerContext:
        if not isinstance(id_token, str) or not id_token.strip():
            raise Unauthenticated("Missing ID token.")

        try:
            claims = auth.verify_id_token(
                id_token, app=get_firebase_app(), check_revoked=self.check_revoked
            )
        except (auth.InvalidIdTokenError, auth.UserDisabledError) as exc:
            logger.warning(f"Rejected ID token: {exc}")
            raise Unauthenticated("Invalid or expired ID token.") from exc
        except (FirebaseError, GoogleAuthError, ValueError) as exc:
            logger.exception(f"ID token verification failed: {exc}")
            raise Internal("Error verifying caller identity.") from exc

        return CallerContext(uid=claims["uid"], claims=claims)

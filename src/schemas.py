from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CallerContext(BaseModel):
    """Verified identity of the caller"""

    uid: str
    claims: Dict[str, Any] = Field(default_factory=dict)


class UserRecord(BaseModel):
    """Directory entry used for the role check"""

    role: Optional[str] = None


class NotificationRequest(BaseModel):
    """Model for broadcast notification requests"""

    title: str = Field(min_length=1)
    body: str = Field(min_length=1)
    data: Optional[Dict[str, str]] = None
    topic: Optional[str] = None


class AndroidHints(BaseModel):
    priority: str = "high"
    sound: str = "default"
    notification_priority: str = "high"
    default_sound: bool = True
    default_vibrate_timings: bool = True
    channel_id: str


class ApnsHints(BaseModel):
    sound: str = "default"
    badge: int = 1


class OutboundMessage(BaseModel):
    """Provider-neutral message handed to a MessagingProvider"""

    title: str
    body: str
    data: Dict[str, str]
    topic: str
    android: AndroidHints
    apns: ApnsHints = Field(default_factory=ApnsHints)


class DispatchResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message_id: str = Field(alias="messageId")

"""
Push notification schemas.
"""
from typing import Any, Dict, Optional

from pydantic import Field

from .common import CamelModel


class RegisterTokenRequest(CamelModel):
    fcm_token: str = Field(..., min_length=1)
    platform: str = "android"


class UnregisterTokenRequest(CamelModel):
    fcm_token: Optional[str] = Field(None, description="Deactivate only this token; all of the caller's otherwise")


class SendNotificationRequest(CamelModel):
    title: str
    body: str
    data: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = Field(None, description="Target user; omit to broadcast (elevated roles only)")


class SendNotificationResult(CamelModel):
    success: bool = True
    message: str = "Notifications sent"
    success_count: int
    failure_count: int


class TopicNotificationRequest(CamelModel):
    topic: str = Field(..., min_length=1)
    title: str
    body: str
    data: Optional[Dict[str, Any]] = None


class TopicNotificationResult(CamelModel):
    success: bool = True
    message: str = "Topic notification sent successfully"
    message_id: str


class SaveNotificationRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    title: str
    body: str
    type: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

"""
Firebase Cloud Messaging helper functions
"""
import json
import logging
from typing import Dict, Optional

import firebase_admin
from firebase_admin import credentials, exceptions, messaging

from ..config import settings

logger = logging.getLogger(__name__)

APP_NAME = "stylu"


def initialize_firebase() -> Optional[firebase_admin.App]:
    """Create the process-wide Firebase app, or return None when unconfigured.

    Called once from the startup hook; request handlers never create it.
    """
    raw = settings.FIREBASE_SERVICE_ACCOUNT_JSON.strip()
    if not raw:
        logger.warning("FIREBASE_SERVICE_ACCOUNT_JSON not set, push notifications disabled")
        return None

    # Accept either the service-account document itself or a path to it
    cert = credentials.Certificate(json.loads(raw) if raw.startswith("{") else raw)
    app = firebase_admin.initialize_app(cert, name=APP_NAME)
    logger.info(f"Firebase app '{APP_NAME}' initialized")
    return app


def shutdown_firebase(app: Optional[firebase_admin.App]) -> None:
    if app is None:
        return
    firebase_admin.delete_app(app)
    logger.info(f"Firebase app '{APP_NAME}' deleted")


def is_unregistered_token_error(exc: Exception) -> bool:
    """True when FCM says the registration token should no longer be used."""
    if isinstance(exc, messaging.UnregisteredError):
        return True
    if isinstance(exc, exceptions.InvalidArgumentError):
        return "registration token" in str(exc).lower()
    return False


class FirebaseMessenger:
    """Builds and sends single-recipient or topic messages."""

    def __init__(self, app: Optional[firebase_admin.App] = None, channel_id: Optional[str] = None):
        self.app = app
        self.channel_id = channel_id or settings.FCM_ANDROID_CHANNEL_ID

    def build_message(
        self,
        title: str,
        body: str,
        data: Optional[Dict[str, str]] = None,
        token: Optional[str] = None,
        topic: Optional[str] = None,
    ) -> messaging.Message:
        return messaging.Message(
            token=token,
            topic=topic,
            notification=messaging.Notification(title=title, body=body),
            data=data or {},
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(
                    channel_id=self.channel_id,
                    sound="default",
                    priority="max",
                ),
            ),
        )

    def send(self, message: messaging.Message) -> str:
        """Send one message and return the provider's message id."""
        return messaging.send(message, app=self.app)

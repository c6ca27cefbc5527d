"""
Device token registry and push delivery through Firebase Cloud Messaging.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from firebase_admin import exceptions as firebase_exceptions

from ..clients.fcm import FirebaseMessenger, is_unregistered_token_error
from ..clients.postgrest import Query, SupabaseClient
from ..config import settings
from ..core.exceptions import AuthorizationError, ExternalServiceError, NotFoundError, safe_execute
from ..core.security import AuthenticatedUser
from ..schemas.push import (
    RegisterTokenRequest,
    SaveNotificationRequest,
    SendNotificationRequest,
    SendNotificationResult,
    TopicNotificationRequest,
    TopicNotificationResult,
    UnregisterTokenRequest,
)

logger = logging.getLogger(__name__)

TOKENS_TABLE = "device_tokens"


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def register_token(client: SupabaseClient, user: AuthenticatedUser, payload: RegisterTokenRequest) -> None:
    """Upsert by token value: a token moves to whichever user registered it last."""
    by_token = Query("*").eq("fcm_token", payload.fcm_token)
    existing = client.select(TOKENS_TABLE, by_token, token=user.token)

    if existing:
        values = {
            "user_id": user.user_id,
            "is_active": True,
            "platform": payload.platform,
            "updated_at": _utcnow(),
        }
        client.update(TOKENS_TABLE, values, Query().eq("fcm_token", payload.fcm_token), token=user.token)
        logger.info(f"Re-registered device token for user {user.user_id} ({payload.platform})")
    else:
        row = {
            "user_id": user.user_id,
            "fcm_token": payload.fcm_token,
            "platform": payload.platform,
            "is_active": True,
        }
        client.insert(TOKENS_TABLE, row, token=user.token)
        logger.info(f"Registered new device token for user {user.user_id} ({payload.platform})")


def unregister_token(client: SupabaseClient, user: AuthenticatedUser, payload: UnregisterTokenRequest) -> None:
    query = Query().eq("user_id", user.user_id)
    if payload.fcm_token:
        query.eq("fcm_token", payload.fcm_token)
    client.update(TOKENS_TABLE, {"is_active": False}, query, token=user.token)
    logger.info(f"Deactivated device token(s) for user {user.user_id}")


def mark_token_inactive(client: SupabaseClient, fcm_token: str, auth_token: str) -> None:
    client.update(TOKENS_TABLE, {"is_active": False}, Query().eq("fcm_token", fcm_token), token=auth_token)


def stringify_data(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """FCM data payloads only carry strings."""
    if not data:
        return {}
    return {
        str(key): value if isinstance(value, str) else json.dumps(value)
        for key, value in data.items()
    }


def resolve_tokens(client: SupabaseClient, caller: AuthenticatedUser, target_user: Optional[str]) -> List[str]:
    """Active tokens of ``target_user``, or of everyone for elevated callers."""
    query = Query("fcm_token").eq("is_active", True)
    if target_user:
        query.eq("user_id", target_user)
    elif caller.role not in settings.broadcast_roles:
        logger.warning(f"User {caller.user_id} with role {caller.role!r} attempted a broadcast push")
        raise AuthorizationError("Broadcasting to all devices requires an elevated role")

    rows = client.select(TOKENS_TABLE, query, token=caller.token)
    return [row["fcm_token"] for row in rows if row.get("fcm_token")]


def send_notification(
    client: SupabaseClient,
    messenger: FirebaseMessenger,
    caller: AuthenticatedUser,
    request: SendNotificationRequest,
) -> SendNotificationResult:
    """
    Deliver one message per active token and tally the outcome.

    Each delivery is isolated: a failing token never aborts the batch. Tokens
    FCM reports as unregistered are deactivated on a best-effort basis.
    """
    tokens = resolve_tokens(client, caller, request.user_id)
    if not tokens:
        raise NotFoundError("Active device token")

    data = stringify_data(request.data)
    success_count = 0
    failure_count = 0

    for fcm_token in tokens:
        message = messenger.build_message(request.title, request.body, data=data, token=fcm_token)
        try:
            messenger.send(message)
            success_count += 1
        except Exception as e:
            failure_count += 1
            logger.warning(f"Push to token ...{fcm_token[-8:]} failed: {type(e).__name__}: {e}")
            if is_unregistered_token_error(e):
                safe_execute(mark_token_inactive, client, fcm_token, caller.token)

    logger.info(f"Push dispatch finished: {success_count} sent, {failure_count} failed")
    return SendNotificationResult(success_count=success_count, failure_count=failure_count)


def send_to_topic(messenger: FirebaseMessenger, request: TopicNotificationRequest) -> TopicNotificationResult:
    message = messenger.build_message(
        request.title,
        request.body,
        data=stringify_data(request.data),
        topic=request.topic,
    )
    try:
        message_id = messenger.send(message)
    except firebase_exceptions.FirebaseError as e:
        logger.error(f"Topic push to '{request.topic}' failed: {e}")
        raise ExternalServiceError("Firebase", str(e))
    return TopicNotificationResult(message_id=message_id)


def save_notification(service_client: SupabaseClient, request: SaveNotificationRequest) -> Dict[str, Any]:
    """Store a notification with the service credential, independent of any user session."""
    row = {
        "user_id": request.user_id,
        "title": request.title,
        "body": request.body,
        "type": request.type,
        "data": request.data,
        "is_read": False,
    }
    created = service_client.insert("notifications", row)
    logger.info(f"Saved notification for user {request.user_id}")
    return created[0] if created else row

from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..clients.fcm import FirebaseMessenger
from ..clients.postgrest import SupabaseClient
from ..config import settings
from ..core.security import AuthenticatedUser, get_current_user
from ..dependencies import get_messenger, get_service_client, get_supabase_client
from ..schemas import (
    MessageResponse,
    RegisterTokenRequest,
    SaveNotificationRequest,
    SendNotificationRequest,
    SendNotificationResult,
    TopicNotificationRequest,
    TopicNotificationResult,
    UnregisterTokenRequest,
)
from ..services import push as push_service

# Rate limiter for push endpoints (registered on app.state in main)
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(
    prefix="/api/PushNotification",
    tags=["push-notifications"],
    responses={
        401: {"description": "Not authenticated - missing or invalid bearer token"},
        429: {"description": "Too many requests - rate limit exceeded"},
    }
)


@router.post("/register", response_model=MessageResponse)
@limiter.limit(settings.PUSH_RATE_LIMIT)
def register_token(
    request: Request,
    payload: RegisterTokenRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    push_service.register_token(client, user, payload)
    return MessageResponse(message="Token registered successfully")


@router.post("/unregister", response_model=MessageResponse)
def unregister_token(
    payload: UnregisterTokenRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    push_service.unregister_token(client, user, payload)
    return MessageResponse(message="Token unregistered successfully")


@router.post("/send", response_model=SendNotificationResult)
@limiter.limit(settings.PUSH_RATE_LIMIT)
def send_notification(
    request: Request,
    payload: SendNotificationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
    messenger: FirebaseMessenger = Depends(get_messenger),
):
    """
    Push to every active device of `userId`.
    Omitting `userId` broadcasts to all devices and needs an elevated role.
    """
    return push_service.send_notification(client, messenger, user, payload)


@router.post("/send-to-topic", response_model=TopicNotificationResult)
@limiter.limit(settings.PUSH_RATE_LIMIT)
def send_to_topic(
    request: Request,
    payload: TopicNotificationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    messenger: FirebaseMessenger = Depends(get_messenger),
):
    return push_service.send_to_topic(messenger, payload)


@router.post("/save", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.PUSH_RATE_LIMIT)
def save_notification(
    request: Request,
    payload: SaveNotificationRequest,
    service_client: SupabaseClient = Depends(get_service_client),
):
    """
    Persist a notification for a user.

    Authenticates to Supabase as the service, not as the caller, so it works
    while the app is logged out.
    """
    saved = push_service.save_notification(service_client, payload)
    return {"success": True, "message": "Notification saved", "data": saved}

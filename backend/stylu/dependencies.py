"""
Dependency wiring for the FastAPI app.
"""
from typing import Optional

import requests
from fastapi import Request

from .clients.fcm import FirebaseMessenger
from .clients.postgrest import SupabaseClient
from .config import settings
from .core.exceptions import ServiceUnavailableError

_supabase_client: Optional[SupabaseClient] = None
_service_client: Optional[SupabaseClient] = None
_session: Optional[requests.Session] = None


def _shared_session() -> requests.Session:
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def get_supabase_client() -> SupabaseClient:
    """Per-user data API client; callers pass their bearer token on every call."""
    global _supabase_client
    if _supabase_client:
        return _supabase_client

    if not settings.supabase_configured:
        raise ServiceUnavailableError("Supabase")
    _supabase_client = SupabaseClient(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        timeout=settings.HTTP_TIMEOUT,
        session=_shared_session(),
    )
    return _supabase_client


def get_service_client() -> SupabaseClient:
    """Data API client authenticated as the service role, not as the caller."""
    global _service_client
    if _service_client:
        return _service_client

    if not settings.service_role_configured:
        raise ServiceUnavailableError("Supabase service role")
    _service_client = SupabaseClient(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_ROLE_KEY,
        timeout=settings.HTTP_TIMEOUT,
        session=_shared_session(),
        fixed_token=settings.SUPABASE_SERVICE_ROLE_KEY,
    )
    return _service_client


def get_messenger(request: Request) -> FirebaseMessenger:
    """Messenger bound to the Firebase app created at startup."""
    firebase_app = getattr(request.app.state, "firebase_app", None)
    if firebase_app is None:
        raise ServiceUnavailableError("Firebase")
    return FirebaseMessenger(firebase_app)


def close_clients() -> None:
    global _supabase_client, _service_client, _session
    if _session is not None:
        _session.close()
    _supabase_client = None
    _service_client = None
    _session = None

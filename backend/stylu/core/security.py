"""
Bearer-token handling for Supabase-issued JWTs.

``verify_token`` checks signature, issuer, audience and lifetime with PyJWT
before any handler runs. ``extract_subject`` reads the ``sub`` claim straight
out of the payload segment without touching the signature; handlers take the
caller identity from it, and a token that yields no subject is rejected.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import jwt
from fastapi import Request

from ..config import settings
from .exceptions import AuthenticationError, ServiceUnavailableError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
BASE64URL_SEGMENT = re.compile(r"[A-Za-z0-9_-]+")


@dataclass
class AuthenticatedUser:
    user_id: str
    token: str
    email: Optional[str] = None
    role: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


def extract_subject(token: str) -> Optional[str]:
    """Return the ``sub`` claim of a ``header.payload.signature`` token, or None."""
    if not isinstance(token, str):
        return None
    parts = token.split(".")
    if len(parts) != 3:
        return None

    payload = parts[1]
    if not BASE64URL_SEGMENT.fullmatch(payload):
        return None
    padded = payload + "=" * (-len(payload) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
        claims = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError):
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        return None

    if not isinstance(claims, dict):
        return None
    sub = claims.get("sub")
    if not isinstance(sub, str) or not sub:
        return None
    return sub


def verify_token(token: str) -> Dict[str, Any]:
    """Validate a Supabase access token and return its claims."""
    if not settings.SUPABASE_JWT_SECRET:
        raise ServiceUnavailableError("JWT verification")

    try:
        return jwt.decode(
            token,
            settings.jwt_signing_key,
            algorithms=["HS256"],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.jwt_issuer,
            leeway=settings.JWT_LEEWAY_SECONDS,
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired bearer token")
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise AuthenticationError("Invalid token")


def bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    token = header[len(BEARER_PREFIX):] if header.startswith(BEARER_PREFIX) else header
    token = token.strip()
    if not token:
        raise AuthenticationError("Missing token")
    return token


def get_current_user(request: Request) -> AuthenticatedUser:
    """FastAPI dependency resolving the verified caller."""
    token = bearer_token(request)
    claims = verify_token(token)

    user_id = extract_subject(token)
    if not user_id:
        raise AuthenticationError("Invalid token")

    return AuthenticatedUser(
        user_id=user_id,
        token=token,
        email=claims.get("email"),
        role=claims.get("role"),
        claims=claims,
    )

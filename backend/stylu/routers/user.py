from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..config import settings
from ..core.security import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/User", tags=["user"])


@router.get("/profile")
def get_profile(user: AuthenticatedUser = Depends(get_current_user)):
    """Identity and metadata carried by the caller's verified token"""
    claims = user.claims
    return {
        "success": True,
        "userId": user.user_id,
        "email": user.email,
        "role": user.role,
        "audience": claims.get("aud"),
        "issuer": claims.get("iss"),
        "appMetadata": claims.get("app_metadata"),
        "userMetadata": claims.get("user_metadata"),
    }


@router.get("/test")
def test_endpoint():
    """Anonymous liveness probe"""
    return {
        "success": True,
        "message": "API is working correctly",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }

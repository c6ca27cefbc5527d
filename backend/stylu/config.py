"""
Configuration management for the Stylu backend
"""
import base64
import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


"""Application settings and configuration"""
class Settings:

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Frontend origins (for CORS)
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    # Supabase Configuration
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "").rstrip("/")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    SUPABASE_SERVICE_ROLE_KEY: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
    SUPABASE_JWT_SECRET: str = os.getenv("SUPABASE_JWT_SECRET", "")
    SUPABASE_JWT_SECRET_BASE64: bool = _as_bool(os.getenv("SUPABASE_JWT_SECRET_BASE64", "false"))

    # JWT validation
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "authenticated")
    JWT_LEEWAY_SECONDS: int = int(os.getenv("JWT_LEEWAY_SECONDS", "300"))  # 5 minutes of clock skew

    # Outbound HTTP
    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "10"))

    # Firebase Cloud Messaging
    FIREBASE_SERVICE_ACCOUNT_JSON: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "")
    FCM_ANDROID_CHANNEL_ID: str = os.getenv("FCM_ANDROID_CHANNEL_ID", "stylu_channel")

    # Roles allowed to push to every registered device
    BROADCAST_ROLES_RAW: str = os.getenv("BROADCAST_ROLES", "service_role,admin")

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = _as_bool(os.getenv("RATE_LIMIT_ENABLED", "true"))
    PUSH_RATE_LIMIT: str = os.getenv("PUSH_RATE_LIMIT", "30/minute")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() in ("development", "dev", "local")

    @property
    def jwt_issuer(self) -> str:
        """Supabase issues access tokens from the auth sub-path of the project URL"""
        return f"{self.SUPABASE_URL}/auth/v1"

    @property
    def jwt_signing_key(self) -> bytes:
        if self.SUPABASE_JWT_SECRET_BASE64:
            return base64.b64decode(self.SUPABASE_JWT_SECRET)
        return self.SUPABASE_JWT_SECRET.encode("utf-8")

    @property
    def broadcast_roles(self) -> List[str]:
        return [r.strip() for r in self.BROADCAST_ROLES_RAW.split(",") if r.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    """Check if Supabase is properly configured"""
    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    @property
    def service_role_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY)

    @property
    def firebase_configured(self) -> bool:
        return bool(self.FIREBASE_SERVICE_ACCOUNT_JSON)

settings = Settings()

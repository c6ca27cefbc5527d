import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from stylu.clients.fcm import initialize_firebase, shutdown_firebase
from stylu.config import settings
from stylu.core import (
    StyluException,
    generic_exception_handler,
    http_exception_handler,
    rate_limit_exception_handler,
    stylu_exception_handler,
    validation_exception_handler,
)
from stylu.dependencies import close_clients
from stylu.routers import calendar, outfits, push, user
from stylu.schemas import HealthResponse

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Stylu API",
    description="Backend-for-frontend for the Stylu wardrobe app",
    version="1.0.0"
)

# CORS configuration
# Mobile clients send no Origin; browsers in production are restricted to CORS_ORIGINS
allowed_origins = settings.cors_origins if settings.ENVIRONMENT == "production" and settings.cors_origins else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allowed_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = push.limiter
app.state.firebase_app = None

app.add_exception_handler(StyluException, stylu_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.on_event("startup")
def start_integrations() -> None:
    """Create the Firebase app once per process, before any request is served"""
    app.state.firebase_app = initialize_firebase()
    if not settings.supabase_configured:
        logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set, data endpoints will return 503")
    logger.info("🚀 Stylu API started")


@app.on_event("shutdown")
def stop_integrations() -> None:
    shutdown_firebase(app.state.firebase_app)
    app.state.firebase_app = None
    close_clients()


# Include routers
app.include_router(calendar.router)
app.include_router(outfits.router)
app.include_router(push.router)
app.include_router(user.router)


@app.get("/health", response_model=HealthResponse)
@app.head("/health")
def health_check():
    """Configuration-level health; does not call Supabase or Firebase"""
    return HealthResponse(
        status="ok",
        supabase="configured" if settings.supabase_configured else "missing",
        firebase="ready" if app.state.firebase_app is not None else "disabled",
    )


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Welcome to Stylu API",
        "version": app.version,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("stylu.main:app", host="0.0.0.0", port=settings.PORT, reload=settings.is_development)

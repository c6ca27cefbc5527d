"""
Pydantic schemas for the Stylu API.

Import all schemas here for easy access.
"""
from .common import CamelModel, HealthResponse, MessageResponse
from .outfit import (
    LayoutData,
    OutfitItemInput,
    OutfitCreate,
    OutfitUpdate,
    OutfitItemView,
    OutfitView,
    OutfitCreated,
)
from .calendar import (
    ScheduleCreate,
    ScheduleUpdate,
    ScheduleView,
    ScheduledOutfit,
    OrphanedSchedule,
    ScheduledOutfitsResponse,
)
from .push import (
    RegisterTokenRequest,
    UnregisterTokenRequest,
    SendNotificationRequest,
    SendNotificationResult,
    TopicNotificationRequest,
    TopicNotificationResult,
    SaveNotificationRequest,
)

__all__ = [
    # Common
    "CamelModel",
    "HealthResponse",
    "MessageResponse",
    # Outfit
    "LayoutData",
    "OutfitItemInput",
    "OutfitCreate",
    "OutfitUpdate",
    "OutfitItemView",
    "OutfitView",
    "OutfitCreated",
    # Calendar
    "ScheduleCreate",
    "ScheduleUpdate",
    "ScheduleView",
    "ScheduledOutfit",
    "OrphanedSchedule",
    "ScheduledOutfitsResponse",
    # Push
    "RegisterTokenRequest",
    "UnregisterTokenRequest",
    "SendNotificationRequest",
    "SendNotificationResult",
    "TopicNotificationRequest",
    "TopicNotificationResult",
    "SaveNotificationRequest",
]

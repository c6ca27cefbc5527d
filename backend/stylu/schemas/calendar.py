"""
Calendar (outfit schedule) schemas.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import Field

from .common import CamelModel
from .outfit import OutfitView


class ScheduleCreate(CamelModel):
    """Schedule an outfit for a calendar date"""
    outfit_id: int
    event_date: date = Field(..., description="ISO calendar date, e.g. 2024-01-31")
    event_name: Optional[str] = None
    notes: Optional[str] = None


class ScheduleUpdate(CamelModel):
    """Partial update; only fields present in the request are written"""
    outfit_id: Optional[int] = None
    event_date: Optional[date] = None
    event_name: Optional[str] = None
    notes: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        row = self.model_dump(exclude_unset=True)
        if row.get("event_date") is not None:
            row["event_date"] = row["event_date"].isoformat()
        return row


class ScheduleView(CamelModel):
    schedule_id: int
    user_id: str
    outfit_id: int
    event_date: str
    event_name: Optional[str] = None
    notes: Optional[str] = None


class ScheduledOutfit(CamelModel):
    schedule_id: int
    event_date: str
    outfit: OutfitView
    event_name: Optional[str] = None
    notes: Optional[str] = None
    weather: Optional[Any] = None  # placeholder, never populated


class OrphanedSchedule(CamelModel):
    """A schedule whose outfit could not be loaded"""
    schedule_id: int
    outfit_id: int
    event_date: str
    event_name: Optional[str] = None
    reason: str


class ScheduledOutfitsResponse(CamelModel):
    scheduled: List[ScheduledOutfit] = []
    orphaned: List[OrphanedSchedule] = []

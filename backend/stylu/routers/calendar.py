from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..clients.postgrest import SupabaseClient
from ..config import settings
from ..core.security import AuthenticatedUser, get_current_user
from ..dependencies import get_supabase_client
from ..schemas import (
    MessageResponse,
    ScheduleCreate,
    ScheduledOutfitsResponse,
    ScheduleUpdate,
    ScheduleView,
)
from ..services import calendar as calendar_service

router = APIRouter(
    prefix="/api/Calendar",
    tags=["calendar"],
    responses={
        401: {"description": "Not authenticated - missing or invalid bearer token"},
    }
)


@router.post("/schedule", response_model=ScheduleView, status_code=status.HTTP_201_CREATED)
def schedule_outfit(
    payload: ScheduleCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    """Schedule an outfit for a specific date"""
    return calendar_service.schedule_outfit(client, user, payload)


@router.get("/scheduled", response_model=ScheduledOutfitsResponse)
def get_scheduled_outfits(
    start_date: date = Query(..., alias="startDate", description="First day, inclusive (YYYY-MM-DD)"),
    end_date: date = Query(..., alias="endDate", description="Last day, inclusive (YYYY-MM-DD)"),
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    """
    Scheduled outfits within a date range, ascending by date.
    Schedules whose outfit no longer exists are listed under `orphaned`.
    """
    return calendar_service.get_scheduled_outfits(client, user, start_date, end_date)


@router.put("/schedule/{schedule_id}", response_model=MessageResponse)
def update_schedule(
    schedule_id: int,
    payload: ScheduleUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    calendar_service.update_schedule(client, user, schedule_id, payload)
    return MessageResponse(message="Schedule updated successfully")


@router.delete("/schedule/{schedule_id}", response_model=MessageResponse)
def delete_schedule(
    schedule_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    calendar_service.delete_schedule(client, user, schedule_id)
    return MessageResponse(message="Schedule deleted successfully")


@router.get("/debug/check-schedules", include_in_schema=False)
def debug_check_schedules(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    """Raw schedule rows with and without the date filter. Development only."""
    if not settings.is_development:
        raise HTTPException(status_code=404, detail="Not Found")
    return calendar_service.debug_schedules(client, user, start_date, end_date)

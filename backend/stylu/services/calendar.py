"""
Outfit scheduling: CRUD on ``outfit_schedule`` and the date-range listing that
joins every schedule with its full outfit.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from ..clients.postgrest import Query, SupabaseClient
from ..core.exceptions import ExternalServiceError, NotFoundError, UpstreamError, ValidationError
from ..core.security import AuthenticatedUser
from ..schemas.calendar import (
    OrphanedSchedule,
    ScheduleCreate,
    ScheduledOutfit,
    ScheduledOutfitsResponse,
    ScheduleUpdate,
    ScheduleView,
)
from .outfits import fetch_outfit

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = "schedule_id,user_id,outfit_id,event_date,event_name,notes"

ORPHAN_OUTFIT_MISSING = "outfit_missing"
ORPHAN_QUERY_FAILED = "outfit_query_failed"


def _schedules_query(user: AuthenticatedUser) -> Query:
    return Query(SCHEDULE_COLUMNS).eq("user_id", user.user_id)


def get_scheduled_outfits(
    client: SupabaseClient,
    user: AuthenticatedUser,
    start_date: date,
    end_date: date,
) -> ScheduledOutfitsResponse:
    """
    List the caller's schedules in ``[start_date, end_date]`` with their outfits.

    Schedules are fetched in one call; a failure there fails the whole request
    with the downstream status. Outfits are then fetched one schedule at a
    time. A schedule whose outfit query fails or comes back empty is reported
    under ``orphaned`` instead of ``scheduled``.
    """
    if start_date > end_date:
        raise ValidationError("startDate must not be after endDate", field="startDate")

    query = (
        _schedules_query(user)
        .gte("event_date", start_date.isoformat())
        .lte("event_date", end_date.isoformat())
        .order("event_date")
    )
    schedules = client.select("outfit_schedule", query, token=user.token)
    logger.info(f"📅 Found {len(schedules)} schedules for user {user.user_id} between {start_date} and {end_date}")

    scheduled: List[ScheduledOutfit] = []
    orphaned: List[OrphanedSchedule] = []

    for schedule in schedules:
        outfit_id = schedule["outfit_id"]
        try:
            outfit = fetch_outfit(client, user, outfit_id)
        except (UpstreamError, ExternalServiceError) as e:
            logger.warning(f"Failed to fetch outfit {outfit_id} for schedule {schedule['schedule_id']}: {e.message}")
            orphaned.append(_orphan(schedule, ORPHAN_QUERY_FAILED))
            continue

        if outfit is None:
            logger.warning(f"No outfit {outfit_id} for user {user.user_id}, schedule {schedule['schedule_id']} is orphaned")
            orphaned.append(_orphan(schedule, ORPHAN_OUTFIT_MISSING))
            continue

        scheduled.append(ScheduledOutfit(
            schedule_id=schedule["schedule_id"],
            event_date=schedule["event_date"],
            outfit=outfit,
            event_name=schedule.get("event_name"),
            notes=schedule.get("notes"),
        ))

    # PostgREST already orders by date; keep the guarantee independent of it
    scheduled.sort(key=lambda entry: entry.event_date)

    logger.info(f"Returning {len(scheduled)} scheduled outfits ({len(orphaned)} orphaned)")
    return ScheduledOutfitsResponse(scheduled=scheduled, orphaned=orphaned)


def _orphan(schedule: Dict[str, Any], reason: str) -> OrphanedSchedule:
    return OrphanedSchedule(
        schedule_id=schedule["schedule_id"],
        outfit_id=schedule["outfit_id"],
        event_date=schedule["event_date"],
        event_name=schedule.get("event_name"),
        reason=reason,
    )


def schedule_outfit(client: SupabaseClient, user: AuthenticatedUser, payload: ScheduleCreate) -> ScheduleView:
    row = {
        "user_id": user.user_id,
        "outfit_id": payload.outfit_id,
        "event_date": payload.event_date.isoformat(),
        "event_name": payload.event_name,
        "notes": payload.notes,
    }
    created = client.insert("outfit_schedule", row, token=user.token)
    if not created:
        raise UpstreamError(502, "", message="Schedule insert returned no rows")
    logger.info(f"Scheduled outfit {payload.outfit_id} on {payload.event_date} for user {user.user_id}")
    return ScheduleView.model_validate(created[0])


def update_schedule(
    client: SupabaseClient,
    user: AuthenticatedUser,
    schedule_id: int,
    payload: ScheduleUpdate,
) -> None:
    values = payload.to_row()
    if not values:
        raise ValidationError("No fields to update")
    query = Query().eq("schedule_id", schedule_id).eq("user_id", user.user_id)
    updated = client.update("outfit_schedule", values, query, token=user.token, returning=True)
    if not updated:
        raise NotFoundError("Schedule", schedule_id)


def delete_schedule(client: SupabaseClient, user: AuthenticatedUser, schedule_id: int) -> None:
    query = Query().eq("schedule_id", schedule_id).eq("user_id", user.user_id)
    client.delete("outfit_schedule", query, token=user.token)


def debug_schedules(
    client: SupabaseClient,
    user: AuthenticatedUser,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict[str, Any]:
    """Raw schedule rows for troubleshooting date filters (development only)."""
    all_rows = client.select("outfit_schedule", _schedules_query(user).order("event_date"), token=user.token)
    info: Dict[str, Any] = {
        "userId": user.user_id,
        "queriedStartDate": start_date.isoformat() if start_date else None,
        "queriedEndDate": end_date.isoformat() if end_date else None,
        "allSchedulesCount": len(all_rows),
        "allSchedules": all_rows,
    }
    if start_date and end_date:
        query = (
            _schedules_query(user)
            .gte("event_date", start_date.isoformat())
            .lte("event_date", end_date.isoformat())
            .order("event_date")
        )
        filtered = client.select("outfit_schedule", query, token=user.token)
        info["filtered"] = {"matchCount": len(filtered), "data": filtered}
    return info

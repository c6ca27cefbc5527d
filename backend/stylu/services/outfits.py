"""
Outfit CRUD against the ``outfit`` and ``outfit_item`` tables.
"""
import logging
from typing import Any, Dict, List, Optional

from ..clients.postgrest import Query, SupabaseClient
from ..core.exceptions import NotFoundError, UpstreamError
from ..core.security import AuthenticatedUser
from ..schemas.outfit import (
    OutfitCreate,
    OutfitCreated,
    OutfitItemInput,
    OutfitItemView,
    OutfitUpdate,
    OutfitView,
)
from .outfit_items import build_outfit_item_rows, normalize_layout

logger = logging.getLogger(__name__)

# Outfit with its items, each item joined to its wardrobe row and subcategory name
OUTFIT_ITEM_SELECT = (
    "item_id,layout_data,"
    "item:item_id(item_id,item_name,image_url,colour,sub_category:subcategory_id(name))"
)
OUTFIT_SELECT = f"outfit_id,outfit_name,category,outfit_item({OUTFIT_ITEM_SELECT})"


def to_item_view(outfit_item: Dict[str, Any]) -> Optional[OutfitItemView]:
    """Flatten one embedded ``outfit_item`` row; None when its item is gone."""
    item = outfit_item.get("item")
    if not item:
        return None
    sub_category = item.get("sub_category") or {}
    return OutfitItemView(
        item_id=item["item_id"],
        name=item.get("item_name") or "",
        image_url=item.get("image_url") or "",
        colour=item.get("colour"),
        subcategory=sub_category.get("name") or "",
        layout_data=normalize_layout(outfit_item.get("layout_data")),
    )


def to_outfit_view(row: Dict[str, Any]) -> OutfitView:
    items = []
    for outfit_item in row.get("outfit_item") or []:
        view = to_item_view(outfit_item)
        if view is not None:
            items.append(view)
    return OutfitView(
        outfit_id=row["outfit_id"],
        name=row.get("outfit_name") or "",
        category=row.get("category") or "",
        items=items,
    )


def fetch_outfit(client: SupabaseClient, user: AuthenticatedUser, outfit_id: int) -> Optional[OutfitView]:
    """Load one of the caller's outfits, or None if it does not exist for them."""
    query = Query(OUTFIT_SELECT).eq("outfit_id", outfit_id).eq("user_id", user.user_id)
    rows = client.select("outfit", query, token=user.token)
    if not rows:
        return None
    return to_outfit_view(rows[0])


def list_outfits(client: SupabaseClient, user: AuthenticatedUser) -> List[OutfitView]:
    query = Query(OUTFIT_SELECT).eq("user_id", user.user_id).order("outfit_id")
    rows = client.select("outfit", query, token=user.token)
    return [to_outfit_view(row) for row in rows]


def _insert_items(
    client: SupabaseClient,
    user: AuthenticatedUser,
    outfit_id: int,
    items: List[OutfitItemInput],
    failure_message: str,
) -> None:
    rows = build_outfit_item_rows(outfit_id, items)
    if not rows:
        return
    logger.info(f"Inserting {len(rows)} items into outfit {outfit_id}")
    try:
        client.insert("outfit_item", rows, token=user.token, returning=False)
    except UpstreamError as e:
        logger.error(f"Failed to insert items for outfit {outfit_id}: {e.body[:200]}")
        raise UpstreamError(e.upstream_status, e.body, message=failure_message)


def create_outfit(client: SupabaseClient, user: AuthenticatedUser, payload: OutfitCreate) -> OutfitCreated:
    outfit_row: Dict[str, Any] = {"user_id": user.user_id, "outfit_name": payload.name}
    if payload.category:
        outfit_row["category"] = payload.category
    if payload.schedule:
        outfit_row["schedule"] = payload.schedule

    created = client.insert("outfit", outfit_row, token=user.token)
    if not created:
        raise UpstreamError(502, "", message="Outfit insert returned no rows")
    outfit = created[0]
    outfit_id = outfit["outfit_id"]
    logger.info(f"Created outfit {outfit_id} for user {user.user_id}")

    items = payload.resolved_items() or []
    _insert_items(client, user, outfit_id, items, "Outfit created but failed to add items")

    return OutfitCreated(message="Outfit created successfully", outfit_id=outfit_id, data=outfit)


def update_outfit(
    client: SupabaseClient,
    user: AuthenticatedUser,
    outfit_id: int,
    payload: OutfitUpdate,
) -> None:
    values: Dict[str, Any] = {"outfit_name": payload.name}
    if payload.category is not None:
        values["category"] = payload.category

    owned = Query().eq("outfit_id", outfit_id).eq("user_id", user.user_id)
    updated = client.update("outfit", values, owned, token=user.token, returning=True)
    if not updated:
        raise NotFoundError("Outfit", outfit_id)

    items = payload.resolved_items()
    if items is None:
        return

    client.delete("outfit_item", Query().eq("outfit_id", outfit_id), token=user.token)
    _insert_items(client, user, outfit_id, items, "Failed to update items")


def get_outfit_items(client: SupabaseClient, user: AuthenticatedUser, outfit_id: int) -> List[OutfitItemView]:
    outfit = fetch_outfit(client, user, outfit_id)
    if outfit is None:
        raise NotFoundError("Outfit", outfit_id)
    return outfit.items


def delete_outfit(client: SupabaseClient, user: AuthenticatedUser, outfit_id: int) -> None:
    client.delete(
        "outfit",
        Query().eq("outfit_id", outfit_id).eq("user_id", user.user_id),
        token=user.token,
    )
    logger.info(f"Deleted outfit {outfit_id} for user {user.user_id}")

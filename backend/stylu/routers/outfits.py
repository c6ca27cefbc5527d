from typing import List

from fastapi import APIRouter, Depends

from ..clients.postgrest import SupabaseClient
from ..core.security import AuthenticatedUser, get_current_user
from ..dependencies import get_supabase_client
from ..schemas import (
    MessageResponse,
    OutfitCreate,
    OutfitCreated,
    OutfitItemView,
    OutfitUpdate,
    OutfitView,
)
from ..services import outfits as outfit_service

router = APIRouter(
    prefix="/api/Outfit",
    tags=["outfits"],
    responses={
        401: {"description": "Not authenticated - missing or invalid bearer token"},
    }
)


@router.get("", response_model=List[OutfitView])
def get_outfits(
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    """All outfits of the caller with their items"""
    return outfit_service.list_outfits(client, user)


@router.post("", response_model=OutfitCreated)
def create_outfit(
    payload: OutfitCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    """
    Create an outfit and attach its items.

    `items` takes `{itemId, layout?}` objects; bare ids and flat
    `{itemId, x, y, scale, width, height}` objects are also accepted, as is the
    older `itemIds` list.
    """
    return outfit_service.create_outfit(client, user, payload)


@router.put("/{outfit_id}", response_model=MessageResponse)
def update_outfit(
    outfit_id: int,
    payload: OutfitUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    outfit_service.update_outfit(client, user, outfit_id, payload)
    return MessageResponse(message="Outfit updated successfully")


@router.get("/{outfit_id}/items", response_model=List[OutfitItemView])
def get_outfit_items(
    outfit_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    return outfit_service.get_outfit_items(client, user, outfit_id)


@router.delete("/{outfit_id}", response_model=MessageResponse)
def delete_outfit(
    outfit_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
):
    outfit_service.delete_outfit(client, user, outfit_id)
    return MessageResponse(message="Outfit deleted successfully")

"""
Outfit and outfit item schemas.
"""
from typing import Any, List, Optional

from pydantic import Field, model_validator

from .common import CamelModel

LAYOUT_FIELDS = ("x", "y", "scale", "width", "height")


class LayoutData(CamelModel):
    """Placement of an item on the outfit canvas"""
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    width: int = 100
    height: int = 100


class OutfitItemInput(CamelModel):
    """One item attached to an outfit, optionally with its canvas layout.

    Older app builds send either bare item ids (``52``) or flat objects
    (``{"itemId": 52, "x": 1, ...}``); both are coerced into this shape
    element by element.
    """
    item_id: int = Field(..., description="Wardrobe item id")
    layout: Optional[LayoutData] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_legacy_shapes(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return {"itemId": value}
        if isinstance(value, dict) and "layout" not in value:
            flat = {k: value[k] for k in LAYOUT_FIELDS if k in value}
            if flat:
                rest = {k: v for k, v in value.items() if k not in LAYOUT_FIELDS}
                rest["layout"] = flat
                return rest
        return value


class _OutfitItemsPayload(CamelModel):
    items: Optional[List[OutfitItemInput]] = None
    item_ids: Optional[List[int]] = Field(None, description="Legacy list of bare item ids")

    def resolved_items(self) -> Optional[List[OutfitItemInput]]:
        """Items to persist, or None when the request did not mention items."""
        if self.items is not None:
            return self.items
        if self.item_ids is not None:
            return [OutfitItemInput(item_id=item_id) for item_id in self.item_ids]
        return None


class OutfitCreate(_OutfitItemsPayload):
    """Schema for creating an outfit"""
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    schedule: Optional[str] = None


class OutfitUpdate(_OutfitItemsPayload):
    """Schema for updating an outfit; items are replaced only when supplied"""
    name: str = Field(..., min_length=1)
    category: Optional[str] = None


class OutfitItemView(CamelModel):
    item_id: int
    name: str = ""
    image_url: str = ""
    colour: Optional[str] = None
    subcategory: str = ""
    layout_data: Optional[LayoutData] = None


class OutfitView(CamelModel):
    outfit_id: int
    name: str = ""
    category: str = ""
    items: List[OutfitItemView] = []


class OutfitCreated(CamelModel):
    message: str
    outfit_id: int
    data: dict

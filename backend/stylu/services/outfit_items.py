"""
Outfit item rows and canvas layout normalisation.
"""
from typing import Any, Dict, Iterable, List, Optional

from ..schemas.outfit import LayoutData, OutfitItemInput


def _pick(raw: Dict[str, Any], key: str, default, cast):
    value = raw.get(key)
    if value is None:
        return default
    return cast(value)


def normalize_layout(raw: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Fill missing layout fields with canvas defaults; None stays None."""
    if raw is None:
        return None
    if isinstance(raw, LayoutData):
        raw = raw.model_dump()
    return {
        "x": _pick(raw, "x", 0.0, float),
        "y": _pick(raw, "y", 0.0, float),
        "scale": _pick(raw, "scale", 1.0, float),
        "width": _pick(raw, "width", 100, lambda v: int(float(v))),
        "height": _pick(raw, "height", 100, lambda v: int(float(v))),
    }


def build_outfit_item_rows(outfit_id: int, items: Iterable[OutfitItemInput]) -> List[Dict[str, Any]]:
    """Rows for the ``outfit_item`` table.

    ``layout_data`` is only written for items that carried a layout; bare ids
    are stored without one and the app places them itself.
    """
    rows = []
    for item in items:
        row: Dict[str, Any] = {"outfit_id": outfit_id, "item_id": item.item_id}
        if item.layout is not None:
            row["layout_data"] = normalize_layout(item.layout)
        rows.append(row)
    return rows

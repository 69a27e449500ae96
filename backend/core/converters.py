import math
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from core.rv_images import PLACEHOLDER_IMAGE, RVImageIndex, rv_images
from schemas.inventory import RV


def _to_float(value: Any) -> float:
    # numeric columns come back as Decimal or text
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def round_half_up(value: Union[float, Decimal]) -> int:
    """Nearest whole number with halves rounded up, as the portal front end does."""
    return math.floor(Decimal(str(value)) + Decimal("0.5"))


def _format_number(value: float) -> str:
    if value == int(value):
        return f"{int(value):,}"
    return f"{value:,}"


def build_description(row: Mapping[str, Any]) -> str:
    parts = []
    if row.get("class"):
        parts.append(row["class"])
    if row.get("length"):
        parts.append(f"{row['length']}ft long")
    if row.get("sleep_count"):
        parts.append(f"Sleeps {row['sleep_count']}")
    if row.get("gvwr"):
        parts.append(f"GVWR: {_format_number(_to_float(row['gvwr']))} lbs")
    slide_count = row.get("slide_count")
    if slide_count:
        parts.append(f"{slide_count} slide{'s' if slide_count > 1 else ''}")

    if not parts:
        return "No details available."
    return ". ".join(str(p) for p in parts) + "."


def transform_inventory_row(row: Mapping[str, Any], images: Optional[RVImageIndex] = None) -> RV:
    """Convert a unit.get_inventory row into the RV view model"""
    images = images or rv_images
    name_parts = [row.get("manufacturer"), row.get("make"), row.get("sub_make"), row.get("model")]
    name = " ".join(p for p in name_parts if p)
    stock = row.get("stocknumber") or "N/A"

    return RV(
        id=str(row["inventory_id"]),
        stock=stock,
        name=name or "Unknown RV",
        year=row.get("year") or 0,
        type=row.get("class") or "RV",
        price=_to_float(row.get("price")),
        description=build_description(row),
        length=_to_float(row.get("length")),
        weight=_to_float(row.get("gvwr")),
        sleeps=row.get("sleep_count") or 0,
        image_url=images.get_primary_image(stock) or PLACEHOLDER_IMAGE,
        images=images.get_all_images(stock),
        manufacturer=row.get("manufacturer") or "",
        make=row.get("make") or "",
        model=row.get("model") or "",
        vin=row.get("vin") or "",
        slide_count=row.get("slide_count") or 0,
        axle_count=row.get("axle_count") or 0,
        garage_length=_to_float(row.get("garage_length")),
        fuel_type=row.get("fuel_type") or "",
        sidewall_construction=row.get("sidewall_construction") or "",
        fresh_tank_capacity=_to_float(row.get("fresh_tank_capacity")),
        grey_tank_capacity=_to_float(row.get("grey_tank_capacity")),
        black_tank_capacity=_to_float(row.get("black_tank_capacity")),
        uvw=_to_float(row.get("uvwr")),
        location=row.get("location") or "",
        cmf_id=row.get("cmf_id"),
    )

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.catalog import SORT_OPTIONS, FilterState, apply_filters, group_inventory, type_counts, units_for_slug
from core.config import settings
from core.converters import transform_inventory_row
from core.errors import PortalError
from db.database import get_async_session
from db import queries
from schemas.inventory import RV

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_location_ids(raw: Optional[str]) -> List[int]:
    if not raw:
        return [settings.default_location_cmf_id]
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise PortalError(status.HTTP_400_BAD_REQUEST, "Invalid request parameters", details="locationIds must be integers")


def _parse_class_names(raw: Optional[str]) -> Optional[List[str]]:
    if not raw:
        return None
    names = [part.strip() for part in raw.split(",") if part.strip()]
    return names or None


async def _load_inventory(db: AsyncSession, location_ids: List[int], class_names: Optional[List[str]] = None) -> List[RV]:
    rows = await queries.fetch_inventory(db, location_ids, class_names)
    return [transform_inventory_row(row) for row in rows]


async def load_all_locations_inventory(db: AsyncSession) -> List[RV]:
    locations = await queries.fetch_locations(db)
    location_ids = [loc["cmf"] for loc in locations]
    if not location_ids:
        return []
    return await _load_inventory(db, location_ids)


@router.get("", response_model=Dict)
async def get_inventory(
    locationIds: Optional[str] = Query(None),
    classNames: Optional[str] = Query(None),
    minPrice: Optional[float] = Query(None, ge=0),
    maxPrice: Optional[float] = Query(None, ge=0),
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    grouped: bool = Query(False),
    db: AsyncSession = Depends(get_async_session),
):
    """
    New, in-inventory units for the given locations (default: the partner's home location).

    Location and class filters are applied by the stored procedure; price,
    search and sort are applied here on the transformed units.
    """
    location_ids = _parse_location_ids(locationIds)
    class_names = _parse_class_names(classNames)
    if sort and sort not in SORT_OPTIONS:
        raise PortalError(status.HTTP_400_BAD_REQUEST, "Invalid request parameters", details=f"sort must be one of {', '.join(SORT_OPTIONS)}")
    if sort == "distance":
        raise PortalError(status.HTTP_400_BAD_REQUEST, "Invalid request parameters", details="distance sorting needs client-side distances")

    try:
        inventory = await _load_inventory(db, location_ids, class_names)
    except Exception as e:
        logger.exception("Error fetching inventory")
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch inventory", details=str(e))

    state = FilterState(min_price=minPrice, max_price=maxPrice, search=search or "", sort_by=sort)
    units = apply_filters(inventory, state)

    body = {"success": True, "count": len(units), "typeCounts": type_counts(units)}
    if grouped:
        groups = group_inventory(units)
        body["groupCount"] = len(groups)
        body["data"] = [g.model_dump(by_alias=True) for g in groups]
    else:
        body["data"] = [rv.model_dump(by_alias=True) for rv in units]
    return body


@router.get("/stock/{stock}", response_model=Dict)
async def get_unit_by_stock(stock: str, db: AsyncSession = Depends(get_async_session)):
    """Find one unit by stock number across every location"""
    try:
        inventory = await load_all_locations_inventory(db)
    except Exception as e:
        logger.exception("Error fetching RV %s", stock)
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch inventory", details=str(e))

    for rv in inventory:
        if rv.stock == stock:
            return {"success": True, "data": rv.model_dump(by_alias=True)}
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"RV with stock {stock} not found")


@router.get("/models/{slug}", response_model=Dict)
async def get_model_units(slug: str, db: AsyncSession = Depends(get_async_session)):
    """All units of one manufacturer/make/model/year, for the unit picker"""
    try:
        inventory = await load_all_locations_inventory(db)
    except Exception as e:
        logger.exception("Error fetching model units for %s", slug)
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch inventory", details=str(e))

    units = units_for_slug(inventory, slug.lower())
    if not units:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No units found for model {slug}")

    return {"success": True, "count": len(units), "data": [rv.model_dump(by_alias=True) for rv in units]}

import logging
from typing import Dict

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core import distance
from core.errors import PortalError
from db.database import get_async_session
from db import queries

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Dict)
async def get_locations(db: AsyncSession = Depends(get_async_session)):
    """Locations with their full street addresses"""
    try:
        rows = await queries.fetch_location_addresses(db)
    except Exception as e:
        logger.exception("Error fetching location addresses")
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch location addresses", details=str(e))
    return {"success": True, "data": rows}


@router.get("/distances", response_model=Dict)
async def get_location_distances(
    zip: str = Query(..., pattern=r"^\d{5}$"),
    db: AsyncSession = Depends(get_async_session),
):
    """Straight-line miles from a zip code to every location that has coordinates"""
    origin = await run_in_threadpool(distance.geocoder.lookup, zip)
    if origin is None:
        raise PortalError(status.HTTP_404_NOT_FOUND, f"Could not locate zip code {zip}")

    try:
        locations = await queries.fetch_locations(db)
    except Exception as e:
        logger.exception("Error fetching locations for distance lookup")
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch locations", details=str(e))

    distances = {}
    for loc in locations:
        if loc.get("latitude") is None or loc.get("longitude") is None:
            continue
        distances[str(loc["cmf"])] = distance.calculate_distance(
            origin.latitude, origin.longitude, loc["latitude"], loc["longitude"]
        )

    return {
        "success": True,
        "data": {
            "zipCode": zip,
            "origin": {"latitude": origin.latitude, "longitude": origin.longitude},
            "distances": distances,
        },
    }

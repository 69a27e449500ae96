import logging
from typing import Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import PortalError
from db.database import get_async_session
from db import queries

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Dict)
async def get_init_data(db: AsyncSession = Depends(get_async_session)):
    """Reference data the portal needs on first load: locations and RV classes"""
    try:
        locations = await queries.fetch_locations(db)
        unit_classes = await queries.fetch_unit_classes(db)
    except Exception as e:
        logger.exception("Error fetching initialization data")
        raise PortalError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to fetch initialization data",
            details=str(e),
        )

    return {
        "success": True,
        "data": {
            "locations": locations,
            "unitClasses": unit_classes,
        },
    }

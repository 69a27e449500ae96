import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import PortalError
from db.database import get_async_session
from db import queries

logger = logging.getLogger(__name__)

router = APIRouter()


def require_debug_enabled():
    if not settings.enable_debug_routes:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


@router.get("/explore-cmf", response_model=Dict, dependencies=[Depends(require_debug_enabled)])
async def explore_cmf(db: AsyncSession = Depends(get_async_session)):
    """Show where CMF ids, addresses and zip codes live in the database"""
    try:
        results = await queries.explore_cmf(db)
    except Exception as e:
        logger.exception("Error exploring CMF database")
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to explore database", details=str(e))
    return {"success": True, "data": results}

import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import manufacturers
from core.catalog import units_for_slug
from core.errors import PortalError
from core.pricing import ACCESSORY_CATALOG, UnknownOptionError, savings_breakdown
from core.purchase import PurchaseWizard, WizardValidationError, build_quote
from db.database import get_async_session
from routers.inventory import load_all_locations_inventory
from schemas.purchase import PurchaseRequest, QuoteRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/options", response_model=Dict)
async def list_options():
    """Accessory and protection plan catalog"""
    return {
        "success": True,
        "data": {
            category: [{"id": o.id, "name": o.name, "price": o.price} for o in options]
            for category, options in ACCESSORY_CATALOG.items()
        },
    }


@router.post("/quote", response_model=Dict)
async def quote(payload: QuoteRequest):
    options = {
        "power_package": payload.power_package,
        "hitch_package": payload.hitch_package,
        "brake_control": payload.brake_control,
        "protection_plan": payload.protection_plan,
    }
    try:
        q = build_quote(payload.list_price, options, payload.payment_method)
    except UnknownOptionError as e:
        raise PortalError(status.HTTP_400_BAD_REQUEST, str(e))

    savings = savings_breakdown(payload.list_price)
    return {
        "success": True,
        "data": q.model_dump(by_alias=True),
        "savings": {
            "priceSavings": savings["price_savings"],
            "interestSavings": savings["interest_savings"],
            "totalSavings": savings["total_savings"],
        },
    }


@router.post("/submit", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def submit_purchase(payload: PurchaseRequest, db: AsyncSession = Depends(get_async_session)):
    """Validate the full wizard submission and return the signed order summary"""
    if not payload.model_slug and not payload.stock:
        raise PortalError(status.HTTP_400_BAD_REQUEST, "Either modelSlug or stock is required")

    try:
        inventory = await load_all_locations_inventory(db)
    except Exception as e:
        logger.exception("Error loading inventory for purchase")
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch inventory", details=str(e))

    if payload.model_slug:
        units = units_for_slug(inventory, payload.model_slug.lower())
    else:
        units = [rv for rv in inventory if rv.stock == payload.stock]
    if not units:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No matching units available")

    wizard = PurchaseWizard(units)
    try:
        summary = wizard.run(payload.configuration, payload.contact, payload.signature)
    except WizardValidationError as e:
        raise PortalError(status.HTTP_400_BAD_REQUEST, e.message, details={"step": e.step})

    # TODO: persist the deal once the dealer database exposes a deals table
    logger.info(
        "Purchase initiated: %s stock=%s total=%s payment=%s delivery=%s",
        summary.confirmation_number,
        summary.stock,
        summary.total_price,
        summary.payment_method,
        summary.delivery_method,
    )
    return {"success": True, "data": summary.model_dump(by_alias=True, mode="json")}


@router.get("/manufacturers", response_model=Dict)
async def list_manufacturers():
    """Manufacturers that ship to the buyer; every other brand is pickup only"""
    return {
        "success": True,
        "data": [
            {
                "name": cfg["name"],
                "deliveryAvailable": cfg["delivery_available"],
                "pickupAvailable": cfg["pickup_available"],
                "availability": manufacturers.get_availability_text(cfg["name"]),
            }
            for cfg in manufacturers.get_all_manufacturer_configs()
        ],
    }

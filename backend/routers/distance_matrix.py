import logging
from typing import Dict

import requests
from fastapi import APIRouter, status

from core.config import settings
from core.distance import parse_distance_matrix
from core.errors import PortalError
from schemas.locations import DistanceMatrixRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=Dict)
def get_driving_distances(payload: DistanceMatrixRequest):
    """
    Proxy one batched origin -> destinations lookup to the Distance Matrix API.

    Plain `def` so the blocking HTTP call runs in FastAPI's threadpool.
    """
    if not payload.origin_zip_code.strip() or not payload.destinations:
        raise PortalError(status.HTTP_400_BAD_REQUEST, "Invalid request parameters")

    if not settings.google_maps_api_key:
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Google Maps API key not configured")

    destinations = "|".join(f"{d.latitude},{d.longitude}" for d in payload.destinations)
    params = {
        "origins": payload.origin_zip_code.strip(),
        "destinations": destinations,
        "units": "imperial",
        "key": settings.google_maps_api_key,
    }

    try:
        resp = requests.get(settings.distance_matrix_url, params=params, timeout=settings.http_timeout)
    except requests.RequestException as e:
        logger.exception("Error calling Distance Matrix API")
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", details=str(e))

    if not resp.ok:
        logger.error("Distance Matrix API error: %s %s", resp.status_code, resp.reason)
        raise PortalError(resp.status_code, "Distance Matrix API error")

    try:
        data = resp.json()
    except ValueError as e:
        logger.error("Unreadable Distance Matrix API response: %s", e)
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Invalid response from Distance Matrix API")

    if not isinstance(data, dict) or data.get("status") != "OK":
        status_text = data.get("status") if isinstance(data, dict) else None
        logger.error("Distance Matrix API status: %s", status_text)
        raise PortalError(status.HTTP_400_BAD_REQUEST, f"API status: {status_text}")

    location_ids = [d.location_id if d.location_id is not None else str(i) for i, d in enumerate(payload.destinations)]
    try:
        distances = parse_distance_matrix(data, location_ids)
    except (KeyError, TypeError, AttributeError) as e:
        logger.error("Malformed Distance Matrix API rows: %s", e)
        raise PortalError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Invalid response from Distance Matrix API")

    return {"success": True, "data": data, "distances": distances}

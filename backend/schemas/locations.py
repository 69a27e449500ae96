from typing import List, Optional

from pydantic import Field

from schemas.inventory import CamelModel


class Destination(CamelModel):
    latitude: float
    longitude: float
    location_id: Optional[str] = None


class DistanceMatrixRequest(CamelModel):
    origin_zip_code: str = ""
    destinations: List[Destination] = Field(default_factory=list)

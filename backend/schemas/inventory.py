from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class RV(CamelModel):
    """UI-friendly view of one inventory unit."""
    id: str
    stock: str
    name: str
    year: int
    type: str
    price: float
    description: str
    length: float = 0
    weight: float = 0
    sleeps: int = 0
    image_url: str
    images: List[str] = []
    manufacturer: str = ""
    make: str = ""
    model: str = ""
    vin: str = ""
    slide_count: int = 0
    axle_count: int = 0
    garage_length: float = 0
    fuel_type: str = ""
    sidewall_construction: str = ""
    fresh_tank_capacity: float = 0
    grey_tank_capacity: float = 0
    black_tank_capacity: float = 0
    uvw: float = 0
    location: str = ""
    cmf_id: Optional[int] = None


class GroupedRV(CamelModel):
    """Units sharing manufacturer/make/model/year shown as one card."""
    slug: str
    manufacturer: str
    make: str
    model: str
    year: int
    name: str
    type: str
    image_url: str
    quantity: int
    min_price: float
    max_price: float
    location_ids: List[int]
    multiple_locations: bool
    units: List[RV]

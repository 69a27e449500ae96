"""
Manufacturer business rules: which brands can be shipped vs picked up.
"""

from typing import Dict, List

# Every manufacturer supports pickup
DELIVERY_ENABLED_MANUFACTURERS = [
    "Jayco",
    "Forest River",
]


def is_delivery_available(manufacturer: str) -> bool:
    if not manufacturer:
        return False
    name = manufacturer.lower()
    return any(m.lower() == name for m in DELIVERY_ENABLED_MANUFACTURERS)


def is_pickup_available(manufacturer: str) -> bool:
    return True


def get_availability_text(manufacturer: str) -> str:
    delivery = is_delivery_available(manufacturer)
    pickup = is_pickup_available(manufacturer)

    if delivery and pickup:
        return "Pickup & Delivery"
    if delivery:
        return "Delivery Only"
    if pickup:
        return "Pickup Only"
    return "Contact for Availability"


def get_all_manufacturer_configs() -> List[Dict]:
    return [
        {"name": name, "delivery_available": True, "pickup_available": True}
        for name in DELIVERY_ENABLED_MANUFACTURERS
    ]

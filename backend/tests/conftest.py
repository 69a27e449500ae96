"""
Pytest configuration and fixtures for the portal API
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from core.pin_storage import pin_store
from core.rv_images import rv_images
from db import queries
from db.database import get_async_session
from main import app

HOME_CMF = 76179597
SALT_LAKE_CMF = 76179601

LOCATIONS = [
    {"cmf": HOME_CMF, "location": "GFM", "storename": "Great Falls", "zipcode": "59404",
     "latitude": 47.5053, "longitude": -111.3008},
    {"cmf": SALT_LAKE_CMF, "location": "SUT", "storename": "Salt Lake City", "zipcode": "84115",
     "latitude": 40.7128, "longitude": -111.8910},
    {"cmf": 76179605, "location": "ZZZ", "storename": "Corp", "zipcode": None,
     "latitude": None, "longitude": None},
]

IMAGE_MAPPING = {
    "J1001": {
        "description": "2025 Jayco Jay Flight 264BH",
        "primaryImage": "https://images.example.com/j1001-1.jpg",
        "images": ["https://images.example.com/j1001-1.jpg", "https://images.example.com/j1001-2.jpg"],
        "itemDetailUrl": "https://dealer.example.com/j1001",
    },
}


def make_row(**overrides):
    """A unit.get_inventory row with sensible defaults"""
    row = {
        "inventory_id": 1,
        "year": 2025,
        "manufacturer": "Jayco",
        "make": "Jay Flight",
        "sub_make": None,
        "model": "264BH",
        "class": "TT",
        "condition": "New",
        "cmf_id": HOME_CMF,
        "location": "GFM",
        "stocknumber": "J1001",
        "vin": "1UJBJ0BR5R1234567",
        "price": Decimal("40000.00"),
        "length": Decimal("30.5"),
        "gvwr": Decimal("7500"),
        "uvwr": Decimal("5200"),
        "garage_length": None,
        "slide_count": 1,
        "fuel_type": None,
        "sleep_count": 8,
        "sidewall_construction": "Laminated",
        "axle_count": 2,
        "fresh_tank_capacity": Decimal("43"),
        "grey_tank_capacity": Decimal("60"),
        "black_tank_capacity": Decimal("30"),
    }
    row.update(overrides)
    return row


INVENTORY_ROWS = [
    make_row(),
    make_row(inventory_id=2, stocknumber="J1002", cmf_id=SALT_LAKE_CMF, location="SUT", price=Decimal("41000")),
    make_row(inventory_id=3, stocknumber="F2001", manufacturer="Forest River", make="Rockwood", model="2891BH",
             **{"class": "FW"}, price=Decimal("65000"), year=2024),
    make_row(inventory_id=4, stocknumber="K3001", manufacturer="Keystone", make="Cougar", model="29RLI",
             **{"class": "FW"}, price=Decimal("58000")),
]


@pytest.fixture(autouse=True)
def reset_state(monkeypatch):
    """Fresh PIN store and a fixed image mapping for every test"""
    pin_store.clear()
    monkeypatch.setattr(rv_images, "_mapping", dict(IMAGE_MAPPING))
    yield
    pin_store.clear()


@pytest.fixture
def fake_db(monkeypatch):
    """Replace the dealer database queries with in-memory data; records calls"""
    calls = []

    async def fetch_locations(db):
        calls.append(("locations",))
        return [dict(loc) for loc in LOCATIONS]

    async def fetch_location_addresses(db):
        return [
            {"cmf": loc["cmf"], "location": loc["location"], "storename": loc["storename"],
             "address1": "1 Main St", "address2": None, "city": "Somewhere", "state": "MT",
             "zipcode": loc["zipcode"], "country": "US"}
            for loc in LOCATIONS
        ]

    async def fetch_unit_classes(db):
        return [
            {"class_id": 2, "class": "FW", "class_description": "Fifth Wheel"},
            {"class_id": 1, "class": "TT", "class_description": "Travel Trailer"},
        ]

    async def fetch_inventory(db, location_ids, class_names=None):
        calls.append(("inventory", list(location_ids), class_names))
        rows = [r for r in INVENTORY_ROWS if r["cmf_id"] in location_ids]
        if class_names:
            rows = [r for r in rows if r["class"] in class_names]
        return rows

    monkeypatch.setattr(queries, "fetch_locations", fetch_locations)
    monkeypatch.setattr(queries, "fetch_location_addresses", fetch_location_addresses)
    monkeypatch.setattr(queries, "fetch_unit_classes", fetch_unit_classes)
    monkeypatch.setattr(queries, "fetch_inventory", fetch_inventory)
    return calls


@pytest.fixture
def client():
    """Test client with the database session dependency stubbed out"""
    async def no_session():
        yield None

    app.dependency_overrides[get_async_session] = no_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

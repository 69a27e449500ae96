import json
from decimal import Decimal

from conftest import HOME_CMF, make_row
from core import manufacturers
from core.converters import build_description, round_half_up, transform_inventory_row
from core.rv_images import PLACEHOLDER_IMAGE, RVImageIndex


def test_transform_full_row():
    rv = transform_inventory_row(make_row(sub_make="SLX"))

    assert rv.id == "1"
    assert rv.stock == "J1001"
    assert rv.name == "Jayco Jay Flight SLX 264BH"
    assert rv.type == "TT"
    assert rv.price == 40000.0
    assert rv.length == 30.5
    assert rv.weight == 7500.0
    assert rv.uvw == 5200.0
    assert rv.sleeps == 8
    assert rv.fresh_tank_capacity == 43.0
    assert rv.garage_length == 0
    assert rv.fuel_type == ""
    assert rv.cmf_id == HOME_CMF
    assert rv.image_url == "https://images.example.com/j1001-1.jpg"
    assert len(rv.images) == 2


def test_transform_sparse_row_uses_defaults():
    row = {"inventory_id": 77, "year": None, "price": None, "class": None, "stocknumber": None}
    rv = transform_inventory_row(row)

    assert rv.id == "77"
    assert rv.stock == "N/A"
    assert rv.name == "Unknown RV"
    assert rv.type == "RV"
    assert rv.year == 0
    assert rv.price == 0
    assert rv.image_url == PLACEHOLDER_IMAGE
    assert rv.images == []
    assert rv.description == "No details available."


def test_price_as_text_is_parsed():
    rv = transform_inventory_row(make_row(price="52995.00"))
    assert rv.price == 52995.0


def test_description():
    assert build_description(make_row()) == "TT. 30.5ft long. Sleeps 8. GVWR: 7,500 lbs. 1 slide."
    assert build_description(make_row(slide_count=3, gvwr=None)) == "TT. 30.5ft long. Sleeps 8. 3 slides."


def test_serialized_in_camel_case():
    data = transform_inventory_row(make_row()).model_dump(by_alias=True)
    assert data["imageUrl"].startswith("https://")
    assert data["freshTankCapacity"] == 43.0
    assert data["cmfId"] == HOME_CMF
    assert "image_url" not in data


def test_image_lookup_normalizes_stock_number():
    index = RVImageIndex(mapping={
        "AB123": {"primaryImage": "p.jpg", "images": ["p.jpg"], "itemDetailUrl": "https://x/ab123"},
        " cd456 ": {"primaryImage": "c.jpg", "images": []},
    })
    assert index.get_primary_image("AB123") == "p.jpg"
    assert index.get_primary_image(" ab123 ") == "p.jpg"
    assert index.get_primary_image("CD456") == "c.jpg"
    assert index.get_detail_url("ab123") == "https://x/ab123"
    assert index.has_images("AB123")
    assert not index.has_images("CD456")
    assert index.get_rv_images("missing") is None
    assert index.get_all_images("") == []


def test_image_mapping_loaded_from_file(tmp_path):
    path = tmp_path / "image-mapping.json"
    path.write_text(json.dumps({"S1": {"primaryImage": "s1.jpg", "images": ["s1.jpg"]}}))
    index = RVImageIndex(path=str(path))
    assert index.get_primary_image("S1") == "s1.jpg"


def test_missing_image_mapping_file_is_empty(tmp_path):
    index = RVImageIndex(path=str(tmp_path / "nope.json"))
    assert index.mapping == {}
    assert index.get_primary_image("S1") is None


def test_delivery_availability():
    assert manufacturers.is_delivery_available("Jayco")
    assert manufacturers.is_delivery_available("forest river")
    assert not manufacturers.is_delivery_available("Keystone")
    assert not manufacturers.is_delivery_available("")
    assert manufacturers.is_pickup_available("Keystone")


def test_availability_text():
    assert manufacturers.get_availability_text("JAYCO") == "Pickup & Delivery"
    assert manufacturers.get_availability_text("Grand Design") == "Pickup Only"


def test_all_manufacturer_configs():
    configs = manufacturers.get_all_manufacturer_configs()
    assert [c["name"] for c in configs] == ["Jayco", "Forest River"]
    assert all(c["delivery_available"] and c["pickup_available"] for c in configs)


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(Decimal("35674.5")) == 35675
    assert round_half_up(-2.5) == -2

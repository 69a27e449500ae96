from unittest.mock import MagicMock

import pytest
import requests

from core import distance
from core.distance import Coordinates, ZipGeocoder, calculate_distance, meters_to_miles, parse_distance_matrix

NEW_YORK = (40.7128, -74.0060)
LOS_ANGELES = (34.0522, -118.2437)
SALT_LAKE = (40.7608, -111.8910)


def test_same_point_is_zero():
    assert calculate_distance(*NEW_YORK, *NEW_YORK) == 0


def test_distance_is_symmetric():
    assert calculate_distance(*NEW_YORK, *LOS_ANGELES) == calculate_distance(*LOS_ANGELES, *NEW_YORK)
    assert calculate_distance(*SALT_LAKE, *NEW_YORK) == calculate_distance(*NEW_YORK, *SALT_LAKE)


def test_known_city_pair():
    # published great-circle distance NYC-LA is about 2,445 miles
    assert abs(calculate_distance(*NEW_YORK, *LOS_ANGELES) - 2445) <= 10


def test_result_is_whole_miles():
    assert isinstance(calculate_distance(*NEW_YORK, *SALT_LAKE), int)


def test_meters_to_miles():
    assert meters_to_miles(1609.344) == 1
    assert meters_to_miles(160934.4) == 100
    assert meters_to_miles(0) == 0


def test_parse_distance_matrix_keeps_ok_elements():
    data = {
        "status": "OK",
        "rows": [{
            "elements": [
                {"status": "OK", "distance": {"value": 160934}},
                {"status": "ZERO_RESULTS"},
                {"status": "OK", "distance": {"value": 321869}},
            ]
        }],
    }
    assert parse_distance_matrix(data, ["101", "102", "103"]) == {"101": 100, "103": 200}


def test_parse_distance_matrix_handles_missing_rows():
    assert parse_distance_matrix({}, ["1"]) == {}
    assert parse_distance_matrix({"rows": []}, ["1"]) == {}


def _response(ok=True, payload=None, reason="OK"):
    resp = MagicMock()
    resp.ok = ok
    resp.reason = reason
    resp.json.return_value = payload
    return resp


def test_geocoder_caches_hits(monkeypatch):
    get = MagicMock(return_value=_response(payload=[{"lat": "47.5", "lon": "-111.3"}]))
    monkeypatch.setattr(distance.requests, "get", get)
    geocoder = ZipGeocoder(url="https://geo.example.com/search")

    first = geocoder.lookup("59404")
    second = geocoder.lookup("59404")

    assert first == Coordinates(47.5, -111.3)
    assert second == first
    assert get.call_count == 1
    assert get.call_args.kwargs["params"]["postalcode"] == "59404"
    assert "User-Agent" in get.call_args.kwargs["headers"]


@pytest.mark.parametrize("response", [
    _response(ok=False, reason="Too Many Requests"),
    _response(payload=[]),
])
def test_geocoder_returns_none_on_failure(monkeypatch, response):
    monkeypatch.setattr(distance.requests, "get", MagicMock(return_value=response))
    assert ZipGeocoder().lookup("00000") is None


def test_geocoder_returns_none_on_network_error(monkeypatch):
    monkeypatch.setattr(distance.requests, "get", MagicMock(side_effect=requests.ConnectionError("down")))
    geocoder = ZipGeocoder()
    assert geocoder.lookup("59404") is None
    assert geocoder.get_cached("59404") is None


def test_geocoder_returns_none_on_unreadable_body(monkeypatch):
    resp = _response()
    resp.json.side_effect = ValueError("Expecting value")
    monkeypatch.setattr(distance.requests, "get", MagicMock(return_value=resp))
    assert ZipGeocoder().lookup("59404") is None


@pytest.mark.parametrize("payload", [[{"lat": "47.5"}], [{"lat": "north", "lon": "-111.3"}], {"error": "bad"}])
def test_geocoder_returns_none_on_malformed_result(monkeypatch, payload):
    monkeypatch.setattr(distance.requests, "get", MagicMock(return_value=_response(payload=payload)))
    geocoder = ZipGeocoder()
    assert geocoder.lookup("59404") is None
    assert geocoder.get_cached("59404") is None


def test_geocoder_cache_is_bounded():
    geocoder = ZipGeocoder(max_entries=2)
    geocoder.cache("11111", Coordinates(1, 1))
    geocoder.cache("22222", Coordinates(2, 2))
    geocoder.get_cached("11111")
    geocoder.cache("33333", Coordinates(3, 3))

    assert geocoder.get_cached("22222") is None
    assert geocoder.get_cached("11111") == Coordinates(1, 1)
    assert geocoder.get_cached("33333") == Coordinates(3, 3)

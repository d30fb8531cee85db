"""
API tests for the station endpoints
pytest tests/test_endpoints.py
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from fuelmap.core.config import settings
from fuelmap.models.price import FuelType, Price
from fuelmap.models.response import PriceResponse, Source
from fuelmap.models.station import BrandName, StationPriceData
from fuelmap.services import aggregator as aggregator_module
from main import app

VALID_FUEL_TYPES = {"U91", "U95", "U98", "Diesel"}


class RecordingAggregator:
    def __init__(self, stations: list, source: Source = Source.LIVE) -> None:
        self.stations = stations
        self.source = source
        self.calls: list = []

    async def get_stations_near(self, lat: float, lng: float, radius_km: float) -> PriceResponse:
        self.calls.append((lat, lng, radius_km))
        return PriceResponse.build(self.stations, self.source)


def _station(station_id: str, brand: BrandName, cpl: float) -> StationPriceData:
    return StationPriceData(
        id=station_id,
        name=f"{brand.value} {station_id}",
        brand=brand,
        address="1 Test St",
        lat=-37.81,
        lng=144.96,
        prices=[Price(station_id=station_id, fuel_type=FuelType.U91, price_cpl=cpl,
                      updated_at=datetime(2025, 1, 1, tzinfo=timezone.utc))],
    )


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def recording(monkeypatch: pytest.MonkeyPatch) -> RecordingAggregator:
    fake = RecordingAggregator([_station("s1", BrandName.SHELL, 185.0), _station("s2", BrandName.AMPOL, 183.0)])
    monkeypatch.setattr(aggregator_module, "aggregator", fake)
    return fake


class TestPricesEndpoint:
    def test_envelope_uses_camel_case(self, client, recording):
        response = client.get("/api/prices", params={"lat": "-37.8136", "lng": "144.9631", "radiusKm": "12"})

        assert response.status_code == 200
        body = response.json()
        assert body["meta"] == {"count": 2, "source": "LIVE"}
        station = body["stations"][0]
        assert set(station) == {"id", "name", "brand", "address", "lat", "lng", "prices"}
        assert station["prices"][0]["fuelType"] == "U91"
        assert station["prices"][0]["priceCpl"] == 185.0
        assert station["prices"][0]["stationId"] == "s1"
        assert station["prices"][0]["updatedAt"].startswith("2025-01-01T00:00:00")
        assert recording.calls == [(-37.8136, 144.9631, 12.0)]

    @pytest.mark.parametrize(
        "params",
        [
            {"lat": "abc", "lng": "144.9631"},
            {"lat": "-37.8", "lng": ""},
            {"lng": "144.9631"},
            {"lat": "nan", "lng": "144.9631"},
            {"lat": "-137.8", "lng": "144.9631"},
        ],
    )
    def test_invalid_coordinates_are_rejected_before_any_tier(self, client, recording, params):
        response = client.get("/api/prices", params=params)

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid coords"}
        assert recording.calls == []

    @pytest.mark.parametrize(
        ("radius", "expected"),
        [(None, 10.0), ("5", 10.0), ("25", 25.0), ("wide", 10.0), ("-3", 10.0)],
    )
    def test_radius_floor(self, client, recording, radius, expected):
        params = {"lat": "-37.8", "lng": "144.9"}
        if radius is not None:
            params["radiusKm"] = radius

        client.get("/api/prices", params=params)

        assert recording.calls[0][2] == expected

    def test_radius_floor_is_configurable(self, client, recording, monkeypatch):
        monkeypatch.setattr(settings, "MIN_RADIUS_KM", 0.0)

        client.get("/api/prices", params={"lat": "-37.8", "lng": "144.9", "radiusKm": "2"})

        assert recording.calls[0][2] == 2.0

    def test_end_to_end_without_credential(self, client, fake_http, no_api_key):
        fake_http.queue(ConnectionError("offline"))

        response = client.get("/api/prices", params={"lat": "-37.8136", "lng": "144.9631", "radiusKm": "5"})

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["source"] == "MOCK"
        assert body["meta"]["count"] == len(body["stations"])
        for station in body["stations"]:
            for price in station["prices"]:
                assert price["fuelType"] in VALID_FUEL_TYPES
                assert price["priceCpl"] > 0
                assert round(price["priceCpl"], 1) == price["priceCpl"]


class TestSearchEndpoint:
    def test_discounts_reorder_results(self, client, recording):
        response = client.get(
            "/api/stations/search",
            params={"lat": "-37.8", "lng": "144.9", "discounts": "Shell:4", "discountIds": "coles-4c"},
        )

        assert response.status_code == 200
        body = response.json()
        assert [s["id"] for s in body["stations"]] == ["s1", "s2"]
        assert body["stations"][0]["prices"][0]["priceCpl"] == 177.0
        assert body["stations"][0]["originalPrices"][0]["priceCpl"] == 185.0
        assert "distanceKm" in body["stations"][0]
        assert body["meta"] == {"count": 2, "source": "LIVE"}

    def test_brand_filter(self, client, recording):
        response = client.get("/api/stations/search", params={"lat": "-37.8", "lng": "144.9", "brands": "ampol"})

        assert [s["id"] for s in response.json()["stations"]] == ["s2"]
        assert response.json()["meta"]["count"] == 1

    def test_invalid_coordinates_use_message_body(self, client, recording):
        response = client.get("/api/stations/search", params={"lat": "abc", "lng": "144.9"})

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid coords"}
        assert recording.calls == []

    @pytest.mark.parametrize(
        "params",
        [
            {"fuelType": "E10"},
            {"sort": "random"},
            {"brands": "Puma"},
            {"discounts": "Shell:lots"},
            {"discounts": "Shell:500"},
        ],
    )
    def test_bad_search_parameters(self, client, recording, params):
        response = client.get("/api/stations/search", params={"lat": "-37.8", "lng": "144.9", **params})

        assert response.status_code == 400
        assert recording.calls == []


def test_discount_catalogue(client):
    response = client.get("/api/discounts")

    assert response.status_code == 200
    ids = [d["id"] for d in response.json()]
    assert ids == ["coles-4c", "woolworths-4c", "racv", "united-2c", "711-app"]
    assert response.json()[0]["centsOff"] == 4


def test_rewards_for_brand(client):
    assert [r["id"] for r in client.get("/api/rewards/BP").json()] == ["qantas"]
    assert client.get("/api/rewards/Gull").status_code == 404

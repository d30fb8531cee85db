"""Live prices from the Victorian Government Servo Saver open data API.

The upstream payload has been seen in two envelope shapes:

* a flat list of stations (bare array or ``{"stations": [...]}``), each with
  an embedded ``prices`` list;
* ``{"fuelPriceDetails": [...]}``, each item wrapping one ``fuelStation``
  and its ``fuelPrices``.

``normalize_live_payload`` detects the shape and maps both onto
``StationPriceData``. Fields are checked one at a time: a bad price is
dropped without losing its station, a station without an id or coordinates
is dropped without losing the response.
"""

import math
import uuid
from datetime import datetime, timezone
from typing import Optional
import aiohttp
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from fuelmap.core.config import settings
from fuelmap.core.errors import LiveSourceError
from fuelmap.models.price import Price
from fuelmap.models.station import StationPriceData
from fuelmap.services.normalize import normalize_brand, normalize_fuel_type

FLAT_STATIONS = "stations"
PRICE_DETAILS = "fuelPriceDetails"

_TIMESTAMP = TypeAdapter(datetime)

def _parse_timestamp(value) -> datetime:
    if isinstance(value, str) and value:
        try:
            parsed = _TIMESTAMP.validate_python(value)
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValidationError:
            pass
    return datetime.now(timezone.utc)

def _parse_price_value(value) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price

def _text(value) -> str:
    if isinstance(value, dict):
        return str(value.get("name") or "") or ", ".join(str(v) for v in value.values() if v)
    return str(value) if value is not None else ""

def _location(raw: dict):
    location = raw.get("location") or {}
    lat = location.get("latitude", raw.get("lat")) if isinstance(location, dict) else raw.get("lat")
    lng = location.get("longitude", raw.get("lng")) if isinstance(location, dict) else raw.get("lng")
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return lat, lng

def map_price(station_id: str, raw: dict) -> Optional[Price]:
    if not isinstance(raw, dict):
        return None
    fuel_type = normalize_fuel_type(raw.get("fuelType"))
    if fuel_type is None or raw.get("isAvailable") is False:
        return None
    price_cpl = _parse_price_value(raw.get("price"))
    if price_cpl is None:
        return None
    return Price(
        station_id=station_id,
        fuel_type=fuel_type,
        price_cpl=price_cpl,
        updated_at=_parse_timestamp(raw.get("lastUpdated") or raw.get("updatedAt")),
    )

def map_station(raw: dict, raw_prices) -> Optional[StationPriceData]:
    if not isinstance(raw, dict):
        return None
    station_id = raw.get("code") or raw.get("id")
    location = _location(raw)
    if station_id is None or location is None:
        logger.warning(f"Skipping live station without id or location: {raw.get('name')}")
        return None

    station_id = str(station_id)
    brand = normalize_brand(_text(raw.get("brand")))
    prices = [map_price(station_id, p) for p in (raw_prices if isinstance(raw_prices, list) else [])]

    try:
        return StationPriceData(
            id=station_id,
            name=_text(raw.get("name")) or f"{brand.value} Station",
            brand=brand,
            address=_text(raw.get("address")),
            lat=location[0],
            lng=location[1],
            prices=[p for p in prices if p is not None],
        )
    except ValidationError as e:
        logger.warning(f"Skipping invalid live station {station_id}: {e}")
        return None

def _map_flat_station(item):
    if not isinstance(item, dict):
        return None
    return map_station(item, item.get("prices"))

def _map_price_detail(item):
    if not isinstance(item, dict):
        return None
    return map_station(item.get("fuelStation"), item.get("fuelPrices"))

SHAPE_MAPPERS = {
    FLAT_STATIONS: _map_flat_station,
    PRICE_DETAILS: _map_price_detail,
}

def detect_shape(body):
    """Return ``(shape, items)`` for a live payload or raise LiveSourceError."""
    if isinstance(body, dict):
        for shape in (PRICE_DETAILS, FLAT_STATIONS):
            if shape in body:
                items = body[shape]
                break
        else:
            raise LiveSourceError("Unrecognised live response envelope")
        if not isinstance(items, list):
            raise LiveSourceError(f"Live response field '{shape}' is not a list")
        return shape, items
    if isinstance(body, list):
        if body and all(isinstance(item, dict) and "fuelStation" in item for item in body):
            return PRICE_DETAILS, body
        return FLAT_STATIONS, body
    raise LiveSourceError("Invalid API response format")

def normalize_live_payload(body):
    shape, items = detect_shape(body)
    mapper = SHAPE_MAPPERS[shape]
    stations = [mapper(item) for item in items]
    stations = [s for s in stations if s is not None]
    logger.info(f"Mapped {len(stations)} of {len(items)} live stations ({shape})")
    return stations

class LivePriceService:
    @staticmethod
    def build_headers(api_key: str):
        return {
            "user-agent": settings.USER_AGENT,
            "x-consumer-id": api_key,
            "x-transactionid": str(uuid.uuid4()),
            "accept": "application/json",
        }

    @staticmethod
    async def get_stations(lat: float, lng: float, radius_km: float):
        api_key = settings.SERVO_SAVER_API_KEY
        if not api_key:
            raise LiveSourceError("No API key configured")

        url = f"{settings.LIVE_API_BASE_URL}/stations"
        params = {"latitude": str(lat), "longitude": str(lng), "radius": str(round(radius_km * 1000))}
        headers = LivePriceService.build_headers(api_key)
        timeout = aiohttp.ClientTimeout(total=settings.REQUEST_TIMEOUT)
        logger.info(f"Sending get live stations request to {url}")
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, headers=headers, params=params) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(f"Live API failed with status code {response.status}: {error_text}")
                    raise LiveSourceError(f"API Error: {response.status}")
                try:
                    body = await response.json(content_type=None)
                except ValueError as e:
                    raise LiveSourceError(f"Live API returned invalid JSON: {e}") from e
        logger.info("Get live stations request successful")
        return body

async def fetch_live_stations(lat: float, lng: float, radius_km: float):
    body = await LivePriceService.get_stations(lat, lng, radius_km)
    stations = normalize_live_payload(body)
    if not stations:
        raise LiveSourceError("No stations found in radius")
    return stations

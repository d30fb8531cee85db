from datetime import datetime, timezone
from typing import Optional
import aiohttp
from loguru import logger
from pydantic import ValidationError
from fuelmap.core.config import settings
from fuelmap.core.errors import SourceError
from fuelmap.models.price import FUEL_TYPES, Price
from fuelmap.models.station import StationPriceData
from fuelmap.services.normalize import normalize_brand
from fuelmap.services.synthetic import generate_price

class OverpassService:
    @staticmethod
    def build_query(lat: float, lng: float, radius_km: float) -> str:
        radius_m = round(radius_km * 1000)
        return (
            "[out:json][timeout:25];\n"
            "(\n"
            f'  node["amenity"="fuel"](around:{radius_m},{lat},{lng});\n'
            f'  way["amenity"="fuel"](around:{radius_m},{lat},{lng});\n'
            ");\n"
            "out center;\n"
        )

    @staticmethod
    async def get_elements(lat: float, lng: float, radius_km: float):
        url = settings.OVERPASS_URL
        headers = {"user-agent": settings.USER_AGENT, "accept": "application/json"}
        query = OverpassService.build_query(lat, lng, radius_km)
        timeout = aiohttp.ClientTimeout(total=settings.REQUEST_TIMEOUT)
        logger.info(f"Sending Overpass query to {url}")
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, data=query, headers=headers) as response:
                if response.status != 200:
                    logger.error(f"Overpass query failed with status code {response.status}")
                    raise SourceError(f"Overpass query failed with status code {response.status}")
                data = await response.json(content_type=None)
        if not isinstance(data, dict):
            raise SourceError("Unexpected Overpass response")
        elements = data.get("elements") or []
        if not isinstance(elements, list):
            raise SourceError("Overpass elements is not a list")
        return elements

def _coordinates(element: dict):
    lat, lng = element.get("lat"), element.get("lon")
    if lat is None or lng is None:
        center = element.get("center")
        if not isinstance(center, dict):
            return None
        lat, lng = center.get("lat"), center.get("lon")
    if lat is None or lng is None:
        return None
    return float(lat), float(lng)

def build_address(tags: dict, lat: float, lng: float) -> str:
    street = tags.get("addr:street")
    if not street:
        return f"{lat:.3f}, {lng:.3f}"
    address = f"{tags.get('addr:housenumber', '')} {street}"
    suburb = tags.get("addr:suburb")
    address += f", {suburb}" if suburb else " VIC"
    return address.strip()

def element_to_station(element: dict, base_price: float, rng=None) -> Optional[StationPriceData]:
    try:
        coordinates = _coordinates(element)
    except (TypeError, ValueError):
        coordinates = None
    if coordinates is None or element.get("id") is None:
        return None

    lat, lng = coordinates
    tags = element.get("tags") or {}
    if not isinstance(tags, dict):
        logger.warning(f"Dropping Overpass element {element.get('id')} with malformed tags")
        return None
    brand = normalize_brand(tags.get("name"), tags.get("brand"), tags.get("operator"))
    name = str(tags.get("name") or "") or f"{brand.value} Station"
    station_id = f"osm-{element['id']}"
    now = datetime.now(timezone.utc)

    try:
        return StationPriceData(
            id=station_id,
            name=name,
            brand=brand,
            address=build_address(tags, lat, lng),
            lat=lat,
            lng=lng,
            prices=[
                Price(
                    station_id=station_id,
                    fuel_type=fuel_type,
                    price_cpl=generate_price(fuel_type, f"{name} {brand.value}", base_price, rng),
                    updated_at=now,
                )
                for fuel_type in FUEL_TYPES
            ],
        )
    except ValidationError as e:
        logger.warning(f"Dropping Overpass element {element['id']}: {e}")
        return None

async def fetch_stations_from_osm(lat: float, lng: float, radius_km: float):
    """Real station locations from OpenStreetMap with synthetic prices.

    Never raises; any failure is logged and yields an empty list.
    """
    try:
        elements = await OverpassService.get_elements(lat, lng, radius_km)
        stations = []
        for element in elements:
            if not isinstance(element, dict):
                continue
            station = element_to_station(element, settings.MARKET_BASE_PRICE)
            if station is not None:
                stations.append(station)
        logger.info(f"Overpass returned {len(stations)} stations")
        return stations
    except Exception as e:
        logger.error(f"Failed to fetch stations from Overpass: {e}")
        return []

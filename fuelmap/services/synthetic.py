import math
import random
from datetime import datetime, timedelta, timezone
from geopy.distance import geodesic
from loguru import logger
from fuelmap.models.price import FUEL_TYPES, FuelType, Price
from fuelmap.models.station import BrandName, MAJOR_BRANDS, StationPriceData

# Offsets relative to the market U91 base price, in cents per litre
BRAND_PRICE_PROFILE = {
    BrandName.COSTCO: -15.0,
    BrandName.LIBERTY: -8.0,
    BrandName.METRO: -8.0,
    BrandName.UNITED: -4.0,
    BrandName.AMPOL: 0.0,
    BrandName.BP: 1.0,
    BrandName.SHELL: 1.0,
    BrandName.SEVEN_ELEVEN: 2.0,
    BrandName.INDEPENDENT: -5.0,
}

FUEL_PRICE_PROFILE = {
    FuelType.U91: 0.0,
    FuelType.U95: 14.0,
    FuelType.U98: 22.0,
    FuelType.DIESEL: 2.0,
}

# Discounters are checked before the majors so "Metro Petroleum (BP)" prices like Metro.
_OFFSET_ALIASES = [
    (BrandName.COSTCO, ("costco",)),
    (BrandName.LIBERTY, ("liberty",)),
    (BrandName.METRO, ("metro",)),
    (BrandName.UNITED, ("united",)),
    (BrandName.BP, ("bp",)),
    (BrandName.SHELL, ("shell", "coles express")),
    (BrandName.SEVEN_ELEVEN, ("7-eleven",)),
    (BrandName.AMPOL, ("ampol", "caltex")),
]

MAX_VARIANCE = 1.8

_rng = random.Random()

def brand_offset(brand) -> float:
    text = (brand.value if isinstance(brand, BrandName) else str(brand or "")).lower()
    for name, aliases in _OFFSET_ALIASES:
        if any(alias in text for alias in aliases):
            return BRAND_PRICE_PROFILE[name]
    return BRAND_PRICE_PROFILE[BrandName.INDEPENDENT]

def generate_price(fuel_type: FuelType, brand, base_price: float, rng=None) -> float:
    """Plausible cents-per-litre price for a station.

    ``rng`` is anything with a ``random()`` method; the variance keeps
    neighbouring stations from showing identical prices.
    """
    rng = rng or _rng
    variance = rng.random() * MAX_VARIANCE
    price = base_price + brand_offset(brand) + FUEL_PRICE_PROFILE[FuelType(fuel_type)] + variance
    return round(price, 1)

def generate_stations(lat: float, lng: float, radius_km: float, base_price: float, rng=None):
    """Scatter 10-19 made-up stations uniformly inside the radius."""
    rng = rng or _rng
    now = datetime.now(timezone.utc)
    count = rng.randint(10, 19)
    stations = []

    for i in range(count):
        distance = radius_km * math.sqrt(rng.random())
        bearing = rng.random() * 360
        point = geodesic(kilometers=distance).destination((lat, lng), bearing)

        brand = rng.choice(MAJOR_BRANDS) if rng.random() > 0.3 else BrandName.INDEPENDENT
        station_id = f"mock-{i}"

        stations.append(StationPriceData(
            id=station_id,
            name=f"{brand.value} Station {i + 1}",
            brand=brand,
            address=f"{rng.randint(1, 100)} Mock Street, VIC",
            lat=point.latitude,
            lng=point.longitude,
            prices=[
                Price(
                    station_id=station_id,
                    fuel_type=fuel_type,
                    price_cpl=generate_price(fuel_type, brand, base_price, rng),
                    updated_at=now - timedelta(seconds=rng.random() * 86400),
                )
                for fuel_type in FUEL_TYPES
            ],
        ))

    logger.info(f"Generated {len(stations)} synthetic stations around ({lat}, {lng})")
    return stations

from loguru import logger
from fuelmap.core.config import settings
from fuelmap.models.response import PriceResponse, Source
from fuelmap.services.live import fetch_live_stations
from fuelmap.services.overpass import fetch_stations_from_osm
from fuelmap.services.synthetic import generate_stations

def _synthetic(lat: float, lng: float, radius_km: float):
    return generate_stations(lat, lng, radius_km, settings.MARKET_BASE_PRICE)

class PriceAggregator:
    """Resolve stations near a point through live, Overpass and synthetic tiers.

    Each tier runs at most once per request and only if the previous one
    produced nothing. The synthetic tier cannot fail, so neither can this.
    """

    def __init__(self, live=fetch_live_stations, fallback=fetch_stations_from_osm, synthetic=_synthetic):
        self.live = live
        self.fallback = fallback
        self.synthetic = synthetic

    async def get_stations_near(self, lat: float, lng: float, radius_km: float) -> PriceResponse:
        try:
            stations = await self.live(lat, lng, radius_km)
            if stations:
                logger.info(f"Serving {len(stations)} live stations")
                return PriceResponse.build(stations, Source.LIVE)
            logger.warning("Live source returned no stations")
        except Exception as e:
            logger.warning(f"Using fallback data (reason): {e}")

        try:
            stations = await self.fallback(lat, lng, radius_km)
            if stations:
                logger.info(f"Serving {len(stations)} Overpass stations with synthetic prices")
                return PriceResponse.build(stations, Source.MOCK)
            logger.warning("Overpass fallback returned no stations")
        except Exception as e:
            logger.error(f"Overpass fallback failed: {e}")

        stations = self.synthetic(lat, lng, radius_km)
        logger.info(f"Serving {len(stations)} synthetic stations")
        return PriceResponse.build(stations, Source.MOCK)

aggregator = PriceAggregator()

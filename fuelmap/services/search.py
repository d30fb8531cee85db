from typing import Dict, List, Optional
from geopy.distance import geodesic
from pydantic import BaseModel
from fuelmap.models.price import FuelType
from fuelmap.models.station import BrandName, RankedStation
from fuelmap.services.offers import rewards_for_brand

SORT_CHEAPEST = "cheapest"
SORT_CLOSEST = "closest"
SORT_OPTIONS = (SORT_CHEAPEST, SORT_CLOSEST)

# Effective prices stay positive whatever the discount
MIN_EFFECTIVE_CPL = 0.1

class SearchCriteria(BaseModel):
    fuel_type: FuelType = FuelType.U91
    brands: Optional[List[BrandName]] = None
    include_independents: bool = True
    partnerships: List[str] = []
    discounts: Dict[BrandName, float] = {}
    sort: str = SORT_CHEAPEST

    def selected_brands(self):
        if self.brands is None:
            return {b for b in BrandName if b != BrandName.INDEPENDENT}
        return set(self.brands)

def matches_brand(station, criteria: SearchCriteria) -> bool:
    if station.brand == BrandName.INDEPENDENT:
        return criteria.include_independents
    return station.brand in criteria.selected_brands()

def matches_partnerships(station, criteria: SearchCriteria) -> bool:
    if not criteria.partnerships:
        return True
    return any(r.id in criteria.partnerships for r in rewards_for_brand(station.brand))

def rank_station(station, center, criteria: SearchCriteria) -> RankedStation:
    discount = criteria.discounts.get(station.brand, 0.0)
    adjusted = [
        p.model_copy(update={"price_cpl": max(round(p.price_cpl - discount, 1), MIN_EFFECTIVE_CPL)}) if discount else p
        for p in station.prices
    ]
    return RankedStation(
        **station.model_dump(exclude={"prices"}),
        prices=adjusted,
        original_prices=station.prices,
        distance_km=geodesic(center, (station.lat, station.lng)).km,
    )

def search_stations(stations, center, criteria: SearchCriteria) -> List[RankedStation]:
    """Filter by brand and partnership, apply discounts, then sort."""
    ranked = [
        rank_station(s, center, criteria)
        for s in stations
        if matches_brand(s, criteria) and matches_partnerships(s, criteria)
    ]

    if criteria.sort == SORT_CLOSEST:
        ranked.sort(key=lambda s: s.distance_km)
    else:
        def price_key(s):
            price = s.price_for(criteria.fuel_type)
            return (price is None, price.price_cpl if price else 0.0)
        ranked.sort(key=price_key)
    return ranked

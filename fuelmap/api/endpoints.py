import math
from typing import Optional
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger
from fuelmap.core.config import settings
from fuelmap.core.errors import InvalidCoordinates
from fuelmap.models.price import FuelType
from fuelmap.models.response import Meta, PriceResponse, SearchResponse
from fuelmap.models.station import BrandName
from fuelmap.services import aggregator as aggregator_module
from fuelmap.services.offers import AVAILABLE_DISCOUNTS, discounts_from_ids, rewards_for_brand
from fuelmap.services.search import SORT_OPTIONS, SearchCriteria, search_stations

router = APIRouter(prefix="/api")

MAX_DISCOUNT_CENTS = 50.0

async def invalid_coordinates_handler(request: Request, exc: InvalidCoordinates):
    return JSONResponse(status_code=400, content={"message": "Invalid coords"})

def parse_coordinate(value: Optional[str], limit: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinates(value)
    if not math.isfinite(number) or abs(number) > limit:
        raise InvalidCoordinates(value)
    return number

def resolve_radius(value: Optional[str]) -> float:
    try:
        radius = float(value) if value is not None else settings.DEFAULT_RADIUS_KM
    except ValueError:
        radius = settings.DEFAULT_RADIUS_KM
    if not math.isfinite(radius) or radius <= 0:
        radius = settings.DEFAULT_RADIUS_KM
    return max(radius, settings.MIN_RADIUS_KM)

def _split(value: Optional[str]):
    return [item.strip() for item in (value or "").split(",") if item.strip()]

def _brand(value: str) -> BrandName:
    for brand in BrandName:
        if brand.value.lower() == value.lower():
            return brand
    raise HTTPException(status_code=400, detail=f"Unknown brand: {value}")

def _parse_discounts(value: Optional[str]):
    discounts = {}
    for pair in _split(value):
        brand, sep, cents = pair.rpartition(":")
        try:
            amount = float(cents)
        except ValueError:
            amount = math.nan
        if not sep or not math.isfinite(amount) or not 0 <= amount <= MAX_DISCOUNT_CENTS:
            raise HTTPException(status_code=400, detail=f"Invalid discount: {pair}")
        brand = _brand(brand.strip())
        discounts[brand] = discounts.get(brand, 0.0) + amount
    return discounts

async def _resolve(lat: Optional[str], lng: Optional[str], radius_km: Optional[str]):
    try:
        latitude = parse_coordinate(lat, 90)
        longitude = parse_coordinate(lng, 180)
    except InvalidCoordinates as e:
        logger.warning(f"Rejecting request with invalid coordinates: {e}")
        raise
    radius = resolve_radius(radius_km)
    logger.info(f"Resolving stations near ({latitude}, {longitude}) within {radius} km")
    response = await aggregator_module.aggregator.get_stations_near(latitude, longitude, radius)
    return latitude, longitude, response

@router.get("/prices", response_model=PriceResponse)
async def get_prices(
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    radius_km: Optional[str] = Query(None, alias="radiusKm"),
):
    _, _, response = await _resolve(lat, lng, radius_km)
    return response

@router.get("/stations/search", response_model=SearchResponse)
async def search(
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    radius_km: Optional[str] = Query(None, alias="radiusKm"),
    fuel_type: str = Query(FuelType.U91.value, alias="fuelType"),
    brands: Optional[str] = None,
    include_independents: bool = Query(True, alias="includeIndependents"),
    partnerships: Optional[str] = None,
    discount_ids: Optional[str] = Query(None, alias="discountIds"),
    discounts: Optional[str] = None,
    sort: str = "cheapest",
):
    try:
        fuel = FuelType(fuel_type)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown fuel type: {fuel_type}")
    if sort not in SORT_OPTIONS:
        raise HTTPException(status_code=400, detail=f"Unknown sort: {sort}")

    totals = discounts_from_ids(_split(discount_ids))
    for brand, amount in _parse_discounts(discounts).items():
        totals[brand] = totals.get(brand, 0.0) + amount

    criteria = SearchCriteria(
        fuel_type=fuel,
        brands=[_brand(b) for b in _split(brands)] if brands else None,
        include_independents=include_independents,
        partnerships=_split(partnerships),
        discounts=totals,
        sort=sort,
    )

    latitude, longitude, response = await _resolve(lat, lng, radius_km)
    ranked = search_stations(response.stations, (latitude, longitude), criteria)
    logger.info(f"Search kept {len(ranked)} of {response.meta.count} stations")
    return SearchResponse(stations=ranked, meta=Meta(count=len(ranked), source=response.meta.source))

@router.get("/discounts")
async def list_discounts():
    return [d.model_dump(by_alias=True) for d in AVAILABLE_DISCOUNTS]

@router.get("/rewards/{brand}")
async def read_rewards(brand: str):
    try:
        brand_name = _brand(brand)
    except HTTPException:
        raise HTTPException(status_code=404, detail="Brand not found")
    return [r.model_dump() for r in rewards_for_brand(brand_name)]

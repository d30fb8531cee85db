from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict, Field
from fuelmap.models.price import FuelType, Price

class BrandName(str, Enum):
    AMPOL = "Ampol"
    BP = "BP"
    SHELL = "Shell"
    SEVEN_ELEVEN = "7-Eleven"
    UNITED = "United"
    COSTCO = "Costco"
    LIBERTY = "Liberty"
    METRO = "Metro"
    INDEPENDENT = "Independent"

MAJOR_BRANDS = [BrandName.AMPOL, BrandName.BP, BrandName.SHELL, BrandName.SEVEN_ELEVEN, BrandName.UNITED]

class Station(BaseModel):
    id: str
    name: str
    brand: BrandName
    address: str = ""
    lat: float
    lng: float

class StationPriceData(Station):
    prices: List[Price] = []

    def price_for(self, fuel_type: FuelType):
        """First price recorded for ``fuel_type``, or None."""
        for price in self.prices:
            if price.fuel_type == fuel_type:
                return price
        return None

class RankedStation(StationPriceData):
    model_config = ConfigDict(populate_by_name=True)

    distance_km: float = Field(alias="distanceKm")
    original_prices: List[Price] = Field(default=[], alias="originalPrices")

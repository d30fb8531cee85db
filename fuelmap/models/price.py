from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

class FuelType(str, Enum):
    U91 = "U91"
    U95 = "U95"
    U98 = "U98"
    DIESEL = "Diesel"

FUEL_TYPES = [FuelType.U91, FuelType.U95, FuelType.U98, FuelType.DIESEL]

class Price(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    station_id: str = Field(alias="stationId")
    fuel_type: FuelType = Field(alias="fuelType")
    price_cpl: float = Field(alias="priceCpl", gt=0)
    updated_at: datetime = Field(alias="updatedAt")

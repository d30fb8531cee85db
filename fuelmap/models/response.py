from enum import Enum
from typing import List
from pydantic import BaseModel
from fuelmap.models.station import RankedStation, StationPriceData

class Source(str, Enum):
    LIVE = "LIVE"
    MOCK = "MOCK"

class Meta(BaseModel):
    count: int
    source: Source

class PriceResponse(BaseModel):
    stations: List[StationPriceData]
    meta: Meta

    @classmethod
    def build(cls, stations, source: Source) -> "PriceResponse":
        return cls(stations=stations, meta=Meta(count=len(stations), source=source))

class SearchResponse(BaseModel):
    stations: List[RankedStation]
    meta: Meta

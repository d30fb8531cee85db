from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from fuelmap.models.station import BrandName

ALL_BRANDS = "All"

class DiscountOption(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    brand: Union[BrandName, str]
    cents_off: float = Field(alias="centsOff")
    description: Optional[str] = None

class RewardProgram(BaseModel):
    id: str
    name: str
    description: str

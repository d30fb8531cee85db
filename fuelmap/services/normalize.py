"""Map external brand and fuel vocabularies onto the internal enumerations."""

from typing import Optional
from fuelmap.models.price import FuelType
from fuelmap.models.station import BrandName

# Order matters: the first alias found in the text wins.
BRAND_ALIASES = [
    (BrandName.AMPOL, ("ampol", "caltex")),
    (BrandName.BP, ("bp",)),
    (BrandName.SHELL, ("shell", "coles express", "viva")),
    (BrandName.SEVEN_ELEVEN, ("7-eleven", "7 eleven")),
    (BrandName.UNITED, ("united",)),
    (BrandName.COSTCO, ("costco",)),
    (BrandName.LIBERTY, ("liberty",)),
    (BrandName.METRO, ("metro",)),
]

FUEL_CODES = {
    "U91": FuelType.U91,
    "P95": FuelType.U95,
    "P98": FuelType.U98,
    "DSL": FuelType.DIESEL,
    "PDSL": FuelType.DIESEL,
}

def normalize_brand(*texts: Optional[str]) -> BrandName:
    """Classify free brand text, joining several source fields if given.

    Never fails: anything unrecognised is Independent.
    """
    combined = " ".join(str(t) for t in texts if t).lower()
    for brand, aliases in BRAND_ALIASES:
        if any(alias in combined for alias in aliases):
            return brand
    return BrandName.INDEPENDENT

def normalize_fuel_type(code) -> Optional[FuelType]:
    if not isinstance(code, str):
        return None
    return FUEL_CODES.get(code.strip())

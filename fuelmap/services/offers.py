from fuelmap.models.offer import ALL_BRANDS, DiscountOption, RewardProgram
from fuelmap.models.station import BrandName

AVAILABLE_DISCOUNTS = [
    DiscountOption(id="coles-4c", label="Coles Shopper", brand=BrandName.SHELL, cents_off=4,
                   description="4c off at Shell Coles Express"),
    DiscountOption(id="woolworths-4c", label="Woolworths Rewards", brand=BrandName.AMPOL, cents_off=4,
                   description="4c off at Ampol/Caltex"),
    DiscountOption(id="racv", label="RACV Member", brand=BrandName.AMPOL, cents_off=4,
                   description="Save at participating Ampol"),
    DiscountOption(id="united-2c", label="United Card", brand=BrandName.UNITED, cents_off=2),
    DiscountOption(id="711-app", label="7-Eleven App", brand=BrandName.SEVEN_ELEVEN, cents_off=2,
                   description="Fuel Lock savings"),
]

QANTAS = RewardProgram(id="qantas", name="Qantas Frequent Flyer",
                       description="Earn 2 points per litre on BP Ultimate")
FLYBUYS = RewardProgram(id="flybuys", name="Flybuys",
                        description="Collect points & 4c off/L with docket")
EVERYDAY_REWARDS = RewardProgram(id="everyday-rewards", name="Everyday Rewards",
                                 description="Collect points & 4c off/L")
VELOCITY = RewardProgram(id="velocity", name="Velocity Points",
                         description="Earn 2 points per litre on premium fuel")
RACV = RewardProgram(id="racv", name="RACV Member", description="Save 4c/L - Show your card")

BRAND_REWARDS = {
    BrandName.BP: [QANTAS],
    BrandName.SHELL: [FLYBUYS],
    BrandName.AMPOL: [EVERYDAY_REWARDS, RACV],
    BrandName.SEVEN_ELEVEN: [VELOCITY],
    BrandName.UNITED: [RACV],
}

def rewards_for_brand(brand: BrandName):
    return list(BRAND_REWARDS.get(BrandName(brand), []))

def discounts_from_ids(discount_ids):
    """Per-brand cents off for the selected catalogue entries.

    Unknown ids are ignored. Options for the same brand add up.
    """
    catalogue = {d.id: d for d in AVAILABLE_DISCOUNTS}
    totals = {}
    for discount_id in discount_ids:
        option = catalogue.get(discount_id)
        if option is None:
            continue
        brands = list(BrandName) if option.brand == ALL_BRANDS else [BrandName(option.brand)]
        for brand in brands:
            totals[brand] = totals.get(brand, 0.0) + option.cents_off
    return totals

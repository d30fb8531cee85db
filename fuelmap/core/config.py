import os
from dotenv import load_dotenv

load_dotenv()

# Costco's 15c synthetic discount plus 1c, so every generated price stays positive
MIN_MARKET_BASE_PRICE: float = 16.0

class Settings:
    PROJECT_NAME: str = "FuelMap"
    PROJECT_VERSION: str = "1.0.0"
    SERVO_SAVER_API_KEY: str = os.getenv("SERVO_SAVER_API_KEY")
    LIVE_API_BASE_URL: str = os.getenv("LIVE_API_BASE_URL", "https://api.fuel.service.vic.gov.au/open-data/v1/fuel")
    OVERPASS_URL: str = os.getenv("OVERPASS_URL", "https://overpass-api.de/api/interpreter")
    USER_AGENT: str = os.getenv("USER_AGENT", "FuelMapVIC/1.0")
    MARKET_BASE_PRICE: float = float(os.getenv("MARKET_BASE_PRICE", "182.9"))
    DEFAULT_RADIUS_KM: float = float(os.getenv("DEFAULT_RADIUS_KM", "5"))
    # Floor applied to every requested radius; 0 disables it
    MIN_RADIUS_KM: float = float(os.getenv("MIN_RADIUS_KM", "10"))
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "15"))
    LOG_FILE: str = os.getenv("LOG_FILE", "app.log")
    LOG_ROTATION: str = os.getenv("LOG_ROTATION", "500 MB")

    def validate(self) -> "Settings":
        if not self.MARKET_BASE_PRICE >= MIN_MARKET_BASE_PRICE:
            raise ValueError(
                f"MARKET_BASE_PRICE must be at least {MIN_MARKET_BASE_PRICE} cents, got {self.MARKET_BASE_PRICE}"
            )
        if not self.DEFAULT_RADIUS_KM > 0:
            raise ValueError(f"DEFAULT_RADIUS_KM must be positive, got {self.DEFAULT_RADIUS_KM}")
        if not self.REQUEST_TIMEOUT > 0:
            raise ValueError(f"REQUEST_TIMEOUT must be positive, got {self.REQUEST_TIMEOUT}")
        return self

settings = Settings().validate()

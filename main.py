from fastapi import FastAPI
from loguru import logger
from fuelmap.api import endpoints
from fuelmap.core.config import settings
from fuelmap.core.errors import InvalidCoordinates
import uvicorn

app = FastAPI(title=settings.PROJECT_NAME, version=settings.PROJECT_VERSION)

# Configure logging
logger.add(settings.LOG_FILE, rotation=settings.LOG_ROTATION)

# Disable default Gunicorn error logging
import logging
gunicorn_error_logger = logging.getLogger("gunicorn.error")
gunicorn_error_logger.handlers = []

@app.on_event("startup")
async def log_configuration():
    if settings.SERVO_SAVER_API_KEY:
        logger.info(f"Live prices enabled via {settings.LIVE_API_BASE_URL}")
    else:
        logger.warning("SERVO_SAVER_API_KEY not set, serving fallback data only")
    logger.info(f"Radius floor is {settings.MIN_RADIUS_KM} km, market base price {settings.MARKET_BASE_PRICE}")

app.include_router(endpoints.router)
app.add_exception_handler(InvalidCoordinates, endpoints.invalid_coordinates_handler)

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=5269, log_level="info")

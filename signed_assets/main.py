import logging

from fastapi import FastAPI

from signed_assets.api.router import api_router
from signed_assets.core.config import get_settings

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title=settings.APP_NAME)
app.include_router(api_router)

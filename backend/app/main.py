from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.app.api.v1.router import router as v1_router
from backend.app.core.config import get_settings
from backend.app.core.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    yield


app = FastAPI(title="PHARMACIE BACK-OFFICE", version="0.1.0", lifespan=lifespan)
app.include_router(v1_router, prefix="/v1")

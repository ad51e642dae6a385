import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.app.core.settings import settings
from .deps import close_gateway
from .routes import orgs, vehicles

logging.basicConfig(level=settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_gateway()


app = FastAPI(title="VIN Decode Gateway", version="0.1.0", lifespan=lifespan)

app.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
app.include_router(orgs.router, prefix="/orgs", tags=["orgs"])

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api.errors import register_exception_handlers
from app.api.router import api_router
from app.core.config import settings
from app.services.upstream_client import upstream_client


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    # A missing api.base.url is fatal: let ConfigurationError abort startup
    await upstream_client.initialize(settings)
    yield
    await upstream_client.close()


app = FastAPI(
    title="Employee Gateway API",
    description="Simplified facade over the upstream employee directory",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Employee Gateway API"}

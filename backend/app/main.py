from __future__ import annotations

import logging
from collections.abc import AsyncGenerator  # noqa: TC003
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.logging_config import configure_logging
from app.routers import health, overview
from app.services.factory import get_listing_source
from app.viewmodels.overview import OverviewViewModel

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging("DEBUG" if settings.debug else settings.log_level)

    # The source's shared HTTP client lives as long as the app
    async with get_listing_source() as source:
        app.state.listing_source = source
        # One overview screen per application run
        view_model = OverviewViewModel(source)
        app.state.overview_view_model = view_model
        logger.info("Overview screen started (source=%s)", source.source_name)
        try:
            yield
        finally:
            await view_model.aclose()
            logger.info("Overview screen torn down")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(overview.router, prefix=settings.api_prefix, tags=["overview"])

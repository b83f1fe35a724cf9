import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .common.errors import StoreInitError
from .core.logging_config import configure_logging
from .features.reports.router import router as reports_router
from .features.reports.schemas import HealthResponse
from .features.sales.store import SalesStore, init_sales_store

logger = logging.getLogger("sales_reports.main")  # This logger will inherit from 'sales_reports'


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Opens the sales store handed to create_app(), or initializes the configured
    one. A store that can't be initialized aborts startup, so no request is
    ever served without one.
    """
    logger.info("Starting sales report service...")
    store = app.state.sales_store
    if store is None:
        result = init_sales_store()
        if not result.ok:
            raise StoreInitError(result.error)
        store = app.state.sales_store = result.store

    await store.open()
    logger.info("Sales store '%s' is ready.", store.name)

    yield

    await store.close()
    logger.info("Sales report service stopped.")


def create_app(store: Optional[SalesStore] = None) -> FastAPI:
    app = FastAPI(
        title="TechNorth Sales Reports",
        description="Downloads the TechNorth sales report as a PDF.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.sales_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def read_root(request: Request):
        """
        Root endpoint for the API.
        """
        client_host = request.client.host if request.client else "unknown client"
        logger.info(f"Root endpoint '/' accessed by {client_host}")
        return {"message": "TechNorth sales report service. Download the report from /report/sales."}

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request):
        store = request.app.state.sales_store
        return HealthResponse(status="ok", store=store.name if store else None)

    app.include_router(reports_router)
    return app


configure_logging()
app = create_app()

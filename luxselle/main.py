# luxselle/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from luxselle.core.config import get_settings
from luxselle.core.errors import register_exception_handlers
from luxselle.core.logging_config import configure_logging
from luxselle.core.metrics import ErrorTracker
from luxselle.core.middleware import register_request_middleware
from luxselle.database import create_all_tables, engine
from luxselle.routes import (
    buying_list,
    dashboard,
    health,
    invoices,
    jobs,
    pricing,
    products,
    settings as settings_routes,
    sourcing,
    suppliers,
    vat,
)
from luxselle.services.ai.router import AiRouter

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.AUTO_CREATE_TABLES:
        logger.info("AUTO_CREATE_TABLES enabled, creating missing tables")
        await create_all_tables()

    mode = app.state.ai_router.routing_mode().value
    availability = app.state.ai_router.provider_availability()
    logger.info(f"Luxselle API starting: env={settings.ENVIRONMENT} store={settings.store_backend} ai_mode={mode} ai_providers={availability}")

    yield

    logger.info("Shutting down, disposing database engine")
    await engine.dispose()

def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Luxselle Operations API",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.error_tracker = ErrorTracker()
    app.state.ai_router = AiRouter(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_request_middleware(app)
    register_exception_handlers(app)

    for module in (
        health, products, buying_list, suppliers, sourcing, dashboard, jobs, pricing, settings_routes,
        invoices, vat,
    ):
        app.include_router(module.router, prefix="/api")

    return app


app = create_app()

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_tracker.api.error import register_exception_handlers
from invoice_tracker.api.middleware import RequestLoggingMiddleware
from invoice_tracker.api.routes import (
    admin,
    invoice_callback,
    invoice_status,
    invoices,
    webhook_events,
    workflow_events,
)
from invoice_tracker.api.sentry import init_sentry
from invoice_tracker.depends import init_db

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_sentry(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_db()
        logger.info("Invoice tracker started")
        yield
        logger.info("Invoice tracker stopped")

    app = FastAPI(
        title="Invoice Tracker",
        description="Tracks asynchronous invoice PDF generation",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    for module in (invoice_callback, workflow_events, invoice_status, invoices, webhook_events, admin):
        app.include_router(module.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app

import logging
import os
from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from invoice_tracker.adapter.services.workflow_service import WebhookWorkflowService
from invoice_tracker.app.services.workflow_service import WorkflowService
import invoice_tracker.domain  # noqa: F401  registers tables on SQLModel.metadata

logger = logging.getLogger(__name__)


def ensure_sqlite_directory(db_uri: str) -> None:
    """Create the parent directory of a file-backed SQLite database"""
    url = make_url(db_uri)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if not database or database == ":memory:":
        return
    directory = os.path.dirname(os.path.abspath(database))
    os.makedirs(directory, exist_ok=True)


ensure_sqlite_directory(ApplicationConfig.DB_URI)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_db(db_engine: AsyncEngine = engine) -> None:
    async with db_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables initialized")


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_workflow_service(request: Request) -> WorkflowService:
    config = request.app.state.config
    return WebhookWorkflowService(
        webhook_url=config.WORKFLOW_WEBHOOK_URL,
        token=config.WORKFLOW_WEBHOOK_TOKEN or None,
        timeout=float(config.WORKFLOW_TIMEOUT_SECONDS),
    )

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from invoice_tracker.adapter.services.workflow_service import WebhookWorkflowService
from invoice_tracker.depends import get_session, get_workflow_service

CALLBACK_SECRET = "test-callback-secret"
WEBHOOK_URL = "https://hooks.example.com/invoice"


class IntegrationConfig(ApplicationConfig):
    CALLBACK_SECRET = CALLBACK_SECRET
    CALLBACK_AUTH_MODE = "any"
    ENABLE_SENTRY = 0
    ENABLE_LOGGING_MIDDLEWARE = True
    WORKFLOW_WEBHOOK_URL = WEBHOOK_URL


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'invoice_tracker_test.db'}", echo=False, future=True
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def workflow_responses():
    """
    Queue of responses the fake workflow webhook returns, oldest first.
    Defaults to a plain 200 acknowledgement once the queue is empty.
    """
    return []


@pytest.fixture
def workflow_requests():
    return []


@pytest.fixture
def app(db_session, workflow_responses, workflow_requests):
    from invoice_tracker.api.app import create_app

    app = create_app(IntegrationConfig)

    async def override_get_session():
        yield db_session

    def handler(request: httpx.Request) -> httpx.Response:
        workflow_requests.append(request)
        if workflow_responses:
            return workflow_responses.pop(0)
        return httpx.Response(200, text="Accepted")

    def override_get_workflow_service():
        return WebhookWorkflowService(WEBHOOK_URL, transport=httpx.MockTransport(handler))

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_workflow_service] = override_get_workflow_service
    return app


@pytest_asyncio.fixture
async def client(app):
    """Create test client with database session override"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {CALLBACK_SECRET}"}

"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer
from testcontainers.redis import RedisContainer

from core.config import Settings
from core.redis import RedisClient, set_redis_client
from models.base import Base


TEST_JWT_SECRET = "test-jwt-secret-for-signing-tokens"
TEST_PASSWORD = "123456"

# Must be present before any app import triggers Settings validation
os.environ["JWT_SECRET"] = TEST_JWT_SECRET


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer]:
    """Start a PostgreSQL container for the test session."""
    with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def redis_container() -> Generator[RedisContainer]:
    """Start a Redis container for the test session."""
    with RedisContainer("redis:7") as redis:
        yield redis


@pytest.fixture(scope="session")
def database_url(postgres_container: PostgresContainer) -> str:
    """
    Get the database URL from the container and set it in environment.

    This must be set before any app imports that trigger Settings validation.
    """
    url = postgres_container.get_connection_url()
    os.environ["DATABASE_URL"] = url
    return url


@pytest.fixture
def settings(database_url: str) -> Settings:
    """Settings matching what the app sees during tests."""
    return Settings(
        _env_file=None,
        database_url=database_url,
        jwt_secret=TEST_JWT_SECRET,
    )


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine for testing."""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_connection(async_engine: AsyncEngine) -> AsyncGenerator[AsyncConnection]:
    """
    Create a connection with a transaction that will be rolled back after the test.

    This provides test isolation - each test runs in its own transaction
    that is rolled back, so tests don't affect each other.
    """
    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        try:
            yield connection
        finally:
            await transaction.rollback()


@pytest.fixture
async def db_session(db_connection: AsyncConnection) -> AsyncGenerator[AsyncSession]:
    """
    Create an async session bound to the test transaction.

    Uses savepoints so the session's flush/commit work inside the outer test transaction.
    """
    session_factory = async_sessionmaker(
        bind=db_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
async def redis_client(redis_container: RedisContainer) -> AsyncGenerator[RedisClient]:
    """
    Connect a RedisClient to the test container and install it as the global client.

    The database is flushed before each test so rate limit counters start at zero.
    """
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)
    client = RedisClient(f"redis://{host}:{port}/0")
    await client.connect()
    await client.flushdb()
    set_redis_client(client)

    yield client

    set_redis_client(None)
    await client.close()


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient]:
    """Create an unauthenticated test client with database session override."""
    # Clear the settings cache so it picks up DATABASE_URL from environment
    from core.config import get_settings  # noqa: PLC0415

    get_settings.cache_clear()

    from api.main import app  # noqa: PLC0415
    from db.session import get_async_session  # noqa: PLC0415

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


SignupFn = Callable[[str], Awaitable[str]]


@pytest.fixture
def signup(client: AsyncClient) -> SignupFn:
    """Return a helper that signs up `email` through the API and returns its access token."""

    async def _signup(email: str) -> str:
        response = await client.post(
            "/auth/signup", json={"email": email, "password": TEST_PASSWORD},
        )
        assert response.status_code == 201, response.text
        return response.json()["access_token"]

    return _signup


@pytest.fixture
async def auth_client(client: AsyncClient, signup: SignupFn) -> AsyncClient:
    """Test client authenticated as a freshly signed-up user."""
    token = await signup("user@example.com")
    client.headers["Authorization"] = f"Bearer {token}"
    return client


@pytest.fixture
async def other_client(
    auth_client: AsyncClient,  # noqa: ARG001
    signup: SignupFn,
) -> AsyncGenerator[AsyncClient]:
    """
    A second authenticated client, for a different user than auth_client.

    Shares the app and database session override with auth_client.
    """
    from api.main import app  # noqa: PLC0415

    token = await signup("other@example.com")
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as second_client:
        yield second_client

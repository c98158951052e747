"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: in-memory SQLite engine with seeded reference data
    - Cache Fixtures: in-memory stand-in for the Redis cache
    - Service Fixtures: store, mute cache, orchestrator, observability recorder
    - Application Fixtures: FastAPI app and HTTP client, bearer tokens
    - Messaging Fixtures: fake deliveries and transport
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
import os
from typing import TYPE_CHECKING, Any

from httpx import ASGITransport, AsyncClient
import jwt
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tests.utils import (
    MUTED_EVENT,
    OTHER_MUTED_EVENT,
    UNMUTED_EVENT,
    FakeDelivery,
    InMemoryCache,
    RecordingObservability,
    envelope_body,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

# Ensure tests run without external infrastructure
os.environ.setdefault("RABBIT_ENABLED", "false")
os.environ.setdefault("LOG_JSON_LOGS", "false")

JWT_SECRET = "test-secret"


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine over a single shared in-memory SQLite connection."""
    from notification_service.core.database import Base
    import notification_service.features.notifications.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with seeded event types, mute settings and tenants.

    Event 1 and 3 are muted, event 2 is not; event 999 has no setting.
    """
    from notification_service.features.notifications.models import EventType, MuteSetting, Tenant

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                EventType(id=MUTED_EVENT, event_type="user_signup"),
                EventType(id=UNMUTED_EVENT, event_type="order_placed"),
                EventType(id=OTHER_MUTED_EVENT, event_type="password_reset"),
                Tenant(id=1, tenant_name="acme"),
                Tenant(id=2, tenant_name="globex"),
            ]
        )
        await session.flush()
        session.add_all(
            [
                MuteSetting(event_id=MUTED_EVENT, is_muted=True),
                MuteSetting(event_id=UNMUTED_EVENT, is_muted=False),
                MuteSetting(event_id=OTHER_MUTED_EVENT, is_muted=True),
            ]
        )
        await session.commit()
    return factory


@pytest.fixture
def add_notifications(session_factory):
    """Insert ``count`` notifications for a tenant/event pair directly."""
    from notification_service.features.notifications.models import Notification

    async def _add(tenant_id: int, event_id: int, count: int = 1) -> None:
        async with session_factory() as session:
            session.add_all(
                [
                    Notification(tenant_id=tenant_id, event_id=event_id, message=f"message {i}")
                    for i in range(count)
                ]
            )
            await session.commit()

    return _add


# ============================================================================
# Cache Fixtures
# ============================================================================


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def observability() -> RecordingObservability:
    return RecordingObservability()


@pytest.fixture
def store(session_factory):
    from notification_service.features.notifications.repository import NotificationStore

    return NotificationStore(session_factory)


@pytest.fixture
def mute_cache(store, cache, observability):
    from notification_service.features.notifications.mute_cache import MuteSettingCache

    return MuteSettingCache(store, cache, observability=observability)


@pytest.fixture
def notification_service(store, mute_cache, observability):
    from notification_service.features.notifications.service import NotificationService

    return NotificationService(store, mute_cache, observability)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def auth_settings():
    from notification_service.core.settings import AuthSettings

    return AuthSettings(jwt_secret=JWT_SECRET)


@pytest.fixture
def make_token():
    """Sign a bearer token; pass ``tenant_id=None`` to omit the claim."""

    def _make(tenant_id: Any = 1, secret: str = JWT_SECRET, **claims: Any) -> str:
        payload = dict(claims)
        if tenant_id is not None:
            payload["tenant_id"] = tenant_id
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(1)}"}


@pytest.fixture
def app(notification_service, auth_settings, db_engine):
    """FastAPI app with services wired on ``app.state``; lifespan does not run."""
    from notification_service.app.main import create_app
    from notification_service.infra.auth import TokenDecoder
    from notification_service.infra.database import check_database_health

    application = create_app()
    application.state.notification_service = notification_service
    application.state.token_decoder = TokenDecoder(auth_settings)
    application.state.notification_worker = None

    async def health_check() -> tuple[bool, bool]:
        return await check_database_health(db_engine), True

    application.state.health_check = health_check
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Messaging Fixtures
# ============================================================================


@pytest.fixture
def delivery_factory():
    def _make(tenant_id: Any = 1, event_id: Any = UNMUTED_EVENT, message: Any = "hi") -> FakeDelivery:
        return FakeDelivery(envelope_body(tenant_id, event_id, message))

    return _make

"""Database management commands."""

import click
from sqlalchemy import select

from notification_service.cli.utils import coro, success
from notification_service.core.settings import get_db_settings
from notification_service.features.notifications.models import EventType, MuteSetting, Tenant
from notification_service.infra.database import (
    create_engine,
    create_schema,
    create_session_factory,
)


@click.group(name="db")
def db() -> None:
    """Database management commands."""


@db.command()
@click.option("--seed/--no-seed", default=False, help="Insert sample event types, settings and tenants")
@click.option("--events", default=10, show_default=True, type=click.IntRange(min=1))
@click.option("--tenants", default=5, show_default=True, type=click.IntRange(min=1))
@coro
async def init(seed: bool, events: int, tenants: int) -> None:
    """Create the notification tables (local development)."""
    engine = create_engine(get_db_settings())
    try:
        await create_schema(engine)
        success("Tables created")
        if seed:
            inserted = await _seed(create_session_factory(engine), events, tenants)
            success(f"Seeded {inserted} rows")
    finally:
        await engine.dispose()


async def _seed(session_factory, events: int, tenants: int) -> int:
    inserted = 0
    async with session_factory() as session:
        existing_events = set((await session.execute(select(EventType.id))).scalars())
        existing_tenants = set((await session.execute(select(Tenant.id))).scalars())

        for event_id in range(1, events + 1):
            if event_id in existing_events:
                continue
            session.add(EventType(id=event_id, event_type=f"event_{event_id}"))
            session.add(MuteSetting(event_id=event_id, is_muted=False))
            inserted += 2
        for tenant_id in range(1, tenants + 1):
            if tenant_id in existing_tenants:
                continue
            session.add(Tenant(id=tenant_id, tenant_name=f"tenant_{tenant_id}"))
            inserted += 1

        await session.commit()
    return inserted

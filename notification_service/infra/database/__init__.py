"""Database infrastructure package.

Example:
    from notification_service.infra.database import create_engine, create_session_factory

    engine = create_engine(get_db_settings())
    session_factory = create_session_factory(engine)

    async with session_factory() as session:
        result = await session.execute(...)
"""

from .session import (
    check_database_health,
    create_engine,
    create_schema,
    create_session_factory,
)

__all__ = [
    "check_database_health",
    "create_engine",
    "create_schema",
    "create_session_factory",
]

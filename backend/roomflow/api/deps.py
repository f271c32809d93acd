"""Common API dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.db.session import get_session


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def get_actor(
    x_actor: Annotated[str | None, Header(max_length=255)] = None,
) -> str:
    """Return the acting user recorded on audit events.

    Authentication happens upstream; the gateway forwards the user in ``X-Actor``.
    """
    actor = (x_actor or "").strip()
    return actor or "system"

"""Helper utilities for recording audit events."""

from __future__ import annotations

import logging
from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.models.audit_event import AuditEvent

logger = logging.getLogger(__name__)


async def record_event(
    session: AsyncSession,
    *,
    actor: str,
    action: str,
    table_name: str,
    record_id: Any = None,
    old_values: dict[str, Any] | None = None,
    new_values: dict[str, Any] | None = None,
    description: str | None = None,
) -> AuditEvent:
    """Persist an audit event in its own transaction and return it."""
    event = AuditEvent(
        actor=actor,
        action=action,
        table_name=table_name,
        record_id=None if record_id is None else str(record_id),
        old_values=jsonable_encoder(old_values),
        new_values=jsonable_encoder(new_values),
        description=description,
    )
    session.add(event)
    await session.commit()
    return event


async def log_audit(session: AsyncSession, **kwargs: Any) -> None:
    """Record an audit event without ever failing the calling operation.

    The event is written in a separate session on the same engine, so a
    failure here never rolls back or expires objects of ``session``. Must be
    called after the business transaction committed.
    """
    async with AsyncSession(session.bind, expire_on_commit=False) as audit_session:
        try:
            await record_event(audit_session, **kwargs)
        except SQLAlchemyError:
            logger.exception(
                "Failed to record audit event %s on %s/%s",
                kwargs.get("action"),
                kwargs.get("table_name"),
                kwargs.get("record_id"),
            )
            await audit_session.rollback()

"""Note store. Every query is scoped through the authorization rule table.

Tenant id is mandatory on every call and owner id on every mutation. A note
outside that scope is reported exactly like a missing one (``None`` /
``False``).
"""

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import store_call
from app.core.errors import ValidationError
from app.models.base import utcnow
from app.models.note import Note
from app.services.authorization import Action, Scope, row_filter

logger = logging.getLogger(__name__)

_MUTABLE_FIELDS = frozenset({"title", "content"})


def clean_title(title: str | None) -> str:
    """Strip a title, raising ValidationError when nothing is left."""
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title is required")
    return cleaned


@store_call
async def list_notes(session: AsyncSession, tenant_id: uuid.UUID) -> list[Note]:
    stmt = (
        select(Note)
        .where(row_filter(Scope(tenant_id), Action.LIST_NOTES, Note))
        .order_by(Note.created_at.desc())  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


@store_call
async def count_notes(session: AsyncSession, tenant_id: uuid.UUID) -> int:
    """Live note count for a tenant (never cached)."""
    stmt = (
        select(func.count())
        .select_from(Note)
        .where(row_filter(Scope(tenant_id), Action.LIST_NOTES, Note))
    )
    result = await session.execute(stmt)
    return int(result.scalar_one())


@store_call
async def get_note(session: AsyncSession, tenant_id: uuid.UUID, note_id: uuid.UUID) -> Note | None:
    stmt = select(Note).where(
        Note.id == note_id,
        row_filter(Scope(tenant_id), Action.READ_NOTE, Note),
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


@store_call
async def create_note(
    session: AsyncSession,
    tenant_id: uuid.UUID,
    owner_id: uuid.UUID,
    title: str,
    content: str | None = None,
) -> Note:
    note = Note(
        tenant_id=tenant_id,
        user_id=owner_id,
        title=clean_title(title),
        content=content,
    )
    session.add(note)
    await session.commit()
    await session.refresh(note)
    logger.info("Created note %s in tenant %s", note.id, tenant_id)
    return note


@store_call
async def update_note(
    session: AsyncSession,
    tenant_id: uuid.UUID,
    owner_id: uuid.UUID,
    note_id: uuid.UUID,
    changes: Mapping[str, Any],
) -> Note | None:
    """Apply ``changes`` (title and/or content) to an owned note."""
    unknown = set(changes) - _MUTABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    note = await _get_owned(session, tenant_id, owner_id, note_id, Action.UPDATE_NOTE)
    if note is None:
        return None

    if "title" in changes:
        note.title = clean_title(changes["title"])
    if "content" in changes:
        note.content = changes["content"]

    note.updated_at = utcnow()
    session.add(note)
    await session.commit()
    await session.refresh(note)
    logger.info("Updated note %s in tenant %s", note.id, tenant_id)
    return note


@store_call
async def delete_note(
    session: AsyncSession,
    tenant_id: uuid.UUID,
    owner_id: uuid.UUID,
    note_id: uuid.UUID,
) -> bool:
    note = await _get_owned(session, tenant_id, owner_id, note_id, Action.DELETE_NOTE)
    if note is None:
        return False
    await session.delete(note)
    await session.commit()
    logger.info("Deleted note %s in tenant %s", note_id, tenant_id)
    return True


# ── Internal helper ───────────────────────────────────────────

async def _get_owned(
    session: AsyncSession,
    tenant_id: uuid.UUID,
    owner_id: uuid.UUID,
    note_id: uuid.UUID,
    action: Action,
) -> Note | None:
    stmt = select(Note).where(
        Note.id == note_id,
        row_filter(Scope(tenant_id, owner_id), action, Note),
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()

"""Notes CRUD — tenant-scoped reads, owner-only writes, plan-gated creates."""

import logging
import uuid

from fastapi import APIRouter, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentPrincipal, Session
from app.api.errors import denial, not_found
from app.models.note import NoteCreate, NoteRead, NoteUpdate
from app.services import notes as note_store
from app.services import tenants as tenant_store
from app.services.authorization import Action, NoteTarget, TenantTarget, authorize
from app.services.decisions import QuotaContext
from app.services.principals import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=list[NoteRead])
async def list_notes(
    principal: CurrentPrincipal,
    session: Session,
) -> list[NoteRead]:
    decision = authorize(principal, Action.LIST_NOTES, TenantTarget(principal.tenant_id))
    if not decision:
        raise denial(decision, "tenant")

    notes = await note_store.list_notes(session, principal.tenant_id)
    return [NoteRead.model_validate(n) for n in notes]


@router.post("", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    body: NoteCreate,
    principal: CurrentPrincipal,
    session: Session,
) -> NoteRead:
    title = note_store.clean_title(body.title)

    # Lock, count, check and insert within one transaction
    tenant = await tenant_store.lock_tenant(session, principal.tenant_id)
    if tenant is None:
        raise not_found("tenant")

    quota = QuotaContext(
        plan=tenant.plan,
        note_count=await note_store.count_notes(session, tenant.id),
    )
    decision = authorize(principal, Action.CREATE_NOTE, TenantTarget(tenant.id, quota=quota))
    if not decision:
        logger.info(
            "Denied note creation for user %s in tenant %s: %s",
            principal.user_id, tenant.slug, decision.reason,
        )
        raise denial(decision, "note")

    note = await note_store.create_note(
        session,
        tenant_id=tenant.id,
        owner_id=principal.user_id,
        title=title,
        content=body.content,
    )
    return NoteRead.model_validate(note)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: uuid.UUID,
    principal: CurrentPrincipal,
    session: Session,
) -> NoteRead:
    note = await note_store.get_note(session, principal.tenant_id, note_id)
    if note is None or not authorize(principal, Action.READ_NOTE, NoteTarget.from_note(note)):
        raise not_found("note")
    return NoteRead.model_validate(note)


@router.patch("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: uuid.UUID,
    body: NoteUpdate,
    principal: CurrentPrincipal,
    session: Session,
) -> NoteRead:
    await _authorize_write(note_id, Action.UPDATE_NOTE, principal, session)

    note = await note_store.update_note(
        session,
        tenant_id=principal.tenant_id,
        owner_id=principal.user_id,
        note_id=note_id,
        changes=body.model_dump(exclude_unset=True),
    )
    if note is None:
        raise not_found("note")
    return NoteRead.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: uuid.UUID,
    principal: CurrentPrincipal,
    session: Session,
) -> None:
    await _authorize_write(note_id, Action.DELETE_NOTE, principal, session)

    deleted = await note_store.delete_note(
        session,
        tenant_id=principal.tenant_id,
        owner_id=principal.user_id,
        note_id=note_id,
    )
    if not deleted:
        raise not_found("note")


# ── Internal helper ───────────────────────────────────────────

async def _authorize_write(
    note_id: uuid.UUID,
    action: Action,
    principal: Principal,
    session: AsyncSession,
) -> None:
    """404 unless the note exists in the caller's tenant and ``action`` is allowed."""
    note = await note_store.get_note(session, principal.tenant_id, note_id)
    if note is None:
        raise not_found("note")

    decision = authorize(principal, action, NoteTarget.from_note(note))
    if not decision:
        raise denial(decision, "note")

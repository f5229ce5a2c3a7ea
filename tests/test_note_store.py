"""Note and tenant stores called directly — scoping and non-disclosure."""

import uuid
from datetime import timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from app.core.errors import ValidationError
from app.models.note import Note
from app.models.profile import Profile
from app.models.tenant import SubscriptionPlan, Tenant
from app.models.user import User
from app.services import notes as note_store
from app.services import tenants as tenant_store


@pytest.mark.asyncio
async def test_get_is_tenant_scoped(session, acme_user, globex_user):
    note = await note_store.create_note(session, acme_user.tenant_id, acme_user.user_id, "Acme")

    assert await note_store.get_note(session, acme_user.tenant_id, note.id) is not None
    assert await note_store.get_note(session, globex_user.tenant_id, note.id) is None
    assert await note_store.get_note(session, acme_user.tenant_id, uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_update_and_delete_need_owner_and_tenant(session, acme_user, acme_admin, globex_user):
    note = await note_store.create_note(session, acme_user.tenant_id, acme_user.user_id, "Mine")

    # Same tenant, wrong owner; wrong tenant, "right" owner id; wrong both
    for tenant_id, owner_id in (
        (acme_admin.tenant_id, acme_admin.user_id),
        (globex_user.tenant_id, acme_user.user_id),
        (globex_user.tenant_id, globex_user.user_id),
    ):
        assert await note_store.update_note(
            session, tenant_id, owner_id, note.id, {"title": "x"}
        ) is None
        assert await note_store.delete_note(session, tenant_id, owner_id, note.id) is False

    updated = await note_store.update_note(
        session, acme_user.tenant_id, acme_user.user_id, note.id, {"title": "  Renamed  "}
    )
    assert updated.title == "Renamed"
    assert await note_store.delete_note(
        session, acme_user.tenant_id, acme_user.user_id, note.id
    ) is True
    assert await note_store.count_notes(session, acme_user.tenant_id) == 0


@pytest.mark.asyncio
async def test_create_requires_title(session, acme_user):
    with pytest.raises(ValidationError):
        await note_store.create_note(session, acme_user.tenant_id, acme_user.user_id, "")
    with pytest.raises(ValidationError):
        await note_store.create_note(session, acme_user.tenant_id, acme_user.user_id, " \t ")


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields(session, acme_user):
    note = await note_store.create_note(session, acme_user.tenant_id, acme_user.user_id, "t")
    with pytest.raises(ValidationError):
        await note_store.update_note(
            session, acme_user.tenant_id, acme_user.user_id, note.id, {"tenant_id": uuid.uuid4()}
        )


@pytest.mark.asyncio
async def test_count_is_per_tenant(session, acme_user, acme_admin, globex_user):
    await note_store.create_note(session, acme_user.tenant_id, acme_user.user_id, "a")
    await note_store.create_note(session, acme_admin.tenant_id, acme_admin.user_id, "b")
    await note_store.create_note(session, globex_user.tenant_id, globex_user.user_id, "c")

    assert await note_store.count_notes(session, acme_user.tenant_id) == 2
    assert await note_store.count_notes(session, globex_user.tenant_id) == 1


@pytest.mark.asyncio
async def test_upgrade_to_pro_twice(session, acme):
    first = await tenant_store.upgrade_to_pro(session, acme.id)
    stamp = first.updated_at
    second = await tenant_store.upgrade_to_pro(session, acme.id)

    assert first.plan == second.plan == SubscriptionPlan.PRO
    assert second.updated_at == stamp


@pytest.mark.asyncio
async def test_upgrade_unknown_tenant(session):
    assert await tenant_store.upgrade_to_pro(session, uuid.uuid4()) is None


@pytest.mark.parametrize("model", [Tenant, User, Profile, Note])
def test_timestamp_columns_are_timezone_aware(model):
    for column in ("created_at", "updated_at"):
        assert model.__table__.c[column].type.timezone is True


@pytest.mark.asyncio
async def test_insert_and_update_store_aware_timestamps(session, acme_user):
    tenant = Tenant(name="Initech", slug="initech")
    assert tenant.created_at.tzinfo == timezone.utc

    note = await note_store.create_note(session, acme_user.tenant_id, acme_user.user_id, "Draft")
    updated = await note_store.update_note(
        session, acme_user.tenant_id, acme_user.user_id, note.id, {"content": "body"}
    )
    assert updated.content == "body"


@pytest.mark.asyncio
async def test_lock_tenant_selects_for_update():
    session = AsyncMock()
    session.execute.return_value = MagicMock()
    tenant_id = uuid.uuid4()

    await tenant_store.lock_tenant(session, tenant_id)

    stmt = session.execute.await_args.args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    assert "FOR UPDATE" in sql
    assert "tenants.id = " in sql

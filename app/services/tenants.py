"""Tenant store: read a tenant and upgrade its plan."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import store_call
from app.models.base import utcnow
from app.models.tenant import SubscriptionPlan, Tenant
from app.services.authorization import Action, Scope, row_filter

logger = logging.getLogger(__name__)


def _scoped(tenant_id: uuid.UUID):
    return select(Tenant).where(row_filter(Scope(tenant_id), Action.VIEW_TENANT, Tenant))


@store_call
async def get_tenant(session: AsyncSession, tenant_id: uuid.UUID) -> Tenant | None:
    result = await session.execute(_scoped(tenant_id))
    return result.scalar_one_or_none()


@store_call
async def lock_tenant(session: AsyncSession, tenant_id: uuid.UUID) -> Tenant | None:
    """Read a tenant holding a row lock until the transaction ends.

    Note creation takes this lock before counting so concurrent creates for
    one tenant serialize. SQLite has no row locks and ignores it.
    """
    result = await session.execute(_scoped(tenant_id).with_for_update())
    return result.scalar_one_or_none()


@store_call
async def upgrade_to_pro(session: AsyncSession, tenant_id: uuid.UUID) -> Tenant | None:
    """Move a tenant to the pro plan. Already-pro tenants are returned unchanged."""
    result = await session.execute(_scoped(tenant_id).with_for_update())
    tenant = result.scalar_one_or_none()
    if tenant is None:
        return None

    if tenant.plan == SubscriptionPlan.PRO:
        logger.info("Tenant %s already on pro plan", tenant.slug)
        await session.commit()
        return tenant

    tenant.plan = SubscriptionPlan.PRO
    tenant.updated_at = utcnow()
    session.add(tenant)
    await session.commit()
    await session.refresh(tenant)
    logger.info("Tenant %s upgraded to pro", tenant.slug)
    return tenant

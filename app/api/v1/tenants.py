"""Tenant endpoints — current tenant, plan usage, admin upgrade."""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from app.api.deps import CurrentPrincipal, Session
from app.api.errors import denial, not_found
from app.models.tenant import TenantRead, TenantUsageRead
from app.services import notes as note_store
from app.services import tenants as tenant_store
from app.services.authorization import Action, TenantTarget, authorize
from app.services.decisions import QuotaContext
from app.services.quota import check_create_quota

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])


class TenantUpgradeResponse(BaseModel):
    message: str
    tenant: TenantRead


@router.get(
    "/me",
    response_model=TenantRead,
    summary="Get current tenant info",
)
async def get_current_tenant(
    principal: CurrentPrincipal,
    session: Session,
) -> TenantRead:
    """Returns the tenant the caller belongs to."""
    tenant = await tenant_store.get_tenant(session, principal.tenant_id)
    if tenant is None or not authorize(principal, Action.VIEW_TENANT, TenantTarget(tenant.id)):
        raise not_found("tenant")
    return TenantRead.model_validate(tenant)


@router.get(
    "/me/usage",
    response_model=TenantUsageRead,
    summary="Plan, live note count and limit for the current tenant",
)
async def get_current_tenant_usage(
    principal: CurrentPrincipal,
    session: Session,
) -> TenantUsageRead:
    tenant = await tenant_store.get_tenant(session, principal.tenant_id)
    if tenant is None or not authorize(principal, Action.VIEW_TENANT, TenantTarget(tenant.id)):
        raise not_found("tenant")

    quota = QuotaContext(
        plan=tenant.plan,
        note_count=await note_store.count_notes(session, tenant.id),
    )
    return TenantUsageRead(
        plan=quota.plan,
        note_count=quota.note_count,
        note_limit=quota.limit,
        can_create=check_create_quota(quota).allowed,
    )


@router.post(
    "/{slug}/upgrade",
    response_model=TenantUpgradeResponse,
    summary="Upgrade the caller's tenant to the pro plan (admin only)",
)
async def upgrade_tenant(
    slug: str,
    principal: CurrentPrincipal,
    session: Session,
) -> TenantUpgradeResponse:
    """Idempotent: upgrading a pro tenant succeeds without changing it.

    A slug other than the caller's own tenant is answered with 404 whether
    or not that tenant exists.
    """
    tenant = await tenant_store.get_tenant(session, principal.tenant_id)
    target_id = tenant.id if tenant is not None and tenant.slug == slug else None

    decision = authorize(principal, Action.UPGRADE_TENANT, TenantTarget(target_id))
    if not decision:
        logger.info(
            "Denied upgrade of %r for user %s: %s", slug, principal.user_id, decision.reason
        )
        raise denial(decision, "tenant")

    upgraded = await tenant_store.upgrade_to_pro(session, target_id)
    if upgraded is None:
        raise not_found("tenant")

    return TenantUpgradeResponse(
        message="Tenant upgraded to Pro successfully",
        tenant=TenantRead.model_validate(upgraded),
    )

"""Authentication endpoints — login + current principal."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, EmailStr
from sqlmodel import select

from app.api.deps import CurrentPrincipal, Session
from app.api.errors import api_error, not_found
from app.core.security import create_jwt, verify_password
from app.models.profile import ProfileRead
from app.models.tenant import TenantRead
from app.models.user import User
from app.services import tenants as tenant_store

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    profile: ProfileRead
    tenant: TenantRead


# ── Routes ───────────────────────────────────────────────────

@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, session: Session) -> LoginResponse:
    """Authenticate with email + password, receive a JWT.

    Succeeds for accounts without a profile too; their requests are then
    answered with 404 profile_not_found until they are provisioned.
    """
    stmt = select(User).where(User.email == body.email)
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.password_hash):
        raise _invalid_credentials()

    if not user.is_active:
        raise api_error(status.HTTP_403_FORBIDDEN, "account_disabled", "Account is disabled")

    return LoginResponse(access_token=create_jwt(subject=str(user.id)))


@router.get("/me", response_model=MeResponse)
async def get_me(principal: CurrentPrincipal, session: Session) -> MeResponse:
    """Return the calling principal and their tenant."""
    tenant = await tenant_store.get_tenant(session, principal.tenant_id)
    if tenant is None:
        raise not_found("tenant")

    return MeResponse(
        profile=ProfileRead(
            id=principal.profile_id,
            user_id=principal.user_id,
            tenant_id=principal.tenant_id,
            email=principal.email,
            role=principal.role,
        ),
        tenant=TenantRead.model_validate(tenant),
    )


def _invalid_credentials() -> HTTPException:
    return api_error(
        status.HTTP_401_UNAUTHORIZED,
        "invalid_credentials",
        "Invalid email or password",
    )

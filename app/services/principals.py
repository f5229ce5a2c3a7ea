"""Resolve a bearer token to the calling principal (identity, tenant, role)."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import store_call
from app.core.errors import NotProvisioned, Unauthenticated
from app.core.security import identity_from_token
from app.models.profile import Profile, ProfileRole
from app.models.user import User


class Principal:
    """Resolved caller carried through a request."""

    __slots__ = ("profile_id", "user_id", "tenant_id", "email", "role")

    def __init__(
        self,
        profile_id: uuid.UUID,
        user_id: uuid.UUID,
        tenant_id: uuid.UUID,
        email: str,
        role: ProfileRole,
    ) -> None:
        self.profile_id = profile_id
        self.user_id = user_id
        self.tenant_id = tenant_id
        self.email = email
        self.role = role

    @classmethod
    def from_profile(cls, profile: Profile) -> "Principal":
        return cls(
            profile_id=profile.id,
            user_id=profile.user_id,
            tenant_id=profile.tenant_id,
            email=profile.email,
            role=ProfileRole(profile.role),
        )

    def __repr__(self) -> str:
        return f"Principal(user_id={self.user_id}, tenant_id={self.tenant_id}, role={self.role})"


@store_call
async def _load_identity(session: AsyncSession, user_id: uuid.UUID) -> tuple[User | None, Profile | None]:
    user = await session.get(User, user_id)
    if user is None:
        return None, None
    result = await session.execute(select(Profile).where(Profile.user_id == user_id))
    return user, result.scalar_one_or_none()


async def resolve_principal(session: AsyncSession, token: str | None) -> Principal:
    """Resolve a bearer token to the caller's Principal.

    Raises Unauthenticated for any credential problem, including unknown or
    disabled accounts, and NotProvisioned for a valid identity without a
    profile.
    """
    user_id = identity_from_token(token)
    user, profile = await _load_identity(session, user_id)

    if user is None or not user.is_active:
        raise Unauthenticated("Unauthorized")
    if profile is None:
        raise NotProvisioned("Profile not found")
    return Principal.from_profile(profile)

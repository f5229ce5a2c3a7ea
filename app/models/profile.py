"""Profile model — binds one user identity to one tenant and role."""

import uuid
from enum import StrEnum

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class ProfileRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class Profile(TimestampMixin, SQLModel, table=True):
    __tablename__ = "profiles"
    __table_args__ = (UniqueConstraint("email", "tenant_id"),)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    # One profile per identity: no multi-tenant membership
    user_id: uuid.UUID = Field(foreign_key="users.id", unique=True, nullable=False, index=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    email: str = Field(max_length=320, nullable=False)
    role: ProfileRole = Field(default=ProfileRole.MEMBER)


# ── Pydantic schemas ─────────────────────────────────────────

class ProfileRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    tenant_id: uuid.UUID
    email: str
    role: ProfileRole

"""Tenant model — top-level isolation boundary."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class SubscriptionPlan(StrEnum):
    FREE = "free"
    PRO = "pro"


class Tenant(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tenants"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    slug: str = Field(max_length=100, unique=True, nullable=False, index=True)

    # Only ever moves free -> pro, via an admin upgrade
    plan: SubscriptionPlan = Field(default=SubscriptionPlan.FREE)


# ── Pydantic schemas ─────────────────────────────────────────

class TenantRead(SQLModel):
    id: uuid.UUID
    name: str
    slug: str
    plan: SubscriptionPlan
    created_at: datetime
    updated_at: datetime


class TenantUsageRead(SQLModel):
    plan: SubscriptionPlan
    note_count: int
    note_limit: int | None = Field(description="None when the plan is unlimited")
    can_create: bool

"""Note model — owned by a user, isolated by tenant."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class Note(TimestampMixin, SQLModel, table=True):
    __tablename__ = "notes"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    # Owner; always a member of tenant_id
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    title: str = Field(nullable=False)
    content: str | None = Field(default=None)


# ── Pydantic schemas ─────────────────────────────────────────

class NoteCreate(SQLModel):
    title: str = Field(max_length=500)
    content: str | None = None


class NoteUpdate(SQLModel):
    title: str | None = Field(default=None, max_length=500)
    content: str | None = None


class NoteRead(SQLModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    user_id: uuid.UUID
    title: str
    content: str | None
    created_at: datetime
    updated_at: datetime

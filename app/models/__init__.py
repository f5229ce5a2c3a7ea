"""Import all models so SQLModel.metadata picks them up."""

from app.models.note import Note, NoteCreate, NoteRead, NoteUpdate
from app.models.profile import Profile, ProfileRead, ProfileRole
from app.models.tenant import SubscriptionPlan, Tenant, TenantRead, TenantUsageRead
from app.models.user import User

__all__ = [
    "Note",
    "NoteCreate",
    "NoteRead",
    "NoteUpdate",
    "Profile",
    "ProfileRead",
    "ProfileRole",
    "SubscriptionPlan",
    "Tenant",
    "TenantRead",
    "TenantUsageRead",
    "User",
]

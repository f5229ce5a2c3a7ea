"""Classified authorization results.

A denial is an ordinary return value carrying a reason code; handlers pick
the HTTP status from the code.
"""

from dataclasses import dataclass
from enum import StrEnum

from app.core.plans import get_note_limit
from app.models.tenant import SubscriptionPlan


class DenyReason(StrEnum):
    CROSS_TENANT = "cross_tenant"
    NOT_OWNER = "not_owner"
    QUOTA_EXCEEDED = "quota_exceeded"
    ROLE_REQUIRED = "role_required"


@dataclass(frozen=True, slots=True)
class QuotaContext:
    """A tenant's plan and its live note count at authorization time."""

    plan: SubscriptionPlan
    note_count: int

    @property
    def limit(self) -> int | None:
        return get_note_limit(self.plan)


@dataclass(frozen=True, slots=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None
    quota: QuotaContext | None = None

    @classmethod
    def allow(cls, quota: QuotaContext | None = None) -> "Decision":
        return cls(allowed=True, quota=quota)

    @classmethod
    def deny(cls, reason: DenyReason, quota: QuotaContext | None = None) -> "Decision":
        return cls(allowed=False, reason=reason, quota=quota)

    def __bool__(self) -> bool:
        return self.allowed

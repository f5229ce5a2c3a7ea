"""Centralized subscription plan limits.

Single source of truth for per-plan note quotas. Used by the quota
enforcer and exposed via GET /v1/tenants/me/usage for the dashboard.
"""

from app.models.tenant import SubscriptionPlan

# Maps plans to the maximum number of notes a tenant may hold.
# None means unlimited.
PLAN_NOTE_LIMITS: dict[SubscriptionPlan, int | None] = {
    SubscriptionPlan.FREE: 3,
    SubscriptionPlan.PRO: None,
}


def get_note_limit(plan: SubscriptionPlan) -> int | None:
    """Return the note ceiling for a plan (None = unlimited)."""
    return PLAN_NOTE_LIMITS[SubscriptionPlan(plan)]

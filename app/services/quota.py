"""Quota enforcer: may this tenant hold one more note?"""

from app.services.decisions import Decision, DenyReason, QuotaContext


def check_create_quota(quota: QuotaContext) -> Decision:
    """Allow iff the plan is unlimited or the live count is under its limit.

    ``quota.note_count`` must come from a live count taken in the same
    request; a cached count lets concurrent creates slip past the limit.
    """
    limit = quota.limit
    if limit is None or quota.note_count < limit:
        return Decision.allow(quota)
    return Decision.deny(DenyReason.QUOTA_EXCEEDED, quota)

"""Translate authorization decisions into HTTP errors.

Cross-tenant and non-owner denials become the same 404 a missing record
gets, so callers can never probe for another tenant's or user's data.
"""

from fastapi import HTTPException, status

from app.services.decisions import Decision, DenyReason


def api_error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


def not_found(resource: str) -> HTTPException:
    return api_error(
        status.HTTP_404_NOT_FOUND,
        f"{resource}_not_found",
        f"{resource.capitalize()} not found",
    )


def denial(decision: Decision, resource: str) -> HTTPException:
    """Map a Deny decision on ``resource`` to its boundary response."""
    if decision.reason in (DenyReason.CROSS_TENANT, DenyReason.NOT_OWNER):
        return not_found(resource)

    if decision.reason == DenyReason.ROLE_REQUIRED:
        return api_error(
            status.HTTP_403_FORBIDDEN,
            DenyReason.ROLE_REQUIRED,
            "Admin access required",
        )

    if decision.reason == DenyReason.QUOTA_EXCEEDED:
        limit = decision.quota.limit if decision.quota is not None else None
        return api_error(
            status.HTTP_403_FORBIDDEN,
            DenyReason.QUOTA_EXCEEDED,
            f"Free plan limited to {limit} notes. Upgrade to Pro for unlimited notes.",
        )

    raise ValueError(f"Not a denial: {decision!r}")

"""Authorization engine: one rule table, two evaluators.

Each action maps to an ordered tuple of rules. A rule knows how to check
itself against an in-memory target (``authorize``) and, when it is a
property of a row, how to express itself as a SQL predicate
(``row_filter``). The stores build every WHERE clause through
``row_filter``, so request-time checks and storage-level filtering come
from the same definitions.

Rules are evaluated in order; the first one that fails decides the reason.
Tenant checks come before ownership checks, and the admin role adds the
upgrade capability only. Admins get no extra rights on notes.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, NamedTuple

from sqlalchemy import and_, false, true
from sqlalchemy.sql.elements import ColumnElement

from app.models.note import Note
from app.models.profile import ProfileRole
from app.models.tenant import Tenant
from app.services.decisions import Decision, DenyReason, QuotaContext
from app.services.quota import check_create_quota


class Action(StrEnum):
    LIST_NOTES = "list_notes"
    READ_NOTE = "read_note"
    CREATE_NOTE = "create_note"
    UPDATE_NOTE = "update_note"
    DELETE_NOTE = "delete_note"
    UPGRADE_TENANT = "upgrade_tenant"
    VIEW_TENANT = "view_tenant"


# ── Subjects and targets ─────────────────────────────────────

class Scope(NamedTuple):
    """Minimal subject for store queries: a tenant and, for writes, an owner.

    Tenant and ownership rules read only these two fields, so a Scope
    stands in for a ``Principal`` there.
    """

    tenant_id: uuid.UUID
    user_id: uuid.UUID | None = None


@dataclass(frozen=True, slots=True)
class NoteTarget:
    tenant_id: uuid.UUID
    owner_id: uuid.UUID

    @classmethod
    def from_note(cls, note: Note) -> "NoteTarget":
        return cls(tenant_id=note.tenant_id, owner_id=note.user_id)


@dataclass(frozen=True, slots=True)
class TenantTarget:
    # None stands for "a tenant that is not the caller's"
    tenant_id: uuid.UUID | None
    quota: QuotaContext | None = None


# ── Rules ────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Rule:
    name: str
    reason: DenyReason
    check: Callable[[Any, Any], bool]
    clause: Callable[[Any, type], ColumnElement[bool]] | None = None


def _tenant_column(model: type) -> Any:
    if model is Tenant:
        return Tenant.id
    return model.tenant_id


def _check_quota(_subject: Any, target: Any) -> bool:
    if target.quota is None:
        raise ValueError("create_note needs a QuotaContext on its target")
    return check_create_quota(target.quota).allowed


SAME_TENANT = Rule(
    name="same_tenant",
    reason=DenyReason.CROSS_TENANT,
    check=lambda subject, target: (
        target.tenant_id is not None and target.tenant_id == subject.tenant_id
    ),
    clause=lambda subject, model: _tenant_column(model) == subject.tenant_id,
)

IS_OWNER = Rule(
    name="is_owner",
    reason=DenyReason.NOT_OWNER,
    check=lambda subject, target: target.owner_id == subject.user_id,
    clause=lambda subject, model: model.user_id == subject.user_id,
)

ADMIN_ROLE = Rule(
    name="admin_role",
    reason=DenyReason.ROLE_REQUIRED,
    check=lambda subject, _target: subject.role == ProfileRole.ADMIN,
    clause=lambda subject, _model: true() if subject.role == ProfileRole.ADMIN else false(),
)

# Not a row property: it depends on an aggregate over the tenant's notes.
WITHIN_QUOTA = Rule(
    name="within_quota",
    reason=DenyReason.QUOTA_EXCEEDED,
    check=_check_quota,
)

RULES: dict[Action, tuple[Rule, ...]] = {
    Action.LIST_NOTES: (SAME_TENANT,),
    Action.READ_NOTE: (SAME_TENANT,),
    Action.CREATE_NOTE: (SAME_TENANT, WITHIN_QUOTA),
    Action.UPDATE_NOTE: (SAME_TENANT, IS_OWNER),
    Action.DELETE_NOTE: (SAME_TENANT, IS_OWNER),
    Action.UPGRADE_TENANT: (ADMIN_ROLE, SAME_TENANT),
    Action.VIEW_TENANT: (SAME_TENANT,),
}

ROW_LEVEL_ACTIONS = frozenset(
    action for action, rules in RULES.items()
    if all(rule.clause is not None for rule in rules)
)


# ── Evaluators ───────────────────────────────────────────────

def authorize(subject: Any, action: Action, target: NoteTarget | TenantTarget) -> Decision:
    """Evaluate ``action`` for ``subject`` against an in-memory target."""
    quota = getattr(target, "quota", None)
    for rule in RULES[action]:
        if not rule.check(subject, target):
            return Decision.deny(rule.reason, quota)
    return Decision.allow(quota)


def row_filter(subject: Any, action: Action, model: type) -> ColumnElement[bool]:
    """Build the WHERE clause selecting exactly the rows ``action`` may touch.

    Raises ValueError for actions with a rule that has no row form
    (create, whose quota rule is an aggregate).
    """
    if action not in ROW_LEVEL_ACTIONS:
        raise ValueError(f"{action} has no row-level form")
    return and_(*(rule.clause(subject, model) for rule in RULES[action]))  # type: ignore[misc]

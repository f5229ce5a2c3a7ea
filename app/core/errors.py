"""Domain exception hierarchy.

Expected authorization denials are *not* exceptions (see
``app.services.decisions``). These cover the conditions that abort a
request before or outside authorization.
"""


class NotesError(Exception):
    """Base exception for all service errors."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ── Identity ─────────────────────────────────────────────────

class Unauthenticated(NotesError):
    """Missing, invalid or expired credential, or unknown/disabled account."""

    code = "unauthenticated"


class NotProvisioned(NotesError):
    """Valid identity without a profile (tenant membership) yet."""

    code = "profile_not_found"


# ── Input ────────────────────────────────────────────────────

class ValidationError(NotesError):
    """Request data violates a store invariant, e.g. an empty note title."""

    code = "validation_error"


# ── Storage ──────────────────────────────────────────────────

class TransientStoreError(NotesError):
    """The store was unreachable, failed, or exceeded its timeout."""

    code = "service_unavailable"

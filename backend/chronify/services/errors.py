"""Service-level error kinds.

Validation failures raise ``ValueError`` and missing records raise
``LookupError``; the types below cover the remaining outcomes the routers
translate into status codes.
"""

from chronify.models import Event, UpdateOutcome


class AuthenticationError(Exception):
    """Credentials or bearer token rejected."""


class ConflictError(Exception):
    """A unique constraint was violated."""

    def __init__(self, message: str, constraint: str | None = None):
        super().__init__(message)
        self.constraint = constraint


class StorageError(Exception):
    """The store failed; the message is safe to show to clients."""


class BatchUpdateError(Exception):
    """An update of a reconciliation batch matched no event in the timeline; nothing was applied."""

    def __init__(self, outcomes: list[UpdateOutcome]):
        self.outcomes = outcomes
        self.events: list[Event] = []
        failed = sum(1 for outcome in outcomes if not outcome.success)
        super().__init__(f"{failed} of {len(outcomes)} event updates failed")

    @property
    def failures(self) -> list[UpdateOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]


class GenerationError(Exception):
    """The generative collaborator failed or returned unusable content."""

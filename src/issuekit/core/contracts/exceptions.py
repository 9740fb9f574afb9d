"""Custom exception hierarchy for issuekit.

All issuekit exceptions inherit from :class:`IssueKitError`, making it easy
to catch any library error with a single ``except`` clause while still allowing
callers to handle specific failure modes.

Most storage paths do not raise at all: a rejected status transition returns
``False``, a missing lookup returns ``None``. The ``*_with_result`` variants
and explicit-update paths raise the errors below instead.
"""

from __future__ import annotations


class IssueKitError(Exception):
    """Base exception for all issuekit errors."""


class ConfigError(IssueKitError):
    """Raised when storage configuration cannot be read or validated."""


class StorageError(IssueKitError):
    """Raised when the backing store fails unexpectedly."""


class NotFoundError(StorageError):
    """Raised when an update targets an entity that does not exist.

    Attributes:
        entity: Entity kind (e.g. ``"Project"``).
        entity_id: The id that was looked up.
    """

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class TransitionRejectedError(IssueKitError):
    """Raised by ``update_with_result`` when the workflow forbids a status change."""

    def __init__(self, issue_id: str, from_status: str, to_status: str) -> None:
        self.issue_id = issue_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Invalid transition from {from_status} to {to_status} for issue {issue_id}")


class PermissionDeniedError(IssueKitError):
    """Raised when the acting user lacks permission for *action*."""

    def __init__(self, action: str, user_id: str) -> None:
        self.action = action
        self.user_id = user_id
        super().__init__(f"Permission denied: {action}")

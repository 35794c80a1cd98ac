"""Typed exceptions raised by the reconciliation engine.

Every exception carries a machine-readable ``code`` plus the structured
fields a caller needs to report the failure without parsing messages.
"""


class ReconciliationError(Exception):
    """Base class for reconciliation engine errors."""

    code = "RECONCILIATION_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidLinkError(ReconciliationError):
    """A raw link record cannot be classified."""

    code = "INVALID_LINK"

    def __init__(
        self,
        message: str,
        link_id: int | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.link_id = link_id
        self.field = field


class MissingWorkspaceError(ReconciliationError):
    """An entity references a workspace absent from the fetched list."""

    code = "MISSING_WORKSPACE"

    def __init__(self, entity_id: int, workspace_id: int) -> None:
        super().__init__(
            f"Workspace {workspace_id} is missing for entity {entity_id}"
        )
        self.entity_id = entity_id
        self.workspace_id = workspace_id


class MutationRejected(ReconciliationError):
    """A mutation was refused before reaching the backing store."""

    code = "MUTATION_REJECTED"

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(f"{action} rejected: {reason}")
        self.action = action
        self.reason = reason


__all__ = [
    "ReconciliationError",
    "InvalidLinkError",
    "MissingWorkspaceError",
    "MutationRejected",
]

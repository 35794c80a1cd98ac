"""Application use cases package."""

from .get_reconciliation_view import (
    GetReconciliationViewUseCase,
    ViewRequest,
    ViewState,
    ViewStatus,
)
from .manage_links import LinkMutationUseCase

__all__ = [
    "GetReconciliationViewUseCase",
    "ViewRequest",
    "ViewState",
    "ViewStatus",
    "LinkMutationUseCase",
]

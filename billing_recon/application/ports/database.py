"""Database ports for the reconciliation engine.

Infrastructure implementations are expected to provide concrete adapters
that satisfy these ports.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine of the reconciliation database."""

    def get_engine(self) -> Engine:
        """Get the engine for the reconciliation database.

        Returns:
            Engine: SQLAlchemy engine connected to the link storage.
        """


__all__ = ["DatabaseEnginePort"]

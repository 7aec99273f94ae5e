"""Application services."""

from app.application.services.board_store import BoardStore

__all__ = ["BoardStore"]

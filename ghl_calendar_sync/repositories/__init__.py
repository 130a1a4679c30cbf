"""Storage capabilities injected into the sync services."""

from .sync_repository import SyncRepository

__all__ = ["SyncRepository"]

"""
Sync package.

Reconciles the local vote ledger with the remote spreadsheet endpoint.
"""

from .controller import Notice, SyncController, SyncMode, SyncState, TabView

__all__ = [
    "Notice",
    "SyncController",
    "SyncMode",
    "SyncState",
    "TabView",
]

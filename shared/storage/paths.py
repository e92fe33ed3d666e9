"""
Shared storage path utilities.

This module defines the canonical filesystem location for persisted
local state (the vote ledger and the configured endpoint URL).

Design goals:
- Single source of truth for storage paths
- OS-safe, repo-relative resolution
- Zero side effects beyond directory creation
"""

from __future__ import annotations

import os
from pathlib import Path

# ----------------------------------------------------------------------
# BASE DIRECTORIES
# ----------------------------------------------------------------------

# Repo root is assumed to be the current working directory
# when the runtime or CLI is launched
BASE_DIR = Path.cwd()

DEFAULT_STATE_DIR = BASE_DIR / "shared" / "state"


# ----------------------------------------------------------------------
# STATE PATH HELPERS
# ----------------------------------------------------------------------

def get_state_dir() -> Path:
    """
    Return the local state directory, honoring VOTODIRECTO_STATE_DIR.

    The directory is created on demand.
    """

    override = os.getenv("VOTODIRECTO_STATE_DIR")
    path = Path(override) if override else DEFAULT_STATE_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path

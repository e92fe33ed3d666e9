"""Runtime version metadata for VotoDirecto.

This module is import-safe and exposes version identifiers for the CLI and
runtime banner without executing side effects on import.
"""

from __future__ import annotations

PROJECT_NAME = "VotoDirecto Runtime"
VERSION = "v0.3.0"
BUILD = "2026.10"

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "BUILD",
    "as_string",
]


def as_string() -> str:
    """Return a concise version string."""

    return f"{PROJECT_NAME} {VERSION} (Build {BUILD})"

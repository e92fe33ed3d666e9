"""
Votes package.

Exposes the immutable vote record and its id/timestamp helpers.
"""

from .models import Vote, generate_vote_id, now_ms

__all__ = [
    "Vote",
    "generate_vote_id",
    "now_ms",
]

"""
Results package.

Aggregates the vote view into per-candidate and per-region tallies.
"""

from .tally import CandidateTally, current_leader, tally_by_candidate, tally_by_region

__all__ = [
    "CandidateTally",
    "current_leader",
    "tally_by_candidate",
    "tally_by_region",
]

"""
Result aggregation over the current vote view.

Pure functions only: counts per candidate and per region, and the current
leader. Rendering is left to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from core.votes.models import Vote
from shared.config.catalog import CANDIDATES, Candidate


@dataclass(frozen=True)
class CandidateTally:
    candidate: Candidate
    votes: int
    share: float

    def to_document(self) -> Dict[str, object]:
        return {
            "candidate_id": self.candidate.id,
            "name": self.candidate.name,
            "party": self.candidate.party,
            "color": self.candidate.color,
            "votes": self.votes,
            "share": round(self.share, 1),
        }


def _share(count: int, total: int) -> float:
    return (count / total) * 100 if total else 0.0


def tally_by_candidate(
    votes: Sequence[Vote],
    candidates: Iterable[Candidate] = CANDIDATES,
) -> List[CandidateTally]:
    """
    Count votes per catalog candidate, sorted by count descending.

    Ties keep catalog order. Votes for unknown candidates count toward the
    total but get no row.
    """
    total = len(votes)
    counts: Dict[str, int] = {}
    for vote in votes:
        counts[vote.candidate_id] = counts.get(vote.candidate_id, 0) + 1

    tallies = [
        CandidateTally(
            candidate=candidate,
            votes=counts.get(candidate.id, 0),
            share=_share(counts.get(candidate.id, 0), total),
        )
        for candidate in candidates
    ]
    return sorted(tallies, key=lambda t: t.votes, reverse=True)


def tally_by_region(votes: Iterable[Vote]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for vote in votes:
        counts[vote.region] = counts.get(vote.region, 0) + 1
    return counts


def current_leader(tallies: Sequence[CandidateTally]) -> Optional[CandidateTally]:
    if not tallies or tallies[0].votes <= 0:
        return None
    return tallies[0]

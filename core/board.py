"""
Plain-text results board.

Renders the tallies the dashboard charts were built from: total, leader,
per-candidate bars and per-region counts.
"""
from __future__ import annotations

from typing import List, Sequence

from core.results.tally import current_leader, tally_by_candidate, tally_by_region
from core.votes.models import Vote
from shared.config.catalog import get_region

BAR_WIDTH = 30


def render_board(votes: Sequence[Vote], *, live: bool = False) -> str:
    total = len(votes)
    if total == 0:
        return "No votes registered yet."

    tallies = tally_by_candidate(votes)
    leader = current_leader(tallies)

    lines: List[str] = [f"Total votes: {total}" + ("  (live)" if live else "")]
    if leader:
        lines.append(
            f"Leader: {leader.candidate.name} ({leader.candidate.party}) "
            f"{leader.share:.1f}%"
        )
    else:
        lines.append("Leader: waiting for data...")

    lines.append("")
    top = max(t.votes for t in tallies) or 1
    for t in tallies:
        bar = "#" * round(BAR_WIDTH * t.votes / top)
        lines.append(f"{t.candidate.name:<16} {bar:<{BAR_WIDTH}} {t.votes:>5} ({t.share:.1f}%)")

    lines.append("")
    lines.append("By region:")
    for region_id, count in tally_by_region(votes).items():
        region = get_region(region_id)
        label = region.name if region else (region_id or "(unknown)")
        lines.append(f"  {label:<18} {count:>5}")

    return "\n".join(lines)

"""
AI election analysis.

Builds a prompt from the current tallies and hands it to an external
text-generation collaborator. The collaborator is opaque: any callable
`summarize(prompt) -> text` coroutine works.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional, Sequence

from core.results.tally import tally_by_candidate, tally_by_region
from core.votes.models import Vote
from shared.config.catalog import CANDIDATES, Candidate
from shared.logging.logger import get_logger

log = get_logger("core.analysis")

Summarizer = Callable[[str], Awaitable[str]]

FALLBACK_TEXT = "The analysis could not be generated."
NO_VOTES_TEXT = "There are no votes to analyze."


@dataclass(frozen=True)
class AnalysisResult:
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_prompt(
    votes: Sequence[Vote],
    candidates: Iterable[Candidate] = CANDIDATES,
) -> str:
    total = len(votes)
    candidate_lines = ", ".join(
        f"{t.candidate.name} ({t.candidate.party}): {t.votes} votes ({t.share:.1f}%)"
        for t in tally_by_candidate(votes, candidates)
    )
    region_lines = ", ".join(
        f"{region}: {count} votes"
        for region, count in tally_by_region(votes).items()
    )

    return (
        "Act as an expert political analyst. Analyze the following data from "
        "a simulated presidential election:\n"
        "\n"
        f"Total votes: {total}\n"
        f"Results by candidate: {candidate_lines}\n"
        f"Turnout by region: {region_lines}\n"
        "\n"
        "Provide a brief analysis (two paragraphs at most) in Markdown.\n"
        "1. Identify the current leader and the margin of victory.\n"
        "2. Mention any interesting regional trend, if there is one.\n"
        "3. Keep a neutral, professional tone.\n"
    )


class ElectionAnalyst:
    def __init__(
        self,
        summarize: Summarizer,
        *,
        candidates: Iterable[Candidate] = CANDIDATES,
    ):
        self._summarize = summarize
        self._candidates = list(candidates)

    async def analyze(self, votes: Sequence[Vote]) -> AnalysisResult:
        if not votes:
            return AnalysisResult(error=NO_VOTES_TEXT)

        prompt = build_prompt(votes, self._candidates)
        try:
            text = await self._summarize(prompt)
        except Exception as e:
            log.error(f"Text generation failed: {e}")
            return AnalysisResult(
                error="Could not reach the text-generation service. Check the API key."
            )

        return AnalysisResult(text=text or FALLBACK_TEXT)

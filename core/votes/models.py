"""
Vote record model.

A vote is created client-side with a unique id and an epoch-millisecond
timestamp, and is never mutated afterwards. The persisted and wire shape
uses the camelCase field names understood by the spreadsheet script.
"""
from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_vote_id() -> str:
    return str(uuid.uuid4())


def _coerce_timestamp(value: Any) -> int:
    """
    Normalize a timestamp cell to epoch milliseconds.

    Spreadsheet rows may round-trip numbers as floats, numeric strings,
    or ISO-8601 dates. Anything unrecognized or non-finite becomes 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            pass
        else:
            return int(number) if math.isfinite(number) else 0
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            return int(parsed.timestamp() * 1000)
        except (ValueError, OverflowError, OSError):
            return 0
    return 0


@dataclass(frozen=True)
class Vote:
    id: str
    candidate_id: str
    region: str
    timestamp: int

    @classmethod
    def create(cls, candidate_id: str, region: str) -> "Vote":
        return cls(
            id=generate_vote_id(),
            candidate_id=candidate_id,
            region=region,
            timestamp=now_ms(),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "candidateId": self.candidate_id,
            "region": self.region,
            "timestamp": int(self.timestamp),
        }

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["Vote"]:
        """
        Build a vote from a wire-shaped mapping without mutating it.

        Returns None when the payload is not a mapping or lacks an id or
        candidate reference (blank or header rows in the sheet).
        """
        if not isinstance(payload, dict):
            return None

        vote_id = payload.get("id")
        candidate_id = payload.get("candidateId") or payload.get("candidate_id")
        if not vote_id or not candidate_id:
            return None

        region = payload.get("region")
        return cls(
            id=str(vote_id),
            candidate_id=str(candidate_id),
            region="" if region is None else str(region),
            timestamp=_coerce_timestamp(payload.get("timestamp")),
        )

"""
Local vote ledger.

Ordered, append-only list of votes persisted as a JSON array under a fixed
key. In local-only mode it is the source of truth; in cloud mode it mirrors
the last successful remote read (write-through cache).
"""

from __future__ import annotations

import json
from typing import Iterable, List

from core.votes.models import Vote
from shared.logging.logger import get_logger
from shared.storage.local_store import LocalStore

log = get_logger("shared.vote_ledger")

VOTES_KEY = "votodirecto_votes"


class LedgerWriteError(RuntimeError):
    """Raised when the ledger cannot be persisted (disk full, bad payload)."""


class VoteLedger:
    def __init__(self, store: LocalStore, *, key: str = VOTES_KEY):
        self._store = store
        self._key = key

    def load(self) -> List[Vote]:
        raw = self._store.get_item(self._key)
        if not raw:
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            log.warning(f"Vote ledger is unparseable, treating as empty: {e}")
            return []

        if not isinstance(payload, list):
            log.warning("Vote ledger root is not an array, treating as empty")
            return []

        votes: List[Vote] = []
        for entry in payload:
            vote = Vote.from_dict(entry)
            if vote is not None:
                votes.append(vote)
        return votes

    def overwrite(self, votes: Iterable[Vote]) -> None:
        try:
            serialized = json.dumps([vote.to_document() for vote in votes])
            self._store.set_item(self._key, serialized)
        except (OSError, TypeError, ValueError) as e:
            raise LedgerWriteError(f"Failed to persist vote ledger: {e}") from e

    def append(self, vote: Vote) -> None:
        votes = self.load()
        votes.append(vote)
        self.overwrite(votes)

    def clear(self) -> None:
        try:
            self._store.remove_item(self._key)
        except OSError as e:
            raise LedgerWriteError(f"Failed to clear vote ledger: {e}") from e
        log.info("Local vote ledger cleared")

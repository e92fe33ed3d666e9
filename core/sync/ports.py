"""
Collaborator contracts for the sync controller.

Writing and reading the remote store are separate capabilities: a sink
accepts votes and acknowledges nothing, a source returns the full vote
list or None when the read failed.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Protocol

from core.votes.models import Vote


class VoteSink(Protocol):
    async def append(self, vote: Vote) -> None: ...


class VoteSource(Protocol):
    def is_configured(self) -> bool: ...

    async def fetch_all(self) -> Optional[List[Vote]]: ...


class Ledger(Protocol):
    def load(self) -> List[Vote]: ...

    def overwrite(self, votes: Iterable[Vote]) -> None: ...

    def append(self, vote: Vote) -> None: ...

    def clear(self) -> None: ...


class EndpointConfig(Protocol):
    def get_url(self) -> str: ...

    def set_url(self, url: str) -> None: ...

    def clear(self) -> None: ...

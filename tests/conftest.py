import os
import tempfile

# Keep per-run log files out of the working tree
os.environ.setdefault("VOTODIRECTO_LOG_DIR", tempfile.mkdtemp(prefix="votodirecto-logs-"))

from typing import List, Optional  # noqa: E402

import pytest  # noqa: E402

from core.votes.models import Vote  # noqa: E402
from shared.config.settings import EndpointSettings  # noqa: E402
from shared.storage.local_store import LocalStore  # noqa: E402
from shared.storage.vote_ledger import LedgerWriteError, VoteLedger  # noqa: E402

SHEET_URL = "https://script.google.com/macros/s/test-deployment/exec"


def make_vote(vote_id: str, candidate_id: str = "cand_1", region: str = "norte", ts: int = 1_700_000_000_000) -> Vote:
    return Vote(id=vote_id, candidate_id=candidate_id, region=region, timestamp=ts)


class FakeEndpointConfig:
    def __init__(self, url: str = ""):
        self.url = url

    def get_url(self) -> str:
        return self.url.strip()

    def set_url(self, url: str) -> None:
        self.url = url.strip()

    def clear(self) -> None:
        self.url = ""


class FakeRemote:
    """
    In-memory sheet. Appended rows become readable only after
    `publish_pending()` unless `visible_immediately` is set.
    """

    def __init__(self, config: FakeEndpointConfig, rows: Optional[List[Vote]] = None):
        self.config = config
        self.rows: List[Vote] = list(rows or [])
        self.pending: List[Vote] = []
        self.visible_immediately = True
        self.fail_reads = False
        self.appended: List[Vote] = []
        self.fetch_calls = 0

    def is_configured(self) -> bool:
        return bool(self.config.get_url())

    async def append(self, vote: Vote) -> None:
        self.appended.append(vote)
        if self.visible_immediately:
            self.rows.append(vote)
        else:
            self.pending.append(vote)

    async def fetch_all(self) -> Optional[List[Vote]]:
        self.fetch_calls += 1
        if self.fail_reads or not self.is_configured():
            return None
        return list(self.rows)


class FailingLedger(VoteLedger):
    def append(self, vote: Vote) -> None:
        raise LedgerWriteError("disk full")


@pytest.fixture
def store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path / "state")


@pytest.fixture
def ledger(store) -> VoteLedger:
    return VoteLedger(store)


@pytest.fixture
def endpoint_settings(store) -> EndpointSettings:
    return EndpointSettings(store)

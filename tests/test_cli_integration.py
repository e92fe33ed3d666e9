import json

import httpx
import pytest

from conftest import SHEET_URL
from core.context import AppContext
from core.sync.controller import SyncMode, TabView
from scripts import votectl
from shared.config.settings import SyncSettings


class SheetDouble:
    """HTTP double for the Apps Script web app."""

    def __init__(self):
        self.rows = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            self.rows.append(json.loads(request.content))
            return httpx.Response(200, text="Success")
        return httpx.Response(200, json=self.rows)


@pytest.fixture
def state_dir(tmp_path, monkeypatch):
    path = tmp_path / "state"
    monkeypatch.setenv("VOTODIRECTO_STATE_DIR", str(path))
    return path


@pytest.mark.asyncio
async def test_context_cloud_round_trip_over_http(tmp_path):
    sheet = SheetDouble()
    settings = SyncSettings(poll_interval=60, settle_delay=0, state_dir=str(tmp_path))
    ctx = AppContext.build(settings, transport=httpx.MockTransport(sheet))
    controller = ctx.controller

    await controller.set_endpoint(SHEET_URL)
    try:
        assert controller.mode is SyncMode.CLOUD

        notice = await controller.submit("cand_1", "capital")

        assert notice.kind == "success"
        assert [row["candidateId"] for row in sheet.rows] == ["cand_1"]
        assert [v.candidate_id for v in controller.votes] == ["cand_1"]
        assert ctx.ledger.load() == controller.votes
    finally:
        await controller.stop()

    # Another device writes directly to the sheet
    sheet.rows.append({"id": "other", "candidateId": "cand_3", "region": "sur", "timestamp": 1})
    await controller.show_view(TabView.RESULTS)
    assert [v.id for v in controller.votes][-1] == "other"


def test_cli_submit_and_results_in_local_mode(state_dir, capsys):
    assert votectl.main(["submit", "--candidate", "cand_2", "--region", "sur"]) == 0
    out = capsys.readouterr().out
    assert "Vote registered (local)" in out
    assert "Ballot: Carlos Mendez (Alianza Nacional), Zona Sur" in out

    assert votectl.main(["submit", "--candidate", "cand_2"]) == 0
    capsys.readouterr()

    assert votectl.main(["results", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)

    assert payload["mode"] == "local"
    assert payload["total"] == 2
    assert payload["candidates"][0]["candidate_id"] == "cand_2"
    assert payload["regions"] == {"sur": 1, "norte": 1}


def test_cli_clear_and_endpoint_show(state_dir, capsys):
    votectl.main(["submit", "--candidate", "cand_1"])
    assert votectl.main(["clear", "--yes"]) == 0
    assert votectl.main(["endpoint", "show"]) == 0

    out = capsys.readouterr().out
    assert "Local data cleared" in out
    assert "local-only mode" in out


def test_cli_endpoint_script_prints_apps_script(state_dir, capsys):
    assert votectl.main(["endpoint", "script"]) == 0
    assert "function doGet(e)" in capsys.readouterr().out


def test_cli_rejects_unknown_candidate(state_dir):
    with pytest.raises(SystemExit):
        votectl.main(["submit", "--candidate", "cand_9"])


def test_cli_analyze_requires_api_key(state_dir, monkeypatch, capsys):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    assert votectl.main(["submit", "--candidate", "cand_1"]) == 0
    capsys.readouterr()

    assert votectl.main(["analyze"]) == 1
    assert "GEMINI_API_KEY" in capsys.readouterr().err


def test_cli_analyze_reports_missing_votes_before_api_key(state_dir, monkeypatch, capsys):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)

    assert votectl.main(["analyze"]) == 1
    err = capsys.readouterr().err
    assert "There are no votes to analyze." in err
    assert "GEMINI_API_KEY" not in err

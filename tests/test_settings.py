from shared.config.catalog import CANDIDATES, DEFAULT_REGION_ID, get_candidate, get_region
from shared.config.settings import SHEET_URL_KEY, SyncSettings, load_sync_settings


def test_defaults_when_environment_is_empty():
    settings = load_sync_settings({})

    assert settings == SyncSettings()
    assert settings.poll_interval == 2.0
    assert settings.settle_delay == 1.5


def test_environment_overrides_and_invalid_values_fall_back_per_key():
    settings = load_sync_settings(
        {
            "VOTODIRECTO_POLL_INTERVAL": "5",
            "VOTODIRECTO_SETTLE_DELAY": "soon",
            "VOTODIRECTO_HTTP_TIMEOUT": "-1",
            "VOTODIRECTO_STATE_DIR": "/tmp/votes",
            "API_KEY": "legacy-key",
        }
    )

    assert settings.poll_interval == 5.0
    assert settings.settle_delay == 1.5
    assert settings.http_timeout == 15.0
    assert settings.state_dir == "/tmp/votes"
    assert settings.gemini_api_key == "legacy-key"


def test_endpoint_settings_persist_trimmed_url(store, endpoint_settings):
    endpoint_settings.set_url("  https://example.test/exec  ")

    assert endpoint_settings.get_url() == "https://example.test/exec"
    assert store.get_item(SHEET_URL_KEY) == "https://example.test/exec"


def test_endpoint_settings_blank_url_clears(store, endpoint_settings):
    endpoint_settings.set_url("https://example.test/exec")
    endpoint_settings.set_url("   ")

    assert endpoint_settings.get_url() == ""
    assert store.get_item(SHEET_URL_KEY) is None


def test_catalog_lookups():
    assert len(CANDIDATES) == 3
    assert get_candidate("cand_1").name == "Elena Torres"
    assert get_candidate("nobody") is None
    assert get_region(DEFAULT_REGION_ID).name == "Zona Norte"
    assert get_region("atlantis") is None

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from shared.logging.logger import get_logger
from shared.storage.local_store import LocalStore

log = get_logger("shared.config.settings")

SHEET_URL_KEY = "votodirecto_sheet_url"


@dataclass
class SyncSettings:
    poll_interval: float = 2.0
    settle_delay: float = 1.5
    http_timeout: float = 15.0
    state_dir: Optional[str] = None
    public_url: str = "http://localhost:8000/"
    gemini_model: str = "gemini-2.5-flash"
    gemini_api_key: Optional[str] = None


def _load_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not str(raw).strip():
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        log.warning(f"{key}={raw!r} is not a number; using default {default}")
        return default
    if value < 0:
        log.warning(f"{key}={raw!r} is negative; using default {default}")
        return default
    return value


def load_sync_settings(env: Optional[Mapping[str, str]] = None) -> SyncSettings:
    """
    Build SyncSettings from environment variables.

    Invalid values are ignored per-key, not globally.
    """
    env = os.environ if env is None else env
    defaults = SyncSettings()

    return SyncSettings(
        poll_interval=_load_float(env, "VOTODIRECTO_POLL_INTERVAL", defaults.poll_interval),
        settle_delay=_load_float(env, "VOTODIRECTO_SETTLE_DELAY", defaults.settle_delay),
        http_timeout=_load_float(env, "VOTODIRECTO_HTTP_TIMEOUT", defaults.http_timeout),
        state_dir=env.get("VOTODIRECTO_STATE_DIR") or None,
        public_url=env.get("VOTODIRECTO_PUBLIC_URL") or defaults.public_url,
        gemini_model=env.get("GEMINI_MODEL") or defaults.gemini_model,
        gemini_api_key=env.get("GEMINI_API_KEY") or env.get("API_KEY") or None,
    )


class EndpointSettings:
    """
    Persisted remote endpoint URL.

    An absent or blank URL means local-only mode. The value is read from
    the store on every access so all collaborators agree on the mode.
    """

    def __init__(self, store: LocalStore):
        self._store = store

    @property
    def base_dir(self) -> Path:
        return self._store.base_dir

    def get_url(self) -> str:
        return (self._store.get_item(SHEET_URL_KEY) or "").strip()

    def set_url(self, url: str) -> None:
        url = (url or "").strip()
        if not url:
            self.clear()
            return
        self._store.set_item(SHEET_URL_KEY, url)
        log.info(f"Endpoint URL configured: {url}")

    def clear(self) -> None:
        self._store.remove_item(SHEET_URL_KEY)
        log.info("Endpoint URL cleared; local-only mode")

import json
from typing import List, Optional

import httpx

from core.votes.models import Vote, now_ms
from shared.config.settings import EndpointSettings
from shared.logging.logger import get_logger

log = get_logger("sheets.endpoint")


class SheetEndpoint:
    """
    Google Apps Script spreadsheet endpoint.

    Responsibilities:
    - Send single vote rows (fire-and-forget, response never read)
    - Read the full vote sheet with cache busting
    - Report any failed read as None, never as an empty sheet

    The endpoint URL is resolved from settings on every call, so clearing
    it takes effect immediately. This module never touches the local
    ledger.
    """

    def __init__(
        self,
        settings: EndpointSettings,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    # ------------------------------------------------------------

    def is_configured(self) -> bool:
        return bool(self._settings.get_url())

    # ------------------------------------------------------------
    # Write (one-way)
    # ------------------------------------------------------------

    async def append(self, vote: Vote) -> None:
        """
        Send a vote row to the sheet.

        The body is declared as plain text so the script endpoint accepts it
        without content negotiation. Status and body are deliberately
        ignored: the confirming read is the only acknowledgment.
        """
        url = self._settings.get_url()
        if not url:
            log.debug(f"[{vote.id}] No endpoint configured; append skipped")
            return

        headers = {"Content-Type": "text/plain;charset=utf-8"}
        body = json.dumps(vote.to_document())

        async with self._client() as client:
            try:
                await client.post(url, content=body, headers=headers)
                log.debug(f"[{vote.id}] Vote sent to sheet")
            except Exception as e:
                log.error(f"[{vote.id}] Error sending vote to sheet: {e}")

    # ------------------------------------------------------------
    # Read
    # ------------------------------------------------------------

    async def fetch_all(self) -> Optional[List[Vote]]:
        """
        Read every vote currently visible in the sheet.

        Returns None on transport errors, non-2xx responses, undecodable
        bodies, and payloads that are not a JSON array.
        """
        url = self._settings.get_url()
        if not url:
            return None

        params = {"t": now_ms()}
        headers = {
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

        async with self._client() as client:
            try:
                r = await client.get(
                    url,
                    params=params,
                    headers=headers,
                    follow_redirects=True,
                )
                r.raise_for_status()
                data = r.json()
            except Exception as e:
                log.warning(f"Error fetching remote votes: {e}")
                return None

        if not isinstance(data, list):
            log.warning(
                f"Remote votes payload is {type(data).__name__}, expected array"
            )
            return None

        votes: List[Vote] = []
        skipped = 0
        for row in data:
            try:
                vote = Vote.from_dict(row)
            except Exception as e:
                log.warning(f"Undecodable sheet row skipped: {e}")
                vote = None
            if vote is None:
                skipped += 1
                continue
            votes.append(vote)

        if skipped:
            log.debug(f"Skipped {skipped} malformed sheet row(s)")

        return votes

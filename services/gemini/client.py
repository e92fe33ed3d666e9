import httpx
from typing import Any, Dict, Optional

from shared.logging.logger import get_logger

log = get_logger("gemini.client")


class GeminiError(RuntimeError):
    pass


class GeminiClient:
    """
    Minimal Gemini text-generation client (Generative Language API).

    One request, one response: the prompt goes in as a single user turn and
    the concatenated text parts of the first candidate come back.
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise RuntimeError("Gemini API key is required")
        self.api_key = api_key
        self.model = model
        self._timeout = timeout
        self._transport = transport

    # ------------------------------------------------------------

    async def summarize(self, prompt: str) -> str:
        url = f"{self.BASE_URL}/{self.model}:generateContent"
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            try:
                r = await client.post(url, params={"key": self.api_key}, json=payload)
                r.raise_for_status()
                data = r.json()
            except Exception as e:
                log.warning(f"Gemini request error: {e}")
                raise GeminiError(str(e)) from e

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        if not isinstance(data, dict):
            return ""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(
            part.get("text", "") for part in parts if isinstance(part, dict)
        ).strip()

"""NASA NeoWs API client: date-range feed fetch and a lightweight reachability probe."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

import httpx

from neowatch.config import Settings

logger = logging.getLogger(__name__)


class TransportFailure(RuntimeError):
    """Network error, timeout or non-success HTTP status talking to NeoWs."""


def default_window(today: date, days: int = 7) -> tuple[date, date]:
    """Inclusive feed window starting today."""
    return today, today + timedelta(days=days)


class NeoWsClient:
    """Async NeoWs client. No retries; callers decide when to try again."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._client = httpx.AsyncClient(
            timeout=settings.request_timeout_s,
            follow_redirects=True,
            transport=transport,
        )

    async def fetch_feed(self, start: date, end: date) -> dict[str, Any]:
        """Raw /feed response for the inclusive date range."""
        url = f"{self.settings.neows_base_url}/feed"
        params = {
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "api_key": self.settings.nasa_api_key,
        }
        logger.info("Fetching NEO feed %s to %s", params["start_date"], params["end_date"])
        try:
            resp = await self._client.get(url, params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as exc:
            raise TransportFailure(f"NeoWs feed request failed: {exc}") from exc
        except ValueError as exc:
            raise TransportFailure(f"NeoWs feed returned invalid JSON: {exc}") from exc

    async def probe(self) -> None:
        """HEAD request used only for timing; the body is discarded."""
        try:
            resp = await self._client.head(
                self.settings.probe_url,
                params={"api_key": self.settings.nasa_api_key},
                headers={"Cache-Control": "no-store"},
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportFailure(f"NeoWs probe failed: {exc}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()

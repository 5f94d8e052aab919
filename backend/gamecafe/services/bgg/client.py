"""BoardGameGeek XML API client: sends requests and parses XML. Errors are returned, not raised."""
import logging
import xml.etree.ElementTree as ET
from typing import Any

import httpx

from gamecafe.config import settings
from gamecafe.core.constants import BGG_SEARCH_LIMIT
from gamecafe.services.bgg.types import parse_search_ids, parse_thing

logger = logging.getLogger(__name__)


class BggClient:
    """Search and thing-details client for boardgamegeek.com/xmlapi2."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.bgg_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.bgg_timeout_seconds
        self._transport = transport

    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as c:
                r = c.get(url, params=params)
        except Exception as e:
            return {"error": str(e)}
        if not r.is_success:
            return {"error": f"BGG API error: {r.status_code}", "detail": (r.text[:500] if r.text else None)}
        return {"text": r.text}

    def search(self, query: str, *, exact: bool = False) -> dict[str, Any]:
        """Return {"ids": [...]} of board games matching query, or {"error": ...}."""
        params: dict[str, Any] = {"query": query, "type": "boardgame"}
        if exact:
            params["exact"] = 1
        raw = self._get("/search", params)
        if raw.get("error"):
            return raw
        try:
            return {"ids": parse_search_ids(raw["text"])}
        except ET.ParseError as e:
            return {"error": f"Invalid BGG search response: {e}"}

    def fetch_thing(self, bgg_id: str, *, stats: bool = False) -> dict[str, Any]:
        """Return {"game": BggGame} for one id, or {"error": ...}."""
        params: dict[str, Any] = {"id": bgg_id}
        if stats:
            params["stats"] = 1
        raw = self._get("/thing", params)
        if raw.get("error"):
            return raw
        try:
            game = parse_thing(raw["text"])
        except ET.ParseError as e:
            return {"error": f"Invalid BGG thing response: {e}"}
        if game is None:
            return {"error": f"BGG game {bgg_id} not found"}
        return {"game": game}

    def search_with_details(self, query: str, *, limit: int = BGG_SEARCH_LIMIT) -> dict[str, Any]:
        """Search, then fetch details (with ratings) for the first `limit` hits."""
        found = self.search(query)
        if found.get("error"):
            return found
        games = []
        for bgg_id in found["ids"][:limit]:
            details = self.fetch_thing(bgg_id, stats=True)
            if details.get("error"):
                logger.warning("BGG details for %s failed: %s", bgg_id, details["error"])
                continue
            games.append(details["game"])
        return {"games": games}

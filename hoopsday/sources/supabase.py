"""
Roster source backed by the registration database's Supabase REST API.

Queries the players table joined to teams, keeping only players whose
team has been approved:

    GET {url}/rest/v1/players
        ?select=id,player_name,age_category,grade_level,contact_phone,
                teams!inner(team_name,status,approved)
        &teams.approved=eq.true
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.parse
import urllib.request

from hoopsday.sources.base import RosterSource, player_from_row
from hoopsday.tournament.base import Player
from hoopsday.tournament.errors import ExternalFailure

logger = logging.getLogger(__name__)

_SELECT = (
    "id,player_name,age_category,grade_level,contact_phone,"
    "teams!inner(team_name,status,approved)"
)


class SupabaseRosterSource(RosterSource):
    def __init__(self, url: str, api_key: str, timeout: int = 15) -> None:
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    @property
    def label(self) -> str:
        return f"supabase:{urllib.parse.urlparse(self._url).netloc}"

    def query_url(self) -> str:
        query = urllib.parse.urlencode({"select": _SELECT, "teams.approved": "eq.true"})
        return f"{self._url}/rest/v1/players?{query}"

    async def fetch_approved_players(self) -> list[Player]:
        rows = await _http_get(
            self.query_url(),
            api_key=self._api_key,
            timeout=self._timeout,
        )
        if not isinstance(rows, list):
            raise ExternalFailure(f"Unexpected roster response from {self.label}: {rows!r:.200}")

        players = [player_from_row(row) for row in rows]
        logger.info("Fetched %d approved player(s) from %s", len(players), self.label)
        return players


async def _http_get(url: str, *, api_key: str, timeout: int) -> dict | list:
    """Async HTTP GET via stdlib urllib (no extra deps)."""

    def _do() -> dict | list:
        headers = {
            "Accept": "application/json",
            "User-Agent": "HoopsDay/1.0",
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
        }
        req = urllib.request.Request(url, headers=headers, method="GET")
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return json.loads(resp.read())
        except urllib.error.HTTPError as exc:
            body = exc.read()
            raise ExternalFailure(f"Roster HTTP {exc.code}: {body[:200]!r}") from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            raise ExternalFailure(f"Roster source unreachable: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ExternalFailure(f"Roster response is not JSON: {exc}") from exc

    return await asyncio.to_thread(_do)

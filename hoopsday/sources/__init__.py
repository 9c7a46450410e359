"""
Roster source factory.

create_roster_source() is the single entry point for instantiating any
RosterSource from config.yaml.

To add a new source:
  1. Create hoopsday/sources/<name>.py implementing RosterSource
  2. Add a case here in create_roster_source()
  3. Document its keys under roster: in config.example.yaml
"""

from __future__ import annotations

from hoopsday.config import RosterConfig
from hoopsday.sources.base import RosterSource, player_from_row
from hoopsday.sources.file import FileRosterSource
from hoopsday.sources.supabase import SupabaseRosterSource

__all__ = [
    "RosterSource",
    "FileRosterSource",
    "SupabaseRosterSource",
    "create_roster_source",
    "player_from_row",
]


def create_roster_source(roster_cfg: RosterConfig) -> RosterSource | None:
    """Instantiate the configured RosterSource, or None for source: none."""
    match roster_cfg.source:
        case "none":
            return None
        case "file":
            return FileRosterSource(roster_cfg.path)
        case "supabase":
            if not roster_cfg.url or not roster_cfg.api_key:
                raise ValueError("The supabase roster source requires 'url' and 'api_key' in config")
            return SupabaseRosterSource(
                url=roster_cfg.url,
                api_key=roster_cfg.api_key,
                timeout=roster_cfg.timeout,
            )
        case _:
            raise ValueError(
                f"Unknown roster source: '{roster_cfg.source}'. Supported: none, file, supabase"
            )

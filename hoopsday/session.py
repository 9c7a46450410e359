"""
TournamentSession — the boundary between callers and the pure core.

One asyncio.Lock serialises "read snapshot → compute → write snapshot" so
that several clients (web requests, CLI) can share one tournament.  The
core functions underneath stay lock-free and synchronous.

If persisting a new snapshot fails, the in-memory state machine is rolled
back to what was last saved, so memory and disk never disagree.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, TypeVar

from hoopsday.config import Config
from hoopsday.sources import RosterSource
from hoopsday.store import SnapshotStore
from hoopsday.tournament.base import TournamentData, new_tournament
from hoopsday.tournament.errors import ExternalFailure
from hoopsday.tournament.progression import TournamentStateMachine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TournamentSession:
    def __init__(
        self,
        store: SnapshotStore,
        config: Config,
        roster_source: RosterSource | None = None,
    ) -> None:
        self.store = store
        self.config = config
        self.roster_source = roster_source
        self._machine: TournamentStateMachine | None = None
        self._lock = asyncio.Lock()

    @property
    def machine(self) -> TournamentStateMachine:
        """The live state machine, loaded (or created) on first access."""
        if self._machine is None:
            data = self.store.load()
            if data is None:
                data = new_tournament(
                    name=self.config.tournament.name,
                    date=self.config.tournament.date,
                    settings=self.config.settings,
                )
                logger.info("No saved tournament at %s; created %s", self.store.path, data.id)
                self.store.save(data)
            self._machine = TournamentStateMachine(data)
        return self._machine

    @property
    def data(self) -> TournamentData:
        return self.machine.data

    async def run(self, operation: Callable[[TournamentStateMachine], T]) -> T:
        """
        Apply one operation to the state machine and persist the result.

        Operations that raise leave the machine untouched (the core is
        all-or-nothing) and nothing is written.
        """
        async with self._lock:
            machine = self.machine
            before_data, before_step = machine.data, machine.step
            result = operation(machine)
            if machine.data is not before_data:
                try:
                    self.store.save(machine.data)
                except ExternalFailure:
                    machine.data, machine.step = before_data, before_step
                    raise
            return result

    async def import_roster(self) -> int:
        """
        Fetch approved players from the roster source and import them.
        Returns the number of players newly added to the roster.

        The fetch happens outside the lock; only the import itself is
        serialised with other mutations.

        Raises:
            ExternalFailure: no roster source is configured or the fetch failed.
        """
        if self.roster_source is None:
            raise ExternalFailure("No roster source is configured (roster.source: none).")

        logger.info("Fetching roster from %s", self.roster_source.label)
        players = await self.roster_source.fetch_approved_players()

        def _import(machine: TournamentStateMachine) -> int:
            before = len(machine.data.participants)
            machine.import_players(players)
            return len(machine.data.participants) - before

        return await self.run(_import)

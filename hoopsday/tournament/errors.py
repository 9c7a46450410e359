"""
Error taxonomy for tournament operations.

Every core operation either returns a new snapshot or raises one of these;
when it raises, the caller's snapshot is unchanged.
"""

from __future__ import annotations


class TournamentError(Exception):
    """Base class for every rejection raised by the tournament core."""


class ValidationError(TournamentError):
    """A guard or invariant would be violated by the requested mutation."""


class NotFoundError(ValidationError):
    """The operation names a player, team or game that does not exist."""


class InconsistentStateError(TournamentError):
    """
    The operation targets data that has moved on, e.g. regenerating the
    schedule after a game has started.  The caller has to clear the
    offending state explicitly before retrying.
    """


class ExternalFailure(TournamentError):
    """Roster import or snapshot persistence failed.  Never retried here."""

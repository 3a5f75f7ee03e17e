"""Storage used by the scoring engine.

The engine only talks to a ``ScoringStore``; the application wires in the
SQLAlchemy implementation and tests can hand in an in-memory one.
"""

import functools
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from league import db
from league.models import GolferResult, TeamPoints, Tournament, TournamentLineup, TournamentSkins
from .errors import StorageFailure


class _Unchanged:
    def __repr__(self):
        return 'UNCHANGED'


UNCHANGED: Any = _Unchanged()


@dataclass(frozen=True)
class SkinsUpdate:
    """Partial update for a tournament's skins pot.

    Fields left as ``UNCHANGED`` are not written; ``None`` is a real value.
    """
    skin_value: Any = UNCHANGED
    carry_over: Any = UNCHANGED

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNCHANGED
        }

    def apply_to(self, skins) -> None:
        for name, value in self.changes().items():
            setattr(skins, name, value)


class ScoringStore(ABC):
    @abstractmethod
    def get_tournament(self, tournament_id):
        ...

    @abstractmethod
    def list_golfer_results(self, tournament_id) -> List[Any]:
        ...

    @abstractmethod
    def list_lineups(self, tournament_id) -> Dict[int, List[int]]:
        """Golfer ids fielded for the tournament, keyed by team id."""

    @abstractmethod
    def get_tournament_skins(self, tournament_id):
        ...

    @abstractmethod
    def upsert_team_points(self, team_id, tournament_id, points: int, skin_count: int) -> None:
        ...

    @abstractmethod
    def update_tournament_skins(self, tournament_id, update: SkinsUpdate) -> None:
        ...

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass


def _storage_errors(method):
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise StorageFailure(f'{method.__name__} failed: {exc}') from exc
    return wrapper


class SqlAlchemyScoringStore(ScoringStore):
    """ScoringStore backed by the Flask-SQLAlchemy session.

    Writes are staged on the session and land together on ``commit``.
    """

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    @_storage_errors
    def get_tournament(self, tournament_id) -> Optional[Tournament]:
        return self.session.get(Tournament, tournament_id)

    @_storage_errors
    def list_golfer_results(self, tournament_id):
        return (
            self.session.query(GolferResult)
            .filter_by(tournament_id=tournament_id)
            .all()
        )

    @_storage_errors
    def list_lineups(self, tournament_id):
        rows = (
            self.session.query(TournamentLineup.team_id, TournamentLineup.golfer_id)
            .filter_by(tournament_id=tournament_id)
            .order_by(TournamentLineup.team_id, TournamentLineup.id)
            .all()
        )
        lineups = defaultdict(list)
        for team_id, golfer_id in rows:
            lineups[team_id].append(golfer_id)
        return dict(lineups)

    @_storage_errors
    def get_tournament_skins(self, tournament_id) -> Optional[TournamentSkins]:
        return self.session.query(TournamentSkins).filter_by(tournament_id=tournament_id).first()

    @_storage_errors
    def upsert_team_points(self, team_id, tournament_id, points, skin_count):
        row = (
            self.session.query(TeamPoints)
            .filter_by(team_id=team_id, tournament_id=tournament_id)
            .first()
        )
        if row is None:
            row = TeamPoints(team_id=team_id, tournament_id=tournament_id)
        row.points = points
        row.skin_count = skin_count
        self.session.add(row)
        self.session.flush()

    @_storage_errors
    def update_tournament_skins(self, tournament_id, update):
        skins = self.session.query(TournamentSkins).filter_by(tournament_id=tournament_id).first()
        if skins is None:
            return
        update.apply_to(skins)
        self.session.add(skins)
        self.session.flush()

    @_storage_errors
    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

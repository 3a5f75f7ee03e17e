"""Scoring domain services: tournament points, skins pots and standings.

Routes and CLI commands call into this package; the points engine reads and
writes through a ``ScoringStore`` so it can run against any backing store.
"""

from .engine import NOT_FOUND, STORAGE_FAILURE, PointsResult, compute_points
from .errors import ScoringError, StorageFailure, TournamentNotFound
from .store import UNCHANGED, ScoringStore, SkinsUpdate, SqlAlchemyScoringStore

__all__ = [
    'compute_points',
    'PointsResult',
    'NOT_FOUND',
    'STORAGE_FAILURE',
    'ScoringError',
    'StorageFailure',
    'TournamentNotFound',
    'ScoringStore',
    'SqlAlchemyScoringStore',
    'SkinsUpdate',
    'UNCHANGED',
]

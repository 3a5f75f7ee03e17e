import logging
from dataclasses import dataclass, asdict
from typing import Optional

from .errors import StorageFailure, TournamentNotFound
from .points import lineup_totals
from .store import ScoringStore, SkinsUpdate, SqlAlchemyScoringStore

logger = logging.getLogger(__name__)

NOT_FOUND = 'not_found'
STORAGE_FAILURE = 'storage_failure'


@dataclass
class PointsResult:
    success: bool
    message: str
    points_calculated: int = 0
    skins_awarded: int = 0
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str, message: str) -> 'PointsResult':
        return cls(success=False, message=message, error=error)

    def to_dict(self):
        return asdict(self)


def compute_points(tournament_id, store: Optional[ScoringStore] = None) -> PointsResult:
    """Calculate and save points for every team that fielded a lineup.

    Each team gets one TeamPoints row for the tournament, overwritten on
    re-runs. When no golfer won a skin, the tournament's pot is marked to
    carry over; a pot already marked is never cleared here.
    """
    if store is None:
        store = SqlAlchemyScoringStore()
    try:
        points, skins = _score_tournament(tournament_id, store)
    except TournamentNotFound as exc:
        logger.info(f"[points] {exc}")
        return PointsResult.failure(NOT_FOUND, 'Tournament not found')
    except StorageFailure:
        logger.exception(f"[points] tournament={tournament_id} storage failure")
        store.rollback()
        return PointsResult.failure(STORAGE_FAILURE, 'Error calculating tournament points')
    return PointsResult(
        success=True,
        message='Points calculated successfully',
        points_calculated=points,
        skins_awarded=skins,
    )


def _score_tournament(tournament_id, store: ScoringStore):
    tournament = store.get_tournament(tournament_id)
    if tournament is None:
        raise TournamentNotFound(tournament_id)

    results = store.list_golfer_results(tournament_id)
    results_by_golfer = {r.golfer_id: r for r in results}
    lineups = store.list_lineups(tournament_id)

    total_points = 0
    total_skins = 0
    for team_id, golfer_ids in lineups.items():
        if not golfer_ids:
            continue
        team_points, team_skins = lineup_totals(tournament, golfer_ids, results_by_golfer)
        store.upsert_team_points(team_id, tournament_id, team_points, team_skins)
        total_points += team_points
        total_skins += team_skins

    # Skins won by any golfer, fielded or not
    skins_won = sum(r.skin_count or 0 for r in results)
    if skins_won == 0 and store.get_tournament_skins(tournament_id) is not None:
        store.update_tournament_skins(tournament_id, SkinsUpdate(carry_over=True))

    store.commit()
    logger.info(
        f"[points] tournament={tournament_id} teams={len(lineups)} points={total_points} skins={total_skins}"
    )
    return total_points, total_skins

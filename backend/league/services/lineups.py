"""Weekly lineup rules: deadlines and what makes a lineup valid."""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from flask import current_app

from league import db
from league.models import Golfer, Team, TeamRoster, Tournament, TournamentLineup

# Days after the Sunday that opens the tournament week
ROSTER_DEADLINE_DAY = 2  # Tuesday
ROSTER_DEADLINE_HOUR = 19
LINEUP_DEADLINE_DAY = 4  # Thursday
LINEUP_DEADLINE_HOUR = 7


class LineupError(ValueError):
    pass


class DeadlinePassed(LineupError):
    pass


def _week_deadline(tournament: Tournament, day: int, hour: int) -> datetime:
    start = tournament.start_date
    sunday = start - timedelta(days=start.isoweekday() % 7)
    return (sunday + timedelta(days=day)).replace(hour=hour, minute=0, second=0, microsecond=0)


def roster_deadline(tournament: Tournament) -> datetime:
    return _week_deadline(tournament, ROSTER_DEADLINE_DAY, ROSTER_DEADLINE_HOUR)


def lineup_deadline(tournament: Tournament) -> datetime:
    return _week_deadline(tournament, LINEUP_DEADLINE_DAY, LINEUP_DEADLINE_HOUR)


def can_modify_lineup(tournament: Tournament, now: Optional[datetime] = None) -> bool:
    return (now or datetime.now()) < lineup_deadline(tournament)


def can_modify_roster(tournament: Tournament, now: Optional[datetime] = None) -> bool:
    return (now or datetime.now()) < roster_deadline(tournament)


def next_deadline(tournament: Tournament, now: Optional[datetime] = None):
    """The next deadline the league is working towards, as (kind, when)."""
    now = now or datetime.now()
    if now < roster_deadline(tournament):
        return 'roster', roster_deadline(tournament)
    if now < lineup_deadline(tournament):
        return 'lineup', lineup_deadline(tournament)
    return 'tournament_start', tournament.start_date


def roster_lock(now: Optional[datetime] = None) -> Optional[Tournament]:
    """Tournament whose roster deadline has passed but which has not finished yet.

    Rosters are frozen while such a tournament exists.
    """
    now = now or datetime.now()
    running = Tournament.query.filter(Tournament.end_date >= now).order_by(Tournament.start_date).all()
    for tournament in running:
        if not can_modify_roster(tournament, now):
            return tournament
    return None


def _check_roster_open(now):
    locked = roster_lock(now)
    if locked is not None:
        raise DeadlinePassed(f'Roster deadline has passed for {locked.name}')


def add_to_roster(team: Team, golfer: Golfer, now: Optional[datetime] = None) -> TeamRoster:
    _check_roster_open(now)
    size = TeamRoster.query.filter_by(team_id=team.id).count()
    limit = int(current_app.config.get('ROSTER_MAX', 12))
    if size >= limit:
        raise LineupError(f'Team roster is full ({limit} golfers maximum)')
    if TeamRoster.query.filter_by(team_id=team.id, golfer_id=golfer.id).first():
        raise LineupError('Golfer is already on this team')
    entry = TeamRoster(team_id=team.id, golfer_id=golfer.id)
    db.session.add(entry)
    db.session.commit()
    current_app.logger.info(f"[roster] team={team.id} added golfer={golfer.id}")
    return entry


def remove_from_roster(team: Team, golfer_id: int, now: Optional[datetime] = None) -> None:
    _check_roster_open(now)
    entry = TeamRoster.query.filter_by(team_id=team.id, golfer_id=golfer_id).first()
    if entry is None:
        raise LineupError('Golfer is not on this team')
    if TournamentLineup.query.filter_by(team_id=team.id, golfer_id=golfer_id).first():
        raise LineupError('Cannot remove golfer: they are in tournament lineups')
    db.session.delete(entry)
    db.session.commit()
    current_app.logger.info(f"[roster] team={team.id} removed golfer={golfer_id}")


def validate_lineup(team: Team, tournament: Tournament, golfer_ids: Iterable, now: Optional[datetime] = None) -> List[int]:
    """Check a lineup submission and return the golfer ids as ints.

    Raises DeadlinePassed after Thursday morning of the tournament week and
    LineupError for anything else wrong with the selection.
    """
    if not can_modify_lineup(tournament, now):
        raise DeadlinePassed('Lineup deadline has passed for this tournament')
    try:
        ids = [int(g) for g in golfer_ids]
    except (TypeError, ValueError):
        raise LineupError('Golfer ids must be integers')
    size = int(current_app.config.get('LINEUP_SIZE', 4))
    if len(ids) != size or len(set(ids)) != size:
        raise LineupError(f'Must select exactly {size} golfers')
    rostered = {
        r.golfer_id for r in TeamRoster.query.filter_by(team_id=team.id).all()
    }
    missing = [g for g in ids if g not in rostered]
    if missing:
        raise LineupError(f'Golfers not on team roster: {missing}')
    return ids


def submit_lineup(team: Team, tournament: Tournament, golfer_ids: Iterable, now: Optional[datetime] = None) -> List[int]:
    """Replace the team's lineup for the tournament."""
    ids = validate_lineup(team, tournament, golfer_ids, now)
    TournamentLineup.query.filter_by(team_id=team.id, tournament_id=tournament.id).delete()
    for golfer_id in ids:
        db.session.add(TournamentLineup(team_id=team.id, tournament_id=tournament.id, golfer_id=golfer_id))
    db.session.commit()
    current_app.logger.info(f"[lineup] team={team.id} tournament={tournament.id} golfers={ids}")
    return ids


def clear_lineup(team: Team, tournament: Tournament, now: Optional[datetime] = None) -> int:
    """Withdraw the team's lineup for the tournament; returns the number of rows removed."""
    if not can_modify_lineup(tournament, now):
        raise DeadlinePassed('Lineup deadline has passed for this tournament')
    removed = TournamentLineup.query.filter_by(team_id=team.id, tournament_id=tournament.id).delete()
    db.session.commit()
    current_app.logger.info(f"[lineup] team={team.id} tournament={tournament.id} cleared={removed}")
    return removed


def lineup_for(team: Team, tournament: Tournament) -> List[int]:
    rows = (
        TournamentLineup.query
        .filter_by(team_id=team.id, tournament_id=tournament.id)
        .order_by(TournamentLineup.id)
        .all()
    )
    return [r.golfer_id for r in rows]

from flask import current_app

from league import db
from league.models import GolferResult, Tournament, TournamentLineup, TournamentSkins
from .store import SkinsUpdate


class SkinsNotConfigured(Exception):
    """The tournament has no skins pot yet."""


def previous_carry_over(tournament: Tournament):
    """The most recent earlier pot that rolled forward, if any.

    Only the latest few tournaments that ended before this one started are
    considered, and only the first carried-over pot among them counts.
    """
    lookback = int(current_app.config.get('SKINS_CARRY_OVER_LOOKBACK', 5))
    previous = (
        Tournament.query
        .filter(Tournament.end_date < tournament.start_date)
        .order_by(Tournament.end_date.desc())
        .limit(lookback)
        .all()
    )
    for prev in previous:
        skins = TournamentSkins.query.filter_by(tournament_id=prev.id).first()
        if skins and skins.carry_over:
            return skins
    return None


def set_tournament_skins(tournament: Tournament, skin_value, carry_over: bool) -> TournamentSkins:
    """Create or replace a tournament's pot, folding in a carried-over pot when asked."""
    total = float(skin_value or 0)
    if carry_over:
        prev = previous_carry_over(tournament)
        if prev is not None:
            total += prev.skin_value
            current_app.logger.info(
                f"[skins] tournament={tournament.id} carry over {prev.skin_value} from tournament={prev.tournament_id}"
            )
    skins = TournamentSkins.query.filter_by(tournament_id=tournament.id).first()
    if skins is None:
        skins = TournamentSkins(tournament_id=tournament.id)
    SkinsUpdate(skin_value=total, carry_over=carry_over).apply_to(skins)
    db.session.add(skins)
    db.session.commit()
    return skins


def update_tournament_skins(tournament: Tournament, update: SkinsUpdate) -> TournamentSkins:
    skins = TournamentSkins.query.filter_by(tournament_id=tournament.id).first()
    if skins is None:
        raise SkinsNotConfigured('Tournament skins entry not found')
    update.apply_to(skins)
    db.session.add(skins)
    db.session.commit()
    return skins


def calculate_skins_pot(tournament: Tournament) -> TournamentSkins:
    """Value the pot from the teams that fielded a lineup this week.

    A pot marked to carry over keeps its current value on top of the buy-ins.
    """
    skins = TournamentSkins.query.filter_by(tournament_id=tournament.id).first()
    if skins is None:
        raise SkinsNotConfigured('Tournament skins entry not found')
    buy_in = float(current_app.config.get('SKINS_BUY_IN', 10))
    teams = (
        db.session.query(TournamentLineup.team_id)
        .filter_by(tournament_id=tournament.id)
        .distinct()
        .count()
    )
    value = teams * buy_in
    if skins.carry_over:
        value += skins.skin_value
    skins.skin_value = value
    db.session.add(skins)
    db.session.commit()
    current_app.logger.info(f"[skins] tournament={tournament.id} teams={teams} pot={value}")
    return skins


def skin_winners(tournament_id):
    """Golfers who won skins, with the teams that fielded them."""
    winners = []
    results = (
        GolferResult.query
        .filter(GolferResult.tournament_id == tournament_id, GolferResult.skin_count > 0)
        .all()
    )
    for result in results:
        lineups = TournamentLineup.query.filter_by(tournament_id=tournament_id, golfer_id=result.golfer_id).all()
        winners.append({
            'golfer_id': result.golfer_id,
            'golfer': result.golfer.name if result.golfer else None,
            'skin_count': result.skin_count,
            'teams': [{'id': l.team_id, 'name': l.team.name} for l in lineups],
        })
    return winners

from datetime import datetime
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from sqlalchemy import or_
from league import db
from league.main import admin_required
from league.models import Golfer, GolferResult, Team, TeamPoints, Tournament, TournamentSkins
from league.api.points import points_response
from league.services.scoring import compute_points, SkinsUpdate, UNCHANGED
from league.services.scoring.skins import SkinsNotConfigured, calculate_skins_pot, update_tournament_skins
from league.services.lineups import lineup_for, next_deadline

tournaments = Blueprint('tournaments', __name__)

RESULT_INT_FIELDS = ('match_play_wins', 'skin_count')
RESULT_FLOAT_FIELDS = ('earnings', 'fedex_points')
RESULT_BOOL_FIELDS = ('is_cut', 'is_wd')
TOURNAMENT_FLAGS = ('is_major', 'is_wgc', 'is_match_play', 'is_active')


def _parse_result(entry):
    """Validate one posted golfer result; returns a dict of column values."""
    if not isinstance(entry, dict):
        raise ValueError('Each result must be an object')
    golfer_id = entry.get('golfer_id')
    if not isinstance(golfer_id, int) or isinstance(golfer_id, bool):
        raise ValueError('Each result must include an integer golfer_id')
    position = entry.get('position')
    if position is not None and (not isinstance(position, int) or position < 1):
        raise ValueError('position must be a positive integer or null')
    values = {'golfer_id': golfer_id, 'position': position}
    for name in RESULT_INT_FIELDS:
        value = entry.get(name, 0)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError(f'{name} must be a non-negative integer')
        values[name] = value
    for name in RESULT_FLOAT_FIELDS:
        value = entry.get(name, 0)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
            raise ValueError(f'{name} must be a non-negative number')
        values[name] = float(value)
    for name in RESULT_BOOL_FIELDS:
        values[name] = bool(entry.get(name, False))
    return values


def _parse_date(value, name):
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f'{name} must be an ISO date')


@tournaments.route('', methods=['GET'])
@login_required
def list_tournaments():
    rows = Tournament.query.order_by(Tournament.start_date.desc()).all()
    return jsonify([t.to_dict() for t in rows])


@tournaments.route('', methods=['POST'])
@login_required
@admin_required
def create_tournament():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Tournament name is required'}), 400
    try:
        start_date = _parse_date(data.get('start_date'), 'start_date')
        end_date = _parse_date(data.get('end_date'), 'end_date')
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    if end_date < start_date:
        return jsonify({'error': 'end_date must not be before start_date'}), 400

    tournament = Tournament(
        name=name,
        start_date=start_date,
        end_date=end_date,
        is_major=bool(data.get('is_major', False)),
        is_wgc=bool(data.get('is_wgc', False)),
        is_match_play=bool(data.get('is_match_play', False)),
        is_active=bool(data.get('is_active', False)),
    )
    if tournament.is_active:
        # Only one tournament may be active at a time
        Tournament.query.filter_by(is_active=True).update({'is_active': False})
    db.session.add(tournament)
    db.session.add(TournamentSkins(tournament=tournament, skin_value=0, carry_over=False))
    db.session.commit()
    current_app.logger.info(f"[tournament] created id={tournament.id} name={tournament.name!r}")
    return jsonify(tournament.to_dict()), 201


@tournaments.route('/<int:tournament_id>', methods=['GET'])
@login_required
def get_tournament(tournament_id):
    tournament = Tournament.query.filter_by(id=tournament_id).first_or_404()
    payload = tournament.to_dict()
    payload['skins'] = tournament.skins.to_dict() if tournament.skins else None
    return jsonify(payload)


@tournaments.route('/upcoming', methods=['GET'])
@login_required
def upcoming_tournament():
    """The active tournament, or else the next one to start, with the caller's lineup."""
    now = datetime.now()
    tournament = (
        Tournament.query
        .filter(or_(Tournament.start_date >= now, Tournament.is_active.is_(True)))
        .order_by(Tournament.start_date)
        .first()
    )
    if not tournament:
        return jsonify({'message': 'No upcoming tournaments found'}), 404
    payload = tournament.to_dict()
    kind, when = next_deadline(tournament, now)
    payload['next_deadline'] = {'type': kind, 'deadline': when.isoformat()}
    team = Team.query.filter_by(owner_id=current_user.id).first()
    payload['lineup'] = lineup_for(team, tournament) if team else []
    return jsonify(payload)


@tournaments.route('/<int:tournament_id>', methods=['PATCH'])
@login_required
@admin_required
def update_tournament(tournament_id):
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    data = request.get_json(silent=True) or {}
    if 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            return jsonify({'error': 'Tournament name must not be empty'}), 400
        tournament.name = name
    try:
        for field in ('start_date', 'end_date'):
            if field in data:
                setattr(tournament, field, _parse_date(data[field], field))
    except ValueError as exc:
        db.session.rollback()
        return jsonify({'error': str(exc)}), 400
    if tournament.end_date < tournament.start_date:
        db.session.rollback()
        return jsonify({'error': 'end_date must not be before start_date'}), 400
    for flag in TOURNAMENT_FLAGS:
        if flag in data:
            if not isinstance(data[flag], bool):
                db.session.rollback()
                return jsonify({'error': f'{flag} must be a boolean'}), 400
            setattr(tournament, flag, data[flag])
    if data.get('is_active') is True:
        (Tournament.query
         .filter(Tournament.id != tournament.id, Tournament.is_active.is_(True))
         .update({'is_active': False}, synchronize_session=False))
    db.session.commit()
    current_app.logger.info(f"[tournament] updated id={tournament.id}")
    return jsonify(tournament.to_dict())


@tournaments.route('/<int:tournament_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_tournament(tournament_id):
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    has_data = (
        tournament.lineups.first()
        or tournament.golfer_results.first()
        or TeamPoints.query.filter_by(tournament_id=tournament.id).first()
    )
    if has_data:
        return jsonify({'error': 'Cannot delete tournament: it has associated lineups, results, or points'}), 400
    TournamentSkins.query.filter_by(tournament_id=tournament.id).delete()
    db.session.delete(tournament)
    db.session.commit()
    current_app.logger.info(f"[tournament] deleted id={tournament_id}")
    return jsonify({'message': 'Tournament deleted successfully'})


@tournaments.route('/<int:tournament_id>/results', methods=['GET'])
@login_required
def get_results(tournament_id):
    Tournament.query.filter_by(id=tournament_id).first_or_404()
    rows = (
        GolferResult.query
        .filter_by(tournament_id=tournament_id)
        .order_by(GolferResult.position.is_(None), GolferResult.position)
        .all()
    )
    return jsonify([r.to_dict() for r in rows])


@tournaments.route('/<int:tournament_id>/results', methods=['POST'])
@login_required
@admin_required
def save_results(tournament_id):
    """Add or update golfer results, then recalculate the tournament's points."""
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    data = request.get_json(silent=True) or {}
    entries = data.get('results')
    if not isinstance(entries, list):
        return jsonify({'error': 'Results must be an array'}), 400
    try:
        parsed = [_parse_result(e) for e in entries]
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400

    golfer_ids = {p['golfer_id'] for p in parsed}
    known = {g.id for g in Golfer.query.filter(Golfer.id.in_(golfer_ids)).all()} if golfer_ids else set()
    unknown = sorted(golfer_ids - known)
    if unknown:
        return jsonify({'error': f'Unknown golfers: {unknown}'}), 400

    for values in parsed:
        row = GolferResult.query.filter_by(tournament_id=tournament_id, golfer_id=values['golfer_id']).first()
        if row is None:
            row = GolferResult(tournament_id=tournament_id)
        for name, value in values.items():
            setattr(row, name, value)
        db.session.add(row)
    db.session.commit()
    current_app.logger.info(f"[results] tournament={tournament_id} saved={len(parsed)}")

    result = compute_points(tournament_id)
    if not result.success:
        return points_response(tournament_id, result)
    rows = GolferResult.query.filter_by(tournament_id=tournament_id).all()
    return jsonify({
        'results': [r.to_dict() for r in rows],
        'points_calculated': result.points_calculated,
        'skins_awarded': result.skins_awarded,
    })


@tournaments.route('/<int:tournament_id>/results', methods=['DELETE'])
@login_required
@admin_required
def delete_results(tournament_id):
    """Remove every result for the tournament along with the points derived from them."""
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    TeamPoints.query.filter_by(tournament_id=tournament_id).delete()
    removed = GolferResult.query.filter_by(tournament_id=tournament_id).delete()
    db.session.commit()
    current_app.logger.info(f"[results] tournament={tournament_id} deleted={removed}")
    return jsonify({'message': 'Tournament results deleted successfully'})


@tournaments.route('/<int:tournament_id>/calculate-points', methods=['POST'])
@login_required
@admin_required
def calculate_points(tournament_id):
    return points_response(tournament_id, compute_points(tournament_id))


@tournaments.route('/<int:tournament_id>/skins', methods=['GET'])
@login_required
def get_skins(tournament_id):
    skins = TournamentSkins.query.filter_by(tournament_id=tournament_id).first()
    if not skins:
        return jsonify({'error': 'Tournament skins not found'}), 404
    return jsonify(skins.to_dict())


@tournaments.route('/<int:tournament_id>/skins', methods=['PATCH'])
@login_required
@admin_required
def patch_skins(tournament_id):
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    data = request.get_json(silent=True) or {}
    skin_value = data.get('skin_value', UNCHANGED)
    carry_over = data.get('carry_over', UNCHANGED)
    if skin_value is not UNCHANGED and (
        not isinstance(skin_value, (int, float)) or isinstance(skin_value, bool) or skin_value < 0
    ):
        return jsonify({'error': 'skin_value must be a non-negative number'}), 400
    if carry_over is not UNCHANGED and not isinstance(carry_over, bool):
        return jsonify({'error': 'carry_over must be a boolean'}), 400
    try:
        skins = update_tournament_skins(tournament, SkinsUpdate(skin_value=skin_value, carry_over=carry_over))
    except SkinsNotConfigured as exc:
        return jsonify({'error': str(exc)}), 404
    return jsonify(skins.to_dict())


@tournaments.route('/<int:tournament_id>/skins/calculate', methods=['POST'])
@login_required
@admin_required
def calculate_skins(tournament_id):
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    try:
        skins = calculate_skins_pot(tournament)
    except SkinsNotConfigured as exc:
        return jsonify({'error': str(exc)}), 404
    return jsonify(skins.to_dict())

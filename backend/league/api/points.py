from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required
from league import socketio
from league.main import admin_required, parse_id
from league.services.scoring import compute_points, NOT_FOUND, PointsResult
from league.services.scoring.skins import set_tournament_skins, skin_winners
from league.services.scoring.standings import league_standings
from league.models import TeamPoints, Tournament, TournamentSkins
from league.socketio_events import LEAGUE_ROOM

points = Blueprint('points', __name__)


def points_response(tournament_id, result: PointsResult):
    """Map an engine result onto an HTTP response and notify connected clients."""
    if not result.success:
        status = 404 if result.error == NOT_FOUND else 500
        current_app.logger.warning(f"[points] tournament={tournament_id} failed: {result.message}")
        return jsonify({'error': result.message}), status
    socketio.emit('points_update', {
        'tournament_id': tournament_id,
        'points_calculated': result.points_calculated,
        'skins_awarded': result.skins_awarded,
    }, to=LEAGUE_ROOM, namespace='/ws')
    return jsonify({
        'message': result.message,
        'points_calculated': result.points_calculated,
        'skins_awarded': result.skins_awarded,
    }), 200


@points.route('/points/calculate', methods=['POST'])
@login_required
@admin_required
def calculate_points():
    data = request.get_json(silent=True) or {}
    try:
        tournament_id = parse_id(data.get('tournament_id'), 'Tournament ID')
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return points_response(tournament_id, compute_points(tournament_id))


@points.route('/points', methods=['GET'])
@login_required
def list_points():
    query = TeamPoints.query
    tournament_id = request.args.get('tournament_id', type=int)
    if tournament_id is not None:
        query = query.filter_by(tournament_id=tournament_id)
    rows = query.order_by(TeamPoints.tournament_id, TeamPoints.points.desc()).all()
    return jsonify([tp.to_dict() for tp in rows])


@points.route('/standings', methods=['GET'])
@login_required
def standings():
    return jsonify(league_standings())


@points.route('/skins', methods=['GET'])
@login_required
def list_skins():
    query = TournamentSkins.query.join(Tournament)
    tournament_id = request.args.get('tournament_id', type=int)
    if tournament_id is not None:
        query = query.filter(TournamentSkins.tournament_id == tournament_id)
    payload = []
    for skins in query.order_by(Tournament.start_date.desc()).all():
        entry = skins.to_dict()
        entry['tournament'] = skins.tournament.to_dict()
        entry['winners'] = skin_winners(skins.tournament_id)
        payload.append(entry)
    return jsonify(payload)


@points.route('/skins', methods=['POST'])
@login_required
@admin_required
def setup_skins():
    data = request.get_json(silent=True) or {}
    try:
        tournament_id = parse_id(data.get('tournament_id'), 'Tournament ID')
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    skin_value = data.get('skin_value', 0)
    if not isinstance(skin_value, (int, float)) or isinstance(skin_value, bool) or skin_value < 0:
        return jsonify({'error': 'Skin value must be a non-negative number'}), 400
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    carry_over = bool(data.get('carry_over', False))
    skins = set_tournament_skins(tournament, skin_value, carry_over)
    return jsonify(skins.to_dict())

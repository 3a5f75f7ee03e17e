from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from league import db
from league.main import admin_required, parse_id
from league.models import Golfer, Team, TeamPoints, Tournament, TournamentLineup, User
from league.services.lineups import (
    DeadlinePassed,
    LineupError,
    add_to_roster,
    clear_lineup,
    lineup_deadline,
    lineup_for,
    remove_from_roster,
    submit_lineup,
)

teams = Blueprint('teams', __name__)


def _team_for_current_user(team_id):
    """Load a team the current user may manage, or an error response."""
    team = Team.query.filter_by(id=team_id).first()
    if not team:
        return None, (jsonify({'error': 'Team not found'}), 404)
    if team.owner_id != current_user.id and not current_user.is_admin:
        return None, (jsonify({'error': 'Forbidden'}), 403)
    return team, None


def _team_payload(team):
    entry = team.to_dict()
    entry['owner_id'] = team.owner_id
    entry['roster'] = [r.golfer.to_dict() for r in team.roster]
    return entry


@teams.route('', methods=['GET'])
@login_required
def list_teams():
    return jsonify([_team_payload(team) for team in Team.query.order_by(Team.name).all()])


@teams.route('', methods=['POST'])
@login_required
@admin_required
def create_team():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    try:
        owner_id = parse_id(data.get('owner_id'), 'Owner ID')
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    if not name:
        return jsonify({'error': 'Team name is required'}), 400
    owner = db.session.get(User, owner_id)
    if not owner:
        return jsonify({'error': 'User not found'}), 404
    if owner.teams:
        return jsonify({'error': 'User already has a team'}), 400
    team = Team(name=name, owner=owner)
    db.session.add(team)
    db.session.commit()
    current_app.logger.info(f"[team] created id={team.id} owner={owner.id}")
    return jsonify(_team_payload(team)), 201


@teams.route('/<int:team_id>', methods=['GET'])
@login_required
def get_team(team_id):
    team, error = _team_for_current_user(team_id)
    if error:
        return error
    return jsonify(_team_payload(team))


@teams.route('/<int:team_id>', methods=['PUT'])
@login_required
@admin_required
def update_team(team_id):
    team = Team.query.filter_by(id=team_id).first()
    if not team:
        return jsonify({'error': 'Team not found'}), 404
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name and data.get('owner_id') is None:
        return jsonify({'error': 'At least one field to update is required'}), 400
    if data.get('owner_id') is not None:
        try:
            owner_id = parse_id(data.get('owner_id'), 'Owner ID')
        except ValueError as exc:
            return jsonify({'error': str(exc)}), 400
        if owner_id != team.owner_id:
            owner = db.session.get(User, owner_id)
            if not owner:
                return jsonify({'error': 'New owner not found'}), 404
            if any(t.id != team.id for t in owner.teams):
                return jsonify({'error': 'User already owns another team'}), 400
            team.owner = owner
    if name:
        team.name = name
    db.session.commit()
    return jsonify(_team_payload(team))


@teams.route('/<int:team_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_team(team_id):
    team = Team.query.filter_by(id=team_id).first()
    if not team:
        return jsonify({'error': 'Team not found'}), 404
    TournamentLineup.query.filter_by(team_id=team.id).delete()
    TeamPoints.query.filter_by(team_id=team.id).delete()
    # roster rows go with the team through the relationship cascade
    db.session.delete(team)
    db.session.commit()
    current_app.logger.info(f"[team] deleted id={team_id}")
    return jsonify({'message': 'Team deleted successfully'})


@teams.route('/<int:team_id>/roster', methods=['GET'])
@login_required
def get_roster(team_id):
    team, error = _team_for_current_user(team_id)
    if error:
        return error
    return jsonify([r.golfer.to_dict() for r in team.roster])


@teams.route('/<int:team_id>/roster', methods=['POST'])
@login_required
@admin_required
def add_roster_golfer(team_id):
    team = Team.query.filter_by(id=team_id).first()
    if not team:
        return jsonify({'error': 'Team not found'}), 404
    data = request.get_json(silent=True) or {}
    try:
        golfer_id = parse_id(data.get('golfer_id'), 'Golfer ID')
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    golfer = db.session.get(Golfer, golfer_id)
    if not golfer:
        return jsonify({'error': 'Golfer not found'}), 404
    try:
        add_to_roster(team, golfer)
    except DeadlinePassed as exc:
        return jsonify({'error': str(exc)}), 403
    except LineupError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify(golfer.to_dict()), 201


@teams.route('/<int:team_id>/roster/<int:golfer_id>', methods=['DELETE'])
@login_required
@admin_required
def remove_roster_golfer(team_id, golfer_id):
    team = Team.query.filter_by(id=team_id).first()
    if not team:
        return jsonify({'error': 'Team not found'}), 404
    try:
        remove_from_roster(team, golfer_id)
    except DeadlinePassed as exc:
        return jsonify({'error': str(exc)}), 403
    except LineupError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify({'message': 'Golfer removed from team roster'})


@teams.route('/<int:team_id>/lineup', methods=['GET'])
@login_required
def get_lineup(team_id):
    team, error = _team_for_current_user(team_id)
    if error:
        return error
    tournament_id = request.args.get('tournament_id', type=int)
    if tournament_id is None:
        return jsonify({'error': 'tournament_id is required'}), 400
    tournament = Tournament.query.filter_by(id=tournament_id).first_or_404()
    return jsonify({
        'team_id': team.id,
        'tournament_id': tournament.id,
        'golfer_ids': lineup_for(team, tournament),
        'deadline': lineup_deadline(tournament).isoformat(),
    })


@teams.route('/<int:team_id>/lineup', methods=['POST'])
@login_required
def post_lineup(team_id):
    team, error = _team_for_current_user(team_id)
    if error:
        return error
    data = request.get_json(silent=True) or {}
    try:
        tournament_id = parse_id(data.get('tournament_id'), 'Tournament ID')
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    golfer_ids = data.get('golfer_ids')
    if not isinstance(golfer_ids, list):
        return jsonify({'error': 'golfer_ids must be a list'}), 400
    tournament = db.session.get(Tournament, tournament_id)
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    try:
        ids = submit_lineup(team, tournament, golfer_ids)
    except DeadlinePassed as exc:
        return jsonify({'error': str(exc)}), 403
    except LineupError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify({'team_id': team.id, 'tournament_id': tournament.id, 'golfer_ids': ids}), 201


@teams.route('/<int:team_id>/lineup', methods=['DELETE'])
@login_required
def delete_lineup(team_id):
    team, error = _team_for_current_user(team_id)
    if error:
        return error
    tournament_id = request.args.get('tournament_id', type=int)
    if tournament_id is None:
        return jsonify({'error': 'tournament_id is required'}), 400
    tournament = db.session.get(Tournament, tournament_id)
    if not tournament:
        return jsonify({'error': 'Tournament not found'}), 404
    try:
        clear_lineup(team, tournament)
    except DeadlinePassed as exc:
        return jsonify({'error': str(exc)}), 403
    return jsonify({'message': 'Lineup removed'})

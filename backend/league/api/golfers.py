from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required
from league import db
from league.main import admin_required
from league.models import Golfer, GolferResult, TeamRoster, TournamentLineup

golfers = Blueprint('golfers', __name__)


@golfers.route('', methods=['GET'])
@login_required
def list_golfers():
    query = Golfer.query
    if request.args.get('active') == 'true':
        query = query.filter_by(is_active=True)
    return jsonify([g.to_dict() for g in query.order_by(Golfer.name).all()])


@golfers.route('', methods=['POST'])
@login_required
@admin_required
def create_golfer():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Golfer name is required'}), 400
    is_active = data.get('is_active', True)
    if not isinstance(is_active, bool):
        return jsonify({'error': 'is_active must be a boolean'}), 400
    golfer = Golfer(name=name, is_active=is_active)
    db.session.add(golfer)
    db.session.commit()
    current_app.logger.info(f"[golfer] created id={golfer.id} name={golfer.name!r}")
    return jsonify(golfer.to_dict()), 201


@golfers.route('/<int:golfer_id>', methods=['GET'])
@login_required
def get_golfer(golfer_id):
    golfer = Golfer.query.filter_by(id=golfer_id).first()
    if not golfer:
        return jsonify({'error': 'Golfer not found'}), 404
    payload = golfer.to_dict()
    payload['teams'] = [
        {'id': r.team.id, 'name': r.team.name}
        for r in TeamRoster.query.filter_by(golfer_id=golfer.id).all()
    ]
    payload['results'] = [r.to_dict() for r in GolferResult.query.filter_by(golfer_id=golfer.id).all()]
    return jsonify(payload)


@golfers.route('/<int:golfer_id>', methods=['PATCH'])
@login_required
@admin_required
def update_golfer(golfer_id):
    golfer = Golfer.query.filter_by(id=golfer_id).first()
    if not golfer:
        return jsonify({'error': 'Golfer not found'}), 404
    data = request.get_json(silent=True) or {}
    if 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            return jsonify({'error': 'Golfer name must not be empty'}), 400
        golfer.name = name
    if 'is_active' in data:
        if not isinstance(data['is_active'], bool):
            return jsonify({'error': 'is_active must be a boolean'}), 400
        golfer.is_active = data['is_active']
    db.session.commit()
    return jsonify(golfer.to_dict())


@golfers.route('/<int:golfer_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_golfer(golfer_id):
    golfer = Golfer.query.filter_by(id=golfer_id).first()
    if not golfer:
        return jsonify({'error': 'Golfer not found'}), 404
    in_use = (
        TeamRoster.query.filter_by(golfer_id=golfer.id).first()
        or TournamentLineup.query.filter_by(golfer_id=golfer.id).first()
        or GolferResult.query.filter_by(golfer_id=golfer.id).first()
    )
    if in_use:
        return jsonify({'error': 'Cannot delete golfer: they are on a roster, in a lineup or have results'}), 400
    db.session.delete(golfer)
    db.session.commit()
    current_app.logger.info(f"[golfer] deleted id={golfer_id}")
    return jsonify({'message': 'Golfer deleted successfully'})

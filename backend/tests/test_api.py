from datetime import datetime, timedelta

from league import db
from league.models import GolferResult, TeamPoints, TournamentLineup, TournamentSkins, Tournament


def _field(flask_app, team_id, tournament_id, golfer_ids):
    with flask_app.app_context():
        for gid in golfer_ids:
            db.session.add(TournamentLineup(team_id=team_id, tournament_id=tournament_id, golfer_id=gid))
        db.session.commit()


def _add(flask_app, *rows):
    with flask_app.app_context():
        db.session.add_all(rows)
        db.session.commit()


def _team_points(flask_app, team_id, tournament_id):
    with flask_app.app_context():
        row = TeamPoints.query.filter_by(team_id=team_id, tournament_id=tournament_id).first()
        return (row.points, row.skin_count) if row else None


def test_login_and_check(client, season):
    res = client.post('/login', json={'email': 'alice@example.com', 'password': 'owner123'})
    assert res.status_code == 200
    assert res.get_json()['user']['role'] == 'OWNER'
    res = client.get('/check_login')
    assert res.get_json()['user']['email'] == 'alice@example.com'


def test_login_rejects_bad_password(client, season):
    res = client.post('/login', json={'email': 'alice@example.com', 'password': 'nope'})
    assert res.status_code == 401


def test_calculate_requires_admin(client, owner_client, season):
    url = f'/api/tournaments/{season.tournament_id}/calculate-points'
    assert client.post(url).status_code == 401
    assert owner_client.post(url).status_code == 403


def test_calculate_points_end_to_end(flask_app, admin_client, season):
    g = season.golfer_ids
    with flask_app.app_context():
        db.session.get(Tournament, season.tournament_id).is_major = True
        db.session.commit()
    _add(
        flask_app,
        GolferResult(tournament_id=season.tournament_id, golfer_id=g[0], position=1, skin_count=2),
        GolferResult(tournament_id=season.tournament_id, golfer_id=g[4], position=2, is_cut=True),
    )
    _field(flask_app, season.team_a_id, season.tournament_id, g[:4])
    _field(flask_app, season.team_b_id, season.tournament_id, g[4:])

    res = admin_client.post(f'/api/tournaments/{season.tournament_id}/calculate-points')

    assert res.status_code == 200
    body = res.get_json()
    assert body['points_calculated'] == 330
    assert body['skins_awarded'] == 2
    assert _team_points(flask_app, season.team_a_id, season.tournament_id) == (200, 2)
    assert _team_points(flask_app, season.team_b_id, season.tournament_id) == (130, 0)


def test_calculate_points_is_idempotent(flask_app, admin_client, season):
    g = season.golfer_ids
    _add(flask_app, GolferResult(tournament_id=season.tournament_id, golfer_id=g[1], position=6))
    _field(flask_app, season.team_a_id, season.tournament_id, g[:4])

    first = admin_client.post(f'/api/tournaments/{season.tournament_id}/calculate-points').get_json()
    second = admin_client.post(f'/api/tournaments/{season.tournament_id}/calculate-points').get_json()

    assert first == second
    with flask_app.app_context():
        assert TeamPoints.query.filter_by(tournament_id=season.tournament_id).count() == 1
    assert _team_points(flask_app, season.team_a_id, season.tournament_id) == (20, 0)


def test_team_without_lineup_gets_no_points_row(flask_app, admin_client, season):
    _field(flask_app, season.team_a_id, season.tournament_id, season.golfer_ids[:4])
    admin_client.post(f'/api/tournaments/{season.tournament_id}/calculate-points')
    assert _team_points(flask_app, season.team_b_id, season.tournament_id) is None
    assert _team_points(flask_app, season.team_a_id, season.tournament_id) == (0, 0)


def test_calculate_unknown_tournament(admin_client, season):
    res = admin_client.post('/api/tournaments/9999/calculate-points')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Tournament not found'


def test_points_calculate_by_body(admin_client, season):
    assert admin_client.post('/api/points/calculate', json={}).status_code == 400
    assert admin_client.post('/api/points/calculate', json={'tournament_id': 9999}).status_code == 404
    res = admin_client.post('/api/points/calculate', json={'tournament_id': season.tournament_id})
    assert res.status_code == 200
    assert res.get_json()['message'] == 'Points calculated successfully'


def test_no_skins_marks_carry_over(flask_app, admin_client, season):
    _add(flask_app, GolferResult(tournament_id=season.tournament_id, golfer_id=season.golfer_ids[0], position=1))
    admin_client.post(f'/api/tournaments/{season.tournament_id}/calculate-points')
    with flask_app.app_context():
        skins = TournamentSkins.query.filter_by(tournament_id=season.tournament_id).first()
        assert skins.carry_over is True


def test_save_results_recalculates(flask_app, admin_client, season):
    g = season.golfer_ids
    _field(flask_app, season.team_a_id, season.tournament_id, g[:4])
    res = admin_client.post(f'/api/tournaments/{season.tournament_id}/results', json={'results': [
        {'golfer_id': g[0], 'position': 4, 'skin_count': 1},
        {'golfer_id': g[1], 'position': None, 'is_cut': True},
    ]})
    assert res.status_code == 200
    body = res.get_json()
    assert body['points_calculated'] == 30
    assert body['skins_awarded'] == 1
    assert len(body['results']) == 2

    # posting again updates rather than duplicates
    res = admin_client.post(f'/api/tournaments/{season.tournament_id}/results', json={'results': [
        {'golfer_id': g[0], 'position': 1},
    ]})
    assert res.get_json()['points_calculated'] == 90
    with flask_app.app_context():
        assert GolferResult.query.filter_by(tournament_id=season.tournament_id).count() == 2


def test_save_results_validation(admin_client, season):
    url = f'/api/tournaments/{season.tournament_id}/results'
    assert admin_client.post(url, json={'results': 'x'}).status_code == 400
    assert admin_client.post(url, json={'results': [{'position': 1}]}).status_code == 400
    assert admin_client.post(url, json={'results': [{'golfer_id': season.golfer_ids[0], 'position': 0}]}).status_code == 400
    res = admin_client.post(url, json={'results': [{'golfer_id': 9999, 'position': 1}]})
    assert res.status_code == 400
    assert 'Unknown golfers' in res.get_json()['error']


def test_get_results_orders_by_position(flask_app, owner_client, season):
    g = season.golfer_ids
    _add(
        flask_app,
        GolferResult(tournament_id=season.tournament_id, golfer_id=g[0], position=None),
        GolferResult(tournament_id=season.tournament_id, golfer_id=g[1], position=9),
        GolferResult(tournament_id=season.tournament_id, golfer_id=g[2], position=2),
    )
    rows = owner_client.get(f'/api/tournaments/{season.tournament_id}/results').get_json()
    assert [r['position'] for r in rows] == [2, 9, None]


def test_create_tournament_keeps_single_active(flask_app, admin_client, season):
    payload = {
        'name': 'US Open',
        'start_date': '2026-06-18T00:00:00',
        'end_date': '2026-06-21T00:00:00',
        'is_major': True,
        'is_active': True,
    }
    res = admin_client.post('/api/tournaments', json=payload)
    assert res.status_code == 201
    assert res.get_json()['is_major'] is True
    assert admin_client.post('/api/tournaments', json=dict(payload, name='Open Championship')).status_code == 201
    with flask_app.app_context():
        active = Tournament.query.filter_by(is_active=True).all()
        assert [t.name for t in active] == ['Open Championship']
    assert admin_client.post('/api/tournaments', json={'name': 'x', 'start_date': 'soon'}).status_code == 400


def test_patch_skins_partial(admin_client, season):
    url = f'/api/tournaments/{season.tournament_id}/skins'
    res = admin_client.patch(url, json={'carry_over': True})
    assert res.status_code == 200
    assert res.get_json() == {'tournament_id': season.tournament_id, 'skin_value': 70, 'carry_over': True}
    res = admin_client.patch(url, json={'skin_value': 25})
    assert res.get_json()['carry_over'] is True
    assert res.get_json()['skin_value'] == 25
    assert admin_client.patch(url, json={'carry_over': 'yes'}).status_code == 400


def test_skins_pot_from_participating_teams(flask_app, admin_client, season):
    _field(flask_app, season.team_a_id, season.tournament_id, season.golfer_ids[:4])
    _field(flask_app, season.team_b_id, season.tournament_id, season.golfer_ids[4:])
    res = admin_client.post(f'/api/tournaments/{season.tournament_id}/skins/calculate')
    assert res.status_code == 200
    assert res.get_json()['skin_value'] == 20

    admin_client.patch(f'/api/tournaments/{season.tournament_id}/skins', json={'carry_over': True})
    res = admin_client.post(f'/api/tournaments/{season.tournament_id}/skins/calculate')
    assert res.get_json()['skin_value'] == 40


def test_setup_skins_folds_in_previous_carry_over(flask_app, admin_client, season):
    with flask_app.app_context():
        start = db.session.get(Tournament, season.tournament_id).start_date
        prev = Tournament(name='Previous', start_date=start - timedelta(days=7), end_date=start - timedelta(days=4))
        older = Tournament(name='Older', start_date=start - timedelta(days=14), end_date=start - timedelta(days=11))
        db.session.add_all([prev, older])
        db.session.flush()
        db.session.add(TournamentSkins(tournament_id=prev.id, skin_value=30, carry_over=True))
        db.session.add(TournamentSkins(tournament_id=older.id, skin_value=99, carry_over=True))
        db.session.commit()

    res = admin_client.post('/api/skins', json={
        'tournament_id': season.tournament_id, 'skin_value': 70, 'carry_over': True,
    })
    assert res.status_code == 200
    assert res.get_json()['skin_value'] == 100

    res = admin_client.post('/api/skins', json={
        'tournament_id': season.tournament_id, 'skin_value': 70, 'carry_over': False,
    })
    assert res.get_json() == {'tournament_id': season.tournament_id, 'skin_value': 70, 'carry_over': False}


def test_list_skins_includes_winners(flask_app, owner_client, season):
    g = season.golfer_ids
    _field(flask_app, season.team_a_id, season.tournament_id, g[:4])
    _add(flask_app, GolferResult(tournament_id=season.tournament_id, golfer_id=g[2], position=11, skin_count=3))
    rows = owner_client.get('/api/skins').get_json()
    assert len(rows) == 1
    winners = rows[0]['winners']
    assert winners[0]['golfer_id'] == g[2]
    assert winners[0]['teams'] == [{'id': season.team_a_id, 'name': 'Team A'}]


def test_standings(flask_app, admin_client, season):
    with flask_app.app_context():
        second = Tournament(name='Second', start_date=datetime(2000, 5, 1), end_date=datetime(2000, 5, 4))
        db.session.add(second)
        db.session.flush()
        db.session.add_all([
            TeamPoints(team_id=season.team_a_id, tournament_id=season.tournament_id, points=50, skin_count=1),
            TeamPoints(team_id=season.team_a_id, tournament_id=second.id, points=25, skin_count=0),
            TeamPoints(team_id=season.team_b_id, tournament_id=second.id, points=100, skin_count=2),
        ])
        db.session.commit()

    rows = admin_client.get('/api/standings').get_json()

    assert [r['name'] for r in rows] == ['Team B', 'Team A']
    team_a = rows[1]
    assert team_a['total_points'] == 75
    assert team_a['total_skins'] == 1
    assert team_a['tournament_count'] == 2
    assert team_a['average_points'] == 37.5
    assert [t['tournament_name'] for t in team_a['tournaments']] == ['Second', 'The Memorial']


def test_submit_lineup(owner_client, season):
    url = f'/api/teams/{season.team_a_id}/lineup'
    res = owner_client.post(url, json={'tournament_id': season.tournament_id, 'golfer_ids': season.golfer_ids[:4]})
    assert res.status_code == 201
    res = owner_client.get(f'{url}?tournament_id={season.tournament_id}')
    assert res.get_json()['golfer_ids'] == season.golfer_ids[:4]


def test_submit_lineup_rules(owner_client, season):
    url = f'/api/teams/{season.team_a_id}/lineup'
    # three golfers
    res = owner_client.post(url, json={'tournament_id': season.tournament_id, 'golfer_ids': season.golfer_ids[:3]})
    assert res.status_code == 400
    # golfer from another team's roster
    res = owner_client.post(url, json={'tournament_id': season.tournament_id, 'golfer_ids': season.golfer_ids[1:5]})
    assert res.status_code == 400
    # someone else's team
    res = owner_client.post(f'/api/teams/{season.team_b_id}/lineup',
                            json={'tournament_id': season.tournament_id, 'golfer_ids': season.golfer_ids[4:]})
    assert res.status_code == 403


def test_submit_lineup_after_deadline(flask_app, owner_client, season):
    with flask_app.app_context():
        tournament = db.session.get(Tournament, season.tournament_id)
        tournament.start_date = datetime.now() - timedelta(days=10)
        tournament.end_date = datetime.now() - timedelta(days=7)
        db.session.commit()
    res = owner_client.post(f'/api/teams/{season.team_a_id}/lineup',
                            json={'tournament_id': season.tournament_id, 'golfer_ids': season.golfer_ids[:4]})
    assert res.status_code == 403

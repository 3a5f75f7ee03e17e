import os
import sys
from datetime import datetime, timedelta
from types import SimpleNamespace
import pytest

# Ensure the backend root (containing the `league` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from league import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    SKINS_BUY_IN = 10.0
    SKINS_CARRY_OVER_LOOKBACK = 5
    LINEUP_SIZE = 4
    ROSTER_MAX = 12


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    # No app context stays pushed; each request gets its own
    with application.app_context():
        # Ensure models are imported so tables are created
        import league.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def season(flask_app):
    """Admin, two owners with teams, eight rostered golfers and an upcoming tournament."""
    from league.models import (
        User, Team, Golfer, TeamRoster, Tournament, TournamentSkins, ROLE_ADMIN, ROLE_OWNER,
    )
    with flask_app.app_context():
        admin = User(email='admin@example.com', name='Admin', role=ROLE_ADMIN)
        admin.set_password('admin123')
        alice = User(email='alice@example.com', name='Alice', role=ROLE_OWNER)
        alice.set_password('owner123')
        bob = User(email='bob@example.com', name='Bob', role=ROLE_OWNER)
        bob.set_password('owner123')
        team_a = Team(name='Team A', owner=alice)
        team_b = Team(name='Team B', owner=bob)
        golfers = [Golfer(name=f'Golfer {i}') for i in range(1, 9)]
        db.session.add_all([admin, alice, bob, team_a, team_b] + golfers)
        for golfer in golfers[:4]:
            db.session.add(TeamRoster(team=team_a, golfer=golfer))
        for golfer in golfers[4:]:
            db.session.add(TeamRoster(team=team_b, golfer=golfer))

        start = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=8)
        tournament = Tournament(name='The Memorial', start_date=start, end_date=start + timedelta(days=3))
        db.session.add(tournament)
        db.session.add(TournamentSkins(tournament=tournament, skin_value=70, carry_over=False))
        db.session.commit()
        return SimpleNamespace(
            admin_id=admin.id,
            alice_id=alice.id,
            bob_id=bob.id,
            team_a_id=team_a.id,
            team_b_id=team_b.id,
            golfer_ids=[g.id for g in golfers],
            tournament_id=tournament.id,
        )


def _login(flask_app, email, password):
    test_client = flask_app.test_client()
    res = test_client.post('/login', json={'email': email, 'password': password})
    assert res.status_code == 200
    return test_client


@pytest.fixture()
def admin_client(flask_app, season):
    return _login(flask_app, 'admin@example.com', 'admin123')


@pytest.fixture()
def owner_client(flask_app, season):
    return _login(flask_app, 'alice@example.com', 'owner123')


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass

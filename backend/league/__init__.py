from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from datetime import datetime, timedelta
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from league.main import main
    flask_app.register_blueprint(main)

    from league.api.tournaments import tournaments
    flask_app.register_blueprint(tournaments, url_prefix='/api/tournaments')

    from league.api.points import points
    flask_app.register_blueprint(points, url_prefix='/api')

    from league.api.teams import teams
    flask_app.register_blueprint(teams, url_prefix='/api/teams')

    from league.api.golfers import golfers
    flask_app.register_blueprint(golfers, url_prefix='/api/golfers')

    from league.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from league.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Unauthorized'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            seed_demo_league()
            print('Database has been reset and seeded!')

    @click.command('calculate-points')
    @click.argument('tournament_id', type=int)
    def calculate_points_command(tournament_id):
        """Recalculate team points and skins for a tournament."""
        from league.services.scoring import compute_points
        with flask_app.app_context():
            result = compute_points(tournament_id)
        if not result.success:
            raise click.ClickException(result.message)
        click.echo(f'Points: {result.points_calculated}  Skins: {result.skins_awarded}')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(calculate_points_command)

    return flask_app


def seed_demo_league():
    """An admin, seven owners with teams, a golfer pool and the next tournament."""
    from league.models import User, Team, Golfer, TeamRoster, Tournament, TournamentSkins, ROLE_ADMIN, ROLE_OWNER

    admin = User(email='admin@golffantasy.com', name='Admin', role=ROLE_ADMIN)
    admin.set_password('admin123')
    db.session.add(admin)

    golfers = [Golfer(name=name) for name in (
        'Scottie Scheffler', 'Rory McIlroy', 'Jon Rahm', 'Xander Schauffele',
        'Collin Morikawa', 'Patrick Cantlay', 'Viktor Hovland', 'Ludvig Aberg',
        'Brooks Koepka', 'Jordan Spieth', 'Justin Thomas', 'Hideki Matsuyama',
        'Tommy Fleetwood', 'Wyndham Clark', 'Max Homa', 'Tony Finau',
        'Sahith Theegala', 'Matt Fitzpatrick', 'Shane Lowry', 'Tyrrell Hatton',
        'Cameron Young', 'Sungjae Im', 'Russell Henley', 'Brian Harman',
        'Keegan Bradley', 'Sam Burns', 'Jason Day', 'Adam Scott',
    )]
    db.session.add_all(golfers)

    for i in range(7):
        owner = User(email=f'owner{i + 1}@golffantasy.com', name=f'Owner {i + 1}', role=ROLE_OWNER)
        owner.set_password('owner123')
        team = Team(name=f'Team {i + 1}', owner=owner)
        db.session.add_all([owner, team])
        for golfer in golfers[i * 4:(i + 1) * 4]:
            db.session.add(TeamRoster(team=team, golfer=golfer))

    start = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=7)
    tournament = Tournament(name='The Players Championship', start_date=start,
                            end_date=start + timedelta(days=3), is_active=True)
    db.session.add(tournament)
    db.session.add(TournamentSkins(tournament=tournament, skin_value=0, carry_over=False))
    db.session.commit()

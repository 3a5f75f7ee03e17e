from league import db, bcrypt
from flask_login import UserMixin

ROLE_ADMIN = 'ADMIN'
ROLE_OWNER = 'OWNER'


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(64), nullable=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(16), nullable=False, default=ROLE_OWNER)  # ADMIN, OWNER
    teams = db.relationship('Team', back_populates='owner')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
        }


class Team(db.Model):
    __tablename__ = 'team'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    owner = db.relationship('User', back_populates='teams')
    roster = db.relationship('TeamRoster', back_populates='team', cascade='all, delete-orphan')
    team_points = db.relationship('TeamPoints', back_populates='team', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'owner': {'name': self.owner.name, 'email': self.owner.email} if self.owner else None,
        }


class Golfer(db.Model):
    __tablename__ = 'golfer'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'is_active': self.is_active}


class TeamRoster(db.Model):
    """Season-long pool of golfers a team can draw lineups from."""
    __tablename__ = 'team_roster'
    __table_args__ = (db.UniqueConstraint('team_id', 'golfer_id', name='uq_team_roster_team_golfer'),)
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('team.id'), nullable=False)
    golfer_id = db.Column(db.Integer, db.ForeignKey('golfer.id'), nullable=False)
    team = db.relationship('Team', back_populates='roster')
    golfer = db.relationship('Golfer')


class Tournament(db.Model):
    __tablename__ = 'tournament'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    is_major = db.Column(db.Boolean, default=False, nullable=False)
    is_wgc = db.Column(db.Boolean, default=False, nullable=False)
    is_match_play = db.Column(db.Boolean, default=False, nullable=False)
    # At most one tournament is active; routes clear the flag on the others
    is_active = db.Column(db.Boolean, default=False, nullable=False)
    golfer_results = db.relationship('GolferResult', back_populates='tournament', lazy='dynamic')
    lineups = db.relationship('TournamentLineup', back_populates='tournament', lazy='dynamic')
    skins = db.relationship('TournamentSkins', back_populates='tournament', uselist=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'is_major': self.is_major,
            'is_wgc': self.is_wgc,
            'is_match_play': self.is_match_play,
            'is_active': self.is_active,
        }


class GolferResult(db.Model):
    __tablename__ = 'golfer_result'
    __table_args__ = (db.UniqueConstraint('tournament_id', 'golfer_id', name='uq_golfer_result_tournament_golfer'),)
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False, index=True)
    golfer_id = db.Column(db.Integer, db.ForeignKey('golfer.id'), nullable=False)
    position = db.Column(db.Integer, nullable=True)  # null: no recorded finish
    is_cut = db.Column(db.Boolean, default=False, nullable=False)
    is_wd = db.Column(db.Boolean, default=False, nullable=False)
    match_play_wins = db.Column(db.Integer, default=0, nullable=False)
    earnings = db.Column(db.Float, default=0, nullable=False)
    fedex_points = db.Column(db.Float, default=0, nullable=False)
    skin_count = db.Column(db.Integer, default=0, nullable=False)
    tournament = db.relationship('Tournament', back_populates='golfer_results')
    golfer = db.relationship('Golfer')

    def to_dict(self):
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'golfer_id': self.golfer_id,
            'golfer': self.golfer.name if self.golfer else None,
            'position': self.position,
            'is_cut': self.is_cut,
            'is_wd': self.is_wd,
            'match_play_wins': self.match_play_wins,
            'earnings': self.earnings,
            'fedex_points': self.fedex_points,
            'skin_count': self.skin_count,
        }


class TournamentLineup(db.Model):
    __tablename__ = 'tournament_lineup'
    __table_args__ = (
        db.UniqueConstraint('team_id', 'tournament_id', 'golfer_id', name='uq_lineup_team_tournament_golfer'),
    )
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('team.id'), nullable=False)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False, index=True)
    golfer_id = db.Column(db.Integer, db.ForeignKey('golfer.id'), nullable=False)
    team = db.relationship('Team')
    tournament = db.relationship('Tournament', back_populates='lineups')
    golfer = db.relationship('Golfer')


class TeamPoints(db.Model):
    __tablename__ = 'team_points'
    __table_args__ = (db.UniqueConstraint('team_id', 'tournament_id', name='uq_team_points_team_tournament'),)
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('team.id'), nullable=False)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False)
    points = db.Column(db.Integer, default=0, nullable=False)
    skin_count = db.Column(db.Integer, default=0, nullable=False)
    team = db.relationship('Team', back_populates='team_points')
    tournament = db.relationship('Tournament')

    def to_dict(self):
        return {
            'team_id': self.team_id,
            'tournament_id': self.tournament_id,
            'points': self.points,
            'skin_count': self.skin_count,
        }


class TournamentSkins(db.Model):
    __tablename__ = 'tournament_skins'
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), unique=True, nullable=False)
    skin_value = db.Column(db.Float, default=0, nullable=False)
    carry_over = db.Column(db.Boolean, default=False, nullable=False)
    tournament = db.relationship('Tournament', back_populates='skins')

    def to_dict(self):
        return {
            'tournament_id': self.tournament_id,
            'skin_value': self.skin_value,
            'carry_over': self.carry_over,
        }

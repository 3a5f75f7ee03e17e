"""create league schema: users, teams, golfers, tournaments, results, lineups, points, skins

Revision ID: 4c2e9a1f7b3d
Revises:
Create Date: 2025-03-02 10:12:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2e9a1f7b3d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=True),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='OWNER'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'golfer',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'team',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'team_roster',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.Integer(), nullable=False),
        sa.Column('golfer_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['golfer_id'], ['golfer.id']),
        sa.ForeignKeyConstraint(['team_id'], ['team.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('team_id', 'golfer_id', name='uq_team_roster_team_golfer'),
    )

    op.create_table(
        'tournament',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('is_major', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_wgc', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_match_play', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'golfer_result',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('golfer_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=True),
        sa.Column('is_cut', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_wd', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('match_play_wins', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('earnings', sa.Float(), nullable=False, server_default='0'),
        sa.Column('fedex_points', sa.Float(), nullable=False, server_default='0'),
        sa.Column('skin_count', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['golfer_id'], ['golfer.id']),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournament.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tournament_id', 'golfer_id', name='uq_golfer_result_tournament_golfer'),
    )
    op.create_index(op.f('ix_golfer_result_tournament_id'), 'golfer_result', ['tournament_id'], unique=False)

    op.create_table(
        'tournament_lineup',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('golfer_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['golfer_id'], ['golfer.id']),
        sa.ForeignKeyConstraint(['team_id'], ['team.id']),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournament.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('team_id', 'tournament_id', 'golfer_id', name='uq_lineup_team_tournament_golfer'),
    )
    op.create_index(op.f('ix_tournament_lineup_tournament_id'), 'tournament_lineup', ['tournament_id'], unique=False)

    op.create_table(
        'team_points',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('skin_count', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['team_id'], ['team.id']),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournament.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('team_id', 'tournament_id', name='uq_team_points_team_tournament'),
    )

    op.create_table(
        'tournament_skins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('skin_value', sa.Float(), nullable=False, server_default='0'),
        sa.Column('carry_over', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournament.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tournament_id'),
    )


def downgrade():
    op.drop_table('tournament_skins')
    op.drop_table('team_points')
    op.drop_index(op.f('ix_tournament_lineup_tournament_id'), table_name='tournament_lineup')
    op.drop_table('tournament_lineup')
    op.drop_index(op.f('ix_golfer_result_tournament_id'), table_name='golfer_result')
    op.drop_table('golfer_result')
    op.drop_table('tournament')
    op.drop_table('team_roster')
    op.drop_table('team')
    op.drop_table('golfer')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_table('user')

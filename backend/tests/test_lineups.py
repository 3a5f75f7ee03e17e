from datetime import datetime
from types import SimpleNamespace

import pytest

from league.services.lineups import (
    DeadlinePassed,
    LineupError,
    can_modify_lineup,
    can_modify_roster,
    lineup_deadline,
    next_deadline,
    roster_deadline,
    roster_lock,
    validate_lineup,
)


def tournament_starting(start):
    return SimpleNamespace(start_date=start)


class TestDeadlines:
    def test_thursday_start(self):
        # Thursday 2026-04-09
        t = tournament_starting(datetime(2026, 4, 9, 0, 0))
        assert lineup_deadline(t) == datetime(2026, 4, 9, 7, 0)
        assert roster_deadline(t) == datetime(2026, 4, 7, 19, 0)

    def test_wednesday_start_uses_same_week(self):
        t = tournament_starting(datetime(2026, 3, 25, 12, 30))
        assert lineup_deadline(t) == datetime(2026, 3, 26, 7, 0)

    def test_sunday_start_opens_its_week(self):
        t = tournament_starting(datetime(2026, 4, 5))
        assert lineup_deadline(t) == datetime(2026, 4, 9, 7, 0)

    def test_can_modify_lineup(self):
        t = tournament_starting(datetime(2026, 4, 9))
        assert can_modify_lineup(t, now=datetime(2026, 4, 9, 6, 59))
        assert not can_modify_lineup(t, now=datetime(2026, 4, 9, 7, 0))

    def test_can_modify_roster(self):
        t = tournament_starting(datetime(2026, 4, 9))
        assert can_modify_roster(t, now=datetime(2026, 4, 7, 18, 59))
        assert not can_modify_roster(t, now=datetime(2026, 4, 7, 19, 0))

    def test_next_deadline(self):
        t = tournament_starting(datetime(2026, 4, 9))
        assert next_deadline(t, now=datetime(2026, 4, 6)) == ('roster', datetime(2026, 4, 7, 19, 0))
        assert next_deadline(t, now=datetime(2026, 4, 8)) == ('lineup', datetime(2026, 4, 9, 7, 0))
        assert next_deadline(t, now=datetime(2026, 4, 9, 8)) == ('tournament_start', datetime(2026, 4, 9))


class TestValidateLineup:
    @pytest.fixture()
    def ctx(self, flask_app, season):
        from league import db
        from league.models import Team, Tournament
        with flask_app.app_context():
            yield SimpleNamespace(
                team=db.session.get(Team, season.team_a_id),
                tournament=db.session.get(Tournament, season.tournament_id),
                golfer_ids=season.golfer_ids,
            )

    def test_valid(self, ctx):
        assert validate_lineup(ctx.team, ctx.tournament, [str(g) for g in ctx.golfer_ids[:4]]) == ctx.golfer_ids[:4]

    def test_duplicates_rejected(self, ctx):
        ids = [ctx.golfer_ids[0]] * 2 + ctx.golfer_ids[1:3]
        with pytest.raises(LineupError, match='exactly 4'):
            validate_lineup(ctx.team, ctx.tournament, ids)

    def test_non_integer_ids(self, ctx):
        with pytest.raises(LineupError):
            validate_lineup(ctx.team, ctx.tournament, ['a', 'b', 'c', 'd'])

    def test_after_deadline(self, ctx):
        late = datetime(2100, 1, 1)
        with pytest.raises(DeadlinePassed):
            validate_lineup(ctx.team, ctx.tournament, ctx.golfer_ids[:4], now=late)


class TestRosterLock:
    def test_locked_between_deadline_and_finish(self, flask_app):
        from league import db
        from league.models import Tournament
        with flask_app.app_context():
            # Thursday 2026-04-09 to Sunday 2026-04-12
            t = Tournament(name='Masters', start_date=datetime(2026, 4, 9), end_date=datetime(2026, 4, 12))
            db.session.add(t)
            db.session.commit()
            assert roster_lock(now=datetime(2026, 4, 7, 12)) is None
            assert roster_lock(now=datetime(2026, 4, 8)).name == 'Masters'
            assert roster_lock(now=datetime(2026, 4, 13)) is None

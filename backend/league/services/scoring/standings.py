from league.models import Team


def league_standings():
    """Season totals per team, best first."""
    standings = []
    for team in Team.query.order_by(Team.id).all():
        rows = team.team_points.all()
        total_points = sum(tp.points for tp in rows)
        total_skins = sum(tp.skin_count for tp in rows)
        count = len(rows)
        standings.append({
            'id': team.id,
            'name': team.name,
            'owner': team.to_dict()['owner'],
            'total_points': total_points,
            'total_skins': total_skins,
            'tournament_count': count,
            'average_points': round(total_points / count, 2) if count else 0,
            'tournaments': [
                {
                    'tournament_id': tp.tournament_id,
                    'tournament_name': tp.tournament.name,
                    'points': tp.points,
                    'skins': tp.skin_count,
                    'date': tp.tournament.start_date.isoformat(),
                }
                for tp in sorted(rows, key=lambda tp: tp.tournament.start_date)
            ],
        })
    standings.sort(key=lambda s: s['total_points'], reverse=True)
    return standings

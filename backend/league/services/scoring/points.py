"""Points rules for a single golfer's tournament result.

Stroke play events pay out by finishing position; match play events pay one
point per match won. Majors double the payout and WGC events multiply it by
1.5, rounded to the nearest point. Missing the cut costs a flat 10 points
after the multiplier.
"""

import math
from typing import Optional

CUT_PENALTY = 10
MAJOR_MULTIPLIER = 2
WGC_MULTIPLIER = 1.5

# (last position in tier, points)
POSITION_TIERS = (
    (1, 100),
    (2, 70),
    (3, 50),
    (4, 40),
    (5, 30),
    (10, 20),
    (15, 10),
    (20, 5),
)


def points_for_position(position: Optional[int]) -> int:
    """Table points for a stroke-play finish. Tied golfers each get the full tier value."""
    if not position or position < 1:
        return 0
    for last, points in POSITION_TIERS:
        if position <= last:
            return points
    return 0


def tournament_multiplier(tournament) -> float:
    if tournament.is_major:
        return MAJOR_MULTIPLIER
    if tournament.is_wgc:
        return WGC_MULTIPLIER
    return 1


def round_half_up(value: float) -> int:
    # 7.5 -> 8, matching how the league has always rounded WGC payouts
    return int(math.floor(value + 0.5))


def golfer_points(tournament, result) -> int:
    """Points one fielded golfer earns for their team.

    The result may go negative when the cut penalty outweighs a small payout.
    """
    if tournament.is_match_play:
        base = result.match_play_wins or 0
    else:
        base = points_for_position(result.position)
    points = round_half_up(base * tournament_multiplier(tournament))
    if result.is_cut:
        points -= CUT_PENALTY
    return points


def lineup_totals(tournament, golfer_ids, results_by_golfer) -> tuple[int, int]:
    """Sum points and skins over a team's lineup.

    Golfers with no recorded result count for nothing.
    """
    points = 0
    skins = 0
    for golfer_id in golfer_ids:
        result = results_by_golfer.get(golfer_id)
        if result is None:
            continue
        points += golfer_points(tournament, result)
        skins += result.skin_count or 0
    return points, skins

"""Badminton doubles match state machine.

Rally scoring to 21 points with a win-by-2 requirement and a 30-point cap,
best of three sets. Every function here works on an in-memory ``Match``
aggregate (match, its sets, both teams and their players) and never touches
the database session; the caller loads the aggregate and commits the result.

Validation always happens before the first mutation, so a raised exception
leaves the aggregate untouched.
"""

import logging
from datetime import date
from typing import Optional, Tuple

from app.exceptions import InvalidState, InvariantViolation, PlayerUnavailable
from app.models.enums import MatchStatus, Side
from app.models.match import Match, MatchSet
from app.models.team import Team

logger = logging.getLogger(__name__)

POINTS_TO_WIN_SET = 21
WIN_BY = 2
MAX_POINTS = 30
SETS_TO_WIN = 2
MAX_SETS = 3
BREAK_AT = 11


def start_match(
    team_a: Team,
    team_b: Team,
    serve_team_is_a: bool,
    start_side: Side,
    match_date: Optional[date] = None,
) -> Match:
    """Create an ongoing match between two teams and book their players.

    Team order is fixed here: ``team_a`` is team A for the lifetime of the
    match. Raises ``PlayerUnavailable`` naming every player that is already
    busy in another ongoing match.
    """

    if team_a is team_b:
        raise InvalidState("a team cannot play against itself")
    for team in (team_a, team_b):
        if len(team.players) != 2:
            raise InvariantViolation(
                f"team '{team.id}' has {len(team.players)} players, expected 2"
            )

    busy = [p for team in (team_a, team_b) for p in team.players if p.busy]
    if busy:
        raise PlayerUnavailable(busy)

    match = Match(
        match_date=match_date or date.today(),
        team_a=team_a,
        team_b=team_b,
        serving_team=team_a if serve_team_is_a else team_b,
        serve_side=Side(start_side),
        status=MatchStatus.ONGOING,
    )
    match.sets.append(MatchSet(number=1, points_a=0, points_b=0))

    for team in (team_a, team_b):
        for player in team.players:
            player.busy = True

    return match


def current_set(match: Match) -> MatchSet:
    """Return the set with the highest number, whatever the list order."""

    latest = None
    for s in match.sets:
        if latest is None or s.number > latest.number:
            latest = s
    if latest is None:
        raise InvariantViolation(f"match '{match.id}' has no sets")
    return latest


def is_set_finished(match_set: MatchSet) -> bool:
    a, b = match_set.points_a, match_set.points_b
    top = max(a, b)
    if top >= POINTS_TO_WIN_SET and abs(a - b) >= WIN_BY:
        return True
    return top >= MAX_POINTS


def sets_won(match: Match) -> Tuple[int, int]:
    """Count finished sets won by team A and team B."""

    won_a = won_b = 0
    for s in match.sets:
        if not is_set_finished(s):
            continue
        if s.points_a > s.points_b:
            won_a += 1
        elif s.points_b > s.points_a:
            won_b += 1
    return won_a, won_b


def award_point(match: Match, for_team_a: bool) -> Match:
    """Score one rally for team A (``for_team_a``) or team B."""

    team_a, team_b = _playing_teams(match)
    active = current_set(match)

    if for_team_a:
        active.points_a += 1
    else:
        active.points_b += 1

    _apply_serve_transition(match, team_a if for_team_a else team_b, active, for_team_a)
    _check_set_and_match_end(match, active)
    return match


def undo_last_point(match: Match, for_team_a: bool) -> Match:
    """Take one point back from a team in the current set.

    Only valid inside a set: set and match completion are never reversed.
    A team already at zero is left alone.
    """

    team_a, team_b = _playing_teams(match)
    active = current_set(match)

    if for_team_a:
        if active.points_a == 0:
            return match
        active.points_a -= 1
    else:
        if active.points_b == 0:
            return match
        active.points_b -= 1

    team = team_a if for_team_a else team_b
    # Assumes the undone point was scored while serving; a point that won
    # the serve back is reversed the same way.
    if match.serving_team is team:
        _swap_positions(team)
        if match.serve_side is not None:
            match.serve_side = match.serve_side.invert()
    return match


def abort_match(match: Match, team_a_forfeits: bool) -> Match:
    """End an ongoing match early; the other team wins by forfeit."""

    team_a, team_b = _playing_teams(match)

    match.winning_team = team_b if team_a_forfeits else team_a
    match.status = MatchStatus.FORFEITED
    _release_players(match)
    return match


def is_break_recommended(match: Match) -> bool:
    active = current_set(match)
    return max(active.points_a, active.points_b) >= BREAK_AT


def set_serve_side(match: Match, side: Side) -> Match:
    """Manual override of the recommended serve side."""

    _require_ongoing(match)
    match.serve_side = Side(side)
    return match


def _require_ongoing(match: Match) -> None:
    if match.status != MatchStatus.ONGOING:
        raise InvalidState(
            f"match '{match.id}' is not ongoing (status: {match.status.value})"
        )


def _playing_teams(match: Match) -> Tuple[Team, Team]:
    _require_ongoing(match)
    teams = match.teams
    if len(teams) != 2:
        raise InvariantViolation(
            f"match '{match.id}' has {len(teams)} teams, expected 2"
        )
    return teams[0], teams[1]


def _apply_serve_transition(
    match: Match, scorer: Team, active: MatchSet, for_team_a: bool
) -> None:
    if match.serving_team is None:
        match.serving_team = scorer

    if match.serving_team is scorer:
        _swap_positions(scorer)
        if match.serve_side is not None:
            match.serve_side = match.serve_side.invert()
        return

    # Receiving side won the rally: serve passes over, and the side is a
    # recommendation the scorer may override afterwards.
    match.serving_team = scorer
    points = active.points_a if for_team_a else active.points_b
    match.serve_side = Side.RIGHT if points % 2 == 0 else Side.LEFT


def _check_set_and_match_end(match: Match, active: MatchSet) -> None:
    if not is_set_finished(active):
        return

    logger.debug(
        "Set %s of match %s finished %s-%s",
        active.number, match.id, active.points_a, active.points_b,
    )

    won_a, won_b = sets_won(match)
    if won_a >= SETS_TO_WIN:
        _declare_winner(match, match.team_a)
        return
    if won_b >= SETS_TO_WIN:
        _declare_winner(match, match.team_b)
        return

    count = len(match.sets)
    if count < MAX_SETS:
        match.sets.append(MatchSet(number=count + 1, points_a=0, points_b=0))


def _declare_winner(match: Match, team: Team) -> None:
    match.winning_team = team
    match.status = MatchStatus.FINISHED
    _release_players(match)


def _swap_positions(team: Team) -> None:
    for player in team.players:
        if player.position is not None:
            player.position = player.position.invert()


def _release_players(match: Match) -> None:
    for team in match.teams:
        for player in team.players:
            player.busy = False

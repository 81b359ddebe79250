"""Team selection simulator.

Projects how a selected group of squad players would score under a given
match format, weather condition and venue type. Everything here is a pure
function of the fetched profiles, courses and rounds plus the current
selection; callers recompute on every selection change.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence

from pydantic import BaseModel, Field

from models.course import Course
from models.profile import Profile
from models.round import Round

from .common import mean, most_recent_first, round_to, valid_rounds

STANDARD_PAR = 72
NINE_HOLE_PAR = 36
VENUE_SPECIALIST_THRESHOLD = 2
FORM_ROUNDS = 3
# Sort key for players without any data.
NO_SCORE = 999


class MatchCondition(str, Enum):
    CALM = "calm"
    WINDY = "windy"
    RAINY = "rainy"


class VenueType(str, Enum):
    LINKS = "links"
    PARKLAND = "parkland"
    HEATH = "heath"
    CLIFFSIDE = "cliffside"


class HomeAway(str, Enum):
    ALL = "all"
    HOME = "home"
    AWAY = "away"


class MatchFormat(str, Enum):
    THREE_HOME = "3_home"
    TWO_HOME = "2_home"
    THREE_AWAY = "3_away"
    TWO_AWAY = "2_away"


class MatchFormatConfig(NamedTuple):
    label: str
    players: int
    home_away: HomeAway


MATCH_FORMAT_CONFIG: Dict[MatchFormat, MatchFormatConfig] = {
    MatchFormat.THREE_HOME: MatchFormatConfig("3 Home Matches", 3, HomeAway.HOME),
    MatchFormat.TWO_HOME: MatchFormatConfig("2 Home Matches", 2, HomeAway.HOME),
    MatchFormat.THREE_AWAY: MatchFormatConfig("3 Away Matches", 3, HomeAway.AWAY),
    MatchFormat.TWO_AWAY: MatchFormatConfig("2 Away Matches", 2, HomeAway.AWAY),
}

# Substrings of the recorded weather that count towards each condition.
CONDITION_KEYWORDS: Dict[MatchCondition, Sequence[str]] = {
    MatchCondition.CALM: ("calm", "sunny", "clear"),
    MatchCondition.WINDY: ("windy", "wind"),
    MatchCondition.RAINY: ("rain", "rainy"),
}


# ================================================================
# Normalization
# ================================================================

def normalize_score(
    total_strokes: int, total_par: Optional[int], holes_played: Optional[int]
) -> float:
    """
    Project a round to an 18-hole equivalent.

    A 9-hole round becomes 72 + 2 * (strokes - par); par falls back to 36.
    Anything else is returned unchanged.
    """
    holes = holes_played or 18
    if holes == 9:
        par = total_par or NINE_HOLE_PAR
        return STANDARD_PAR + (total_strokes - par) * 2
    return total_strokes


def normalize_par(total_par: Optional[int], holes_played: Optional[int]) -> Optional[int]:
    """Par on the same scale as normalize_score: a 9-hole round is measured against 72."""
    if (holes_played or 18) == 9:
        return STANDARD_PAR
    return total_par if total_par and total_par > 0 else None


def normalized_average(rounds: Iterable[Round]) -> Optional[float]:
    scores = [normalize_score(r.total_strokes, r.total_par, r.holes_played) for r in rounds]
    return mean(scores, places=1)


# ================================================================
# Round facets
# ================================================================

def matches_condition(weather: Optional[str], condition: MatchCondition) -> bool:
    text = (weather or "").lower()
    return any(keyword in text for keyword in CONDITION_KEYWORDS[MatchCondition(condition)])


def matches_venue(course_type: Optional[str], venue: VenueType) -> bool:
    return VenueType(venue).value in (course_type or "").lower()


def is_home_round(course_name: Optional[str], home_club: Optional[str]) -> bool:
    """A round is at home when the course name starts with the player's home club."""
    if not home_club:
        return False
    return (course_name or "").startswith(home_club)


# ================================================================
# Per-player projection
# ================================================================

class PlayerProjection(BaseModel):
    """Conditioned averages for one squad player. All averages are normalized."""
    id: str
    name: str
    handicap: Optional[float] = None
    avg_score: Optional[float] = None
    avg_score_to_par: Optional[float] = None
    condition_averages: Dict[MatchCondition, Optional[float]] = Field(default_factory=dict)
    venue_averages: Dict[VenueType, Optional[float]] = Field(default_factory=dict)
    avg_score_home: Optional[float] = None
    avg_score_away: Optional[float] = None
    avg_score_to_par_home: Optional[float] = None
    avg_score_to_par_away: Optional[float] = None
    last3_rounds_avg: Optional[float] = None
    total_rounds: int = 0
    home_rounds: int = 0
    away_rounds: int = 0
    avg_par: float = STANDARD_PAR
    is_venue_specialist: bool = False
    venue_differential: Optional[float] = None

    def condition_average(self, condition: MatchCondition) -> Optional[float]:
        return self.condition_averages.get(MatchCondition(condition))

    def venue_average(self, venue: VenueType) -> Optional[float]:
        return self.venue_averages.get(VenueType(venue))


def _to_par(average: Optional[float]) -> Optional[float]:
    return round_to(average - STANDARD_PAR, 1) if average is not None else None


def player_projection(
    profile: Profile,
    rounds: Iterable[Round],
    courses: Iterable[Course],
    venue: VenueType,
    home_away: HomeAway = HomeAway.ALL,
) -> PlayerProjection:
    """
    Build a player's conditioned averages.

    `rounds` may contain other players' rounds; only the profile's own valid
    rounds are used, in the order given (most recent first is expected for
    the last-3 form figure). The home/away filter scopes overall, condition
    and venue averages; home and away averages always use every round.
    """
    course_index = {c.id: c for c in courses if c.id is not None}
    player_rounds = [r for r in valid_rounds(rounds) if r.user_id == profile.id]

    def course_of(round_obj: Round) -> Optional[Course]:
        return course_index.get(round_obj.course_id)

    def at_home(round_obj: Round) -> bool:
        course = course_of(round_obj)
        return is_home_round(course.name if course else None, profile.home_club)

    home_rounds = [r for r in player_rounds if at_home(r)]
    away_rounds = [r for r in player_rounds if not at_home(r)]
    home_away = HomeAway(home_away)
    if home_away is HomeAway.HOME:
        scoped = home_rounds
    elif home_away is HomeAway.AWAY:
        scoped = away_rounds
    else:
        scoped = player_rounds

    avg_score = normalized_average(scoped)
    avg_score_home = normalized_average(home_rounds)
    avg_score_away = normalized_average(away_rounds)

    pars = [p for p in (normalize_par(r.total_par, r.holes_played) for r in scoped) if p]
    avg_par = mean(pars, places=1) if pars else STANDARD_PAR

    condition_averages = {
        condition: normalized_average(r for r in scoped if matches_condition(r.weather, condition))
        for condition in MatchCondition
    }

    def course_type_of(round_obj: Round) -> Optional[str]:
        course = course_of(round_obj)
        return course.course_type if course else None

    venue_averages = {
        v: normalized_average(r for r in scoped if matches_venue(course_type_of(r), v))
        for v in VenueType
    }

    venue_score = venue_averages[VenueType(venue)]
    venue_differential = (
        round_to(avg_score - venue_score, 1)
        if avg_score is not None and venue_score is not None
        else None
    )

    return PlayerProjection(
        id=profile.id,
        name=profile.display_name,
        handicap=profile.handicap_index,
        avg_score=avg_score,
        avg_score_to_par=_to_par(avg_score),
        condition_averages=condition_averages,
        venue_averages=venue_averages,
        avg_score_home=avg_score_home,
        avg_score_away=avg_score_away,
        avg_score_to_par_home=_to_par(avg_score_home),
        avg_score_to_par_away=_to_par(avg_score_away),
        last3_rounds_avg=normalized_average(scoped[:FORM_ROUNDS]),
        total_rounds=len(scoped),
        home_rounds=len(home_rounds),
        away_rounds=len(away_rounds),
        avg_par=avg_par,
        is_venue_specialist=(
            venue_differential is not None
            and venue_differential >= VENUE_SPECIALIST_THRESHOLD
        ),
        venue_differential=venue_differential,
    )


def squad_projections(
    player_ids: Sequence[str],
    profiles: Iterable[Profile],
    rounds: Iterable[Round],
    courses: Iterable[Course],
    venue: VenueType,
    match_format: MatchFormat,
) -> List[PlayerProjection]:
    """Projections for a squad, best overall average first, players without data last."""
    profile_index = {p.id: p for p in profiles}
    rounds = most_recent_first(rounds)
    courses = list(courses)
    home_away = MATCH_FORMAT_CONFIG[MatchFormat(match_format)].home_away

    projections = [
        player_projection(
            profile_index.get(player_id) or Profile(id=player_id),
            rounds,
            courses,
            venue,
            home_away,
        )
        for player_id in player_ids
    ]
    return sorted(projections, key=lambda p: p.avg_score if p.avg_score is not None else NO_SCORE)


def select_top_players(
    projections: Sequence[PlayerProjection], match_format: MatchFormat
) -> List[str]:
    """Ids of the best-ranked players, as many as the format needs."""
    required = MATCH_FORMAT_CONFIG[MatchFormat(match_format)].players
    return [p.id for p in projections[:required]]


# ================================================================
# Team projection
# ================================================================

ProjectionStrategy = Callable[[PlayerProjection], Optional[float]]


def projection_strategies(venue: VenueType, condition: MatchCondition) -> List[ProjectionStrategy]:
    """Ordered sources for a player's projected score: venue, then weather, then overall."""
    return [
        lambda p: p.venue_average(venue),
        lambda p: p.condition_average(condition),
        lambda p: p.avg_score,
    ]


def first_available(
    player: PlayerProjection, strategies: Sequence[ProjectionStrategy]
) -> Optional[float]:
    """Evaluate strategies in order and return the first non-None value."""
    for strategy in strategies:
        value = strategy(player)
        if value is not None:
            return value
    return None


def best_by(
    players: Sequence[PlayerProjection],
    score: Callable[[PlayerProjection], Optional[float]],
    require: Callable[[PlayerProjection], bool] = lambda p: True,
) -> Optional[PlayerProjection]:
    """Player with the lowest score; players without a score are skipped, ties go to the earlier player."""
    candidates = [p for p in players if score(p) is not None and require(p)]
    if not candidates:
        return None
    return min(candidates, key=score)


class VenueComparison(BaseModel):
    better_venue: VenueType
    worse_venue: VenueType
    difference: float


class TeamProjection(BaseModel):
    """Team-level outcome of a selection. Empty when the selection size is wrong."""
    projected_score: Optional[float] = None
    wind_specialist: Optional[PlayerProjection] = None
    course_specialist: Optional[PlayerProjection] = None
    home_guard: Optional[PlayerProjection] = None
    road_warrior: Optional[PlayerProjection] = None
    current_form: Optional[float] = None
    team_strength: float = 0
    avg_par: float = STANDARD_PAR
    venue_averages: Dict[VenueType, Optional[float]] = Field(default_factory=dict)
    venue_comparison: Optional[VenueComparison] = None


def team_strength(team_avg_score: Optional[float], team_avg_par: Optional[float]) -> float:
    """0-100 meter; 50 is a team averaging exactly par, each stroke over costs 5."""
    if not team_avg_score or not team_avg_par:
        return 50
    return max(0, min(100, 50 - (team_avg_score - team_avg_par) * 5))


def team_venue_average(
    players: Sequence[PlayerProjection], venue: VenueType, required: int
) -> Optional[float]:
    """Mean venue average across the team; needs at least min(2, required) players with data."""
    scores = [p.venue_average(venue) for p in players if p.venue_average(venue) is not None]
    if len(scores) < min(2, required):
        return None
    return mean(scores, places=1)


def compare_venues(
    venue_averages: Dict[VenueType, Optional[float]], selected: VenueType
) -> Optional[VenueComparison]:
    """Contrast the selected venue with the other venue whose team average differs most."""
    selected = VenueType(selected)
    selected_avg = venue_averages.get(selected)
    if selected_avg is None:
        return None

    others = [v for v in VenueType if v is not selected and venue_averages.get(v) is not None]
    if not others:
        return None

    max_diff = 0.0
    comparison = others[0]
    for v in others:
        diff = abs(selected_avg - venue_averages[v])
        if diff > max_diff:
            max_diff = diff
            comparison = v
    if max_diff <= 0:
        return None

    other_avg = venue_averages[comparison]
    if selected_avg < other_avg:
        return VenueComparison(
            better_venue=selected,
            worse_venue=comparison,
            difference=round_to(other_avg - selected_avg, 1),
        )
    return VenueComparison(
        better_venue=comparison,
        worse_venue=selected,
        difference=round_to(selected_avg - other_avg, 1),
    )


def simulate_team(
    players: Sequence[PlayerProjection],
    match_format: MatchFormat,
    condition: MatchCondition,
    venue: VenueType,
) -> TeamProjection:
    """Project a team score and pick out specialists for the selected players."""
    required = MATCH_FORMAT_CONFIG[MatchFormat(match_format)].players
    if len(players) != required:
        return TeamProjection()

    venue = VenueType(venue)
    condition = MatchCondition(condition)
    strategies = projection_strategies(venue, condition)
    projected = [first_available(p, strategies) for p in players]
    valid_scores = [s for s in projected if s is not None]

    # A player with no data at all leaves the team total unknown, never zero.
    complete = len(valid_scores) == required
    projected_score = round_to(sum(valid_scores), 1) if complete else None
    team_avg_score = sum(valid_scores) / required if complete else None
    avg_par = sum(p.avg_par or STANDARD_PAR for p in players) / required

    form = [p.last3_rounds_avg for p in players if p.last3_rounds_avg is not None]
    venue_averages = {v: team_venue_average(players, v, required) for v in VenueType}

    return TeamProjection(
        projected_score=projected_score,
        wind_specialist=best_by(players, lambda p: p.condition_average(MatchCondition.WINDY)),
        course_specialist=best_by(players, lambda p: p.venue_average(venue)),
        home_guard=best_by(players, lambda p: p.avg_score_home, lambda p: p.home_rounds > 0),
        road_warrior=best_by(players, lambda p: p.avg_score_away, lambda p: p.away_rounds > 0),
        current_form=mean(form, places=1),
        team_strength=team_strength(team_avg_score, avg_par),
        avg_par=avg_par,
        venue_averages=venue_averages,
        venue_comparison=compare_venues(venue_averages, venue),
    )

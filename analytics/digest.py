"""Weekly performance digest sent to club admins."""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel, Field

from models.course import Course
from models.profile import Profile
from models.round import Round
from models.squad import Squad, SquadMember

from .common import valid_rounds
from .reports import MONTH_ABBREVIATIONS, UNKNOWN_COURSE, format_display_date

TEMPLATE_DIR = Path(__file__).parent / "templates"
DIGEST_TEMPLATE = "weekly_digest.html"
DIGEST_DAYS = 7
RULE_WIDTH = 50
SECTION_RULE_WIDTH = 20


class PlayerOfTheWeek(BaseModel):
    name: str
    score: int
    course_name: str
    date: str


class SquadStat(BaseModel):
    squad_name: str
    avg_score: float
    rounds_played: int


class WeeklyDigest(BaseModel):
    player_of_the_week: Optional[PlayerOfTheWeek] = None
    squad_stats: List[SquadStat] = Field(default_factory=list)
    total_rounds: int = 0
    week_start: str
    week_end: str

    @property
    def subject(self) -> str:
        return f"PGC Weekly Digest - {self.week_start} to {self.week_end}"


def week_window(today: date) -> Tuple[date, date]:
    """Inclusive (start, end) covering the 7 days up to today."""
    return today - timedelta(days=DIGEST_DAYS), today


def rounds_in_window(rounds: Iterable[Round], start: date, end: date) -> List[Round]:
    return [
        r for r in valid_rounds(rounds)
        if r.date_of_round is not None and start <= r.date_of_round <= end
    ]


def _short_date(value: Optional[date]) -> str:
    if value is None:
        return ""
    return f"{value.day} {MONTH_ABBREVIATIONS[value.month - 1]}"


def player_of_the_week(
    rounds: Iterable[Round],
    profiles: Iterable[Profile],
    courses: Iterable[Course],
) -> Optional[PlayerOfTheWeek]:
    """Lowest gross round of the week; the first one wins a tie. None if its player is unknown."""
    scored = valid_rounds(rounds)
    if not scored:
        return None

    best = min(scored, key=lambda r: r.total_strokes)
    player = next((p for p in profiles if p.id == best.user_id), None)
    if player is None:
        return None
    course = next((c for c in courses if c.id == best.course_id), None)

    return PlayerOfTheWeek(
        name=player.display_name,
        score=best.total_strokes,
        course_name=(course.name if course else None) or UNKNOWN_COURSE,
        date=_short_date(best.date_of_round),
    )


def squad_stats(
    rounds: Iterable[Round],
    squads: Iterable[Squad],
    members: Iterable[SquadMember],
) -> List[SquadStat]:
    """
    Mean score per squad, best first.

    A round counts once for every squad its player belongs to. Squads with
    no rounds are left out.
    """
    squads_by_user: Dict[str, List[str]] = {}
    for member in members:
        squads_by_user.setdefault(member.user_id, []).append(member.squad_id)

    scores_by_squad: Dict[str, List[int]] = {}
    for round_obj in valid_rounds(rounds):
        for squad_id in squads_by_user.get(round_obj.user_id, []):
            scores_by_squad.setdefault(squad_id, []).append(round_obj.total_strokes)

    stats = []
    for squad in squads:
        scores = scores_by_squad.get(squad.id)
        if scores:
            stats.append(SquadStat(
                squad_name=squad.name,
                avg_score=sum(scores) / len(scores),
                rounds_played=len(scores),
            ))
    return sorted(stats, key=lambda s: s.avg_score)


def admin_recipients(profiles: Iterable[Profile]) -> List[Profile]:
    """Admins and super admins with an email address."""
    return [p for p in profiles if p.is_admin and p.email]


def build_weekly_digest(
    rounds: Iterable[Round],
    profiles: Iterable[Profile],
    courses: Iterable[Course],
    squads: Iterable[Squad],
    members: Iterable[SquadMember],
    today: date,
) -> WeeklyDigest:
    start, end = week_window(today)
    week_rounds = rounds_in_window(rounds, start, end)
    return WeeklyDigest(
        player_of_the_week=player_of_the_week(week_rounds, list(profiles), list(courses)),
        squad_stats=squad_stats(week_rounds, squads, members),
        total_rounds=len(week_rounds),
        week_start=format_display_date(start),
        week_end=format_display_date(end),
    )


def _plural_rounds(count: int) -> str:
    return "round" if count == 1 else "rounds"


def render_plain_text(digest: WeeklyDigest) -> str:
    lines = [
        "PGC PERFORMANCE UPDATE",
        f"Weekly Digest: {digest.week_start} - {digest.week_end}",
        "=" * RULE_WIDTH,
        "",
        "PLAYER OF THE WEEK",
        "-" * SECTION_RULE_WIDTH,
    ]
    potw = digest.player_of_the_week
    if potw:
        lines += [potw.name, f"Score: {potw.score}", f"{potw.course_name} - {potw.date}"]
    else:
        lines.append("No rounds recorded this week")
    lines += ["", "SQUAD STATISTICS", "-" * SECTION_RULE_WIDTH]

    if digest.squad_stats:
        for stat in digest.squad_stats:
            lines.append(f"{stat.squad_name}: Avg {stat.avg_score:.1f} ({stat.rounds_played} rounds)")
    else:
        lines.append("No squad activity this week")

    lines += [
        "",
        "WEEKLY ACTIVITY",
        "-" * SECTION_RULE_WIDTH,
        f"{digest.total_rounds} {_plural_rounds(digest.total_rounds)} played this week",
        "",
        "=" * RULE_WIDTH,
        "Portmarnock Golf Club Performance Tracker",
        "This is an automated weekly digest.",
    ]
    return "\n".join(lines) + "\n"


def make_env(template_dir: Path = TEMPLATE_DIR) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(enabled_extensions=('html', 'xml')),
    )


def render_html(digest: WeeklyDigest, template_dir: Path = TEMPLATE_DIR) -> str:
    tpl = make_env(template_dir).get_template(DIGEST_TEMPLATE)
    return tpl.render(digest=digest, rounds_label=_plural_rounds(digest.total_rounds).capitalize())

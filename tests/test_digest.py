from datetime import date

from analytics.digest import (
    admin_recipients,
    build_weekly_digest,
    player_of_the_week,
    render_html,
    render_plain_text,
    rounds_in_window,
    squad_stats,
    week_window,
)
from models import Course, Profile, Round, Squad, SquadMember

TODAY = date(2026, 3, 10)


def _profiles():
    return [
        Profile(id="p1", full_name="Aoife", email="aoife@example.com", role="Admin"),
        Profile(id="p2", full_name="Brian", email="brian@example.com", role="User"),
        Profile(id="p3", full_name="Ciaran", email=None, role="super admin"),
        Profile(id="p4", full_name="Deirdre", email="d@example.com", role="Super Admin"),
    ]


def _rounds():
    return [
        Round(id="r1", user_id="p1", course_id="c1", date_of_round=date(2026, 3, 9), total_strokes=79),
        Round(id="r2", user_id="p2", course_id="c2", date_of_round=date(2026, 3, 5), total_strokes=74),
        Round(id="r3", user_id="p1", course_id="c1", date_of_round=date(2026, 3, 4), total_strokes=74),
        Round(id="r4", user_id="p2", course_id="c1", date_of_round=date(2026, 2, 20), total_strokes=70),
        Round(id="r5", user_id="p1", course_id="c1", date_of_round=date(2026, 3, 8), total_strokes=0),
    ]


def _squads():
    squads = [Squad(id="s1", name="Senior Cup"), Squad(id="s2", name="Barton Shield"),
              Squad(id="s3", name="Idle")]
    members = [
        SquadMember(squad_id="s1", user_id="p1"),
        SquadMember(squad_id="s1", user_id="p2"),
        SquadMember(squad_id="s2", user_id="p2"),
    ]
    return squads, members


def test_week_window():
    assert week_window(TODAY) == (date(2026, 3, 3), TODAY)


def test_rounds_in_window_drops_old_and_invalid_rounds():
    start, end = week_window(TODAY)
    assert [r.id for r in rounds_in_window(_rounds(), start, end)] == ["r1", "r2", "r3"]


def test_player_of_the_week_first_wins_tie():
    courses = [Course(id="c1", name="Portmarnock"), Course(id="c2", name="The Island")]
    potw = player_of_the_week(_rounds()[:3], _profiles(), courses)
    assert potw.name == "Brian"
    assert potw.score == 74
    assert potw.course_name == "The Island"
    assert potw.date == "5 Mar"


def test_player_of_the_week_unknown_player_or_no_rounds():
    assert player_of_the_week([], _profiles(), []) is None
    assert player_of_the_week([Round(user_id="ghost", total_strokes=70)], _profiles(), []) is None


def test_squad_stats_counts_round_once_per_squad():
    squads, members = _squads()
    stats = squad_stats(_rounds()[:3], squads, members)

    assert [s.squad_name for s in stats] == ["Barton Shield", "Senior Cup"]
    assert stats[0].avg_score == 74
    assert stats[0].rounds_played == 1
    assert stats[1].rounds_played == 3
    assert stats[1].avg_score == (79 + 74 + 74) / 3


def test_admin_recipients():
    assert [p.id for p in admin_recipients(_profiles())] == ["p1", "p4"]


def test_build_weekly_digest():
    squads, members = _squads()
    digest = build_weekly_digest(_rounds(), _profiles(), [], squads, members, TODAY)

    assert digest.total_rounds == 3
    assert digest.week_start == "3 Mar 2026"
    assert digest.week_end == "10 Mar 2026"
    assert digest.subject == "PGC Weekly Digest - 3 Mar 2026 to 10 Mar 2026"
    assert digest.player_of_the_week.course_name == "Unknown Course"


def test_render_plain_text():
    squads, members = _squads()
    courses = [Course(id="c2", name="The Island")]
    text = render_plain_text(build_weekly_digest(_rounds(), _profiles(), courses, squads, members, TODAY))

    assert text.startswith("PGC PERFORMANCE UPDATE\nWeekly Digest: 3 Mar 2026 - 10 Mar 2026\n")
    assert "Brian\nScore: 74\nThe Island - 5 Mar\n" in text
    assert "Senior Cup: Avg 75.7 (3 rounds)" in text
    assert "3 rounds played this week" in text
    assert text.endswith("This is an automated weekly digest.\n")


def test_render_plain_text_empty_week():
    digest = build_weekly_digest([], [], [], [], [], TODAY)
    text = render_plain_text(digest)
    assert "No rounds recorded this week" in text
    assert "No squad activity this week" in text
    assert "0 rounds played this week" in text


def test_render_html_escapes_names():
    profiles = [Profile(id="p1", full_name="<b>Eve</b>")]
    rounds = [Round(user_id="p1", date_of_round=TODAY, total_strokes=72)]
    html = render_html(build_weekly_digest(rounds, profiles, [], [], [], TODAY))

    assert "&lt;b&gt;Eve&lt;/b&gt;" in html
    assert "<b>Eve</b>" not in html
    assert "Weekly Digest: 3 Mar 2026 - 10 Mar 2026" in html

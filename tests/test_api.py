from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import (
    get_app_settings,
    get_db,
    get_email_sender,
    get_goal_store,
    get_weather_lookup,
)
from api.main import create_app
from config.settings import Settings
from database.exceptions import DependentRecordsError, DuplicateError
from models import Course, Profile, Role, Round, Squad, SquadMember, WeatherReading
from services.email import NullEmailSender
from services.goal_store import InMemoryGoalStore

PLAYER = Profile(id="u1", full_name="Orla Byrne", email="orla@example.com", role="User",
                 approval_status="approved", handicap_index=12.4)
OTHER = Profile(id="u2", full_name="Cian Doyle", email=None, role="User", approval_status="approved")
ADMIN = Profile(id="a1", full_name="Aoife Kelly", email="aoife@example.com", role="Admin",
                approval_status="approved", handicap_index=4.1)
SUPER = Profile(id="s1", full_name="Sean Ryan", email="sean@example.com", role="Super Admin",
                approval_status="approved")
PROFILES = {p.id: p for p in (PLAYER, OTHER, ADMIN, SUPER)}


def _as(profile):
    return {"X-User-Id": profile.id}


def _fake_db():
    db = MagicMock()
    for repo in ("profiles", "courses", "rounds", "squads", "audit"):
        setattr(db, repo, AsyncMock())
    db.profiles.get_profile.side_effect = lambda user_id: PROFILES.get(user_id)
    db.profiles.list_profiles.return_value = list(PROFILES.values())
    db.rounds.list_rounds.return_value = []
    db.rounds.get_hole_scores.return_value = []
    db.rounds.hole_scores_for_user.return_value = []
    db.courses.list_courses.return_value = []
    db.squads.list_squads.return_value = []
    db.squads.list_members.return_value = []
    return db


@pytest.fixture
def db():
    return _fake_db()


@pytest.fixture
def sender():
    return NullEmailSender()


@pytest.fixture
def weather():
    lookup = MagicMock()
    lookup.fetch.return_value = None
    return lookup


@pytest.fixture
def client(db, sender, weather):
    store = InMemoryGoalStore()
    app = create_app()
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_goal_store] = lambda: store
    app.dependency_overrides[get_email_sender] = lambda: sender
    app.dependency_overrides[get_weather_lookup] = lambda: weather
    app.dependency_overrides[get_app_settings] = lambda: Settings(cron_secret="s3cret")
    return TestClient(app)


# ================================================================
# Identity and role guards
# ================================================================

def test_missing_identity_is_unauthorized(client):
    resp = client.get("/api/users/me")
    assert resp.status_code == 401


def test_unknown_identity_is_unauthorized(client):
    resp = client.get("/api/users/me", headers={"X-User-Id": "nobody"})
    assert resp.status_code == 401


def test_get_me(client):
    resp = client.get("/api/users/me", headers=_as(PLAYER))
    assert resp.status_code == 200
    assert resp.json()["full_name"] == "Orla Byrne"
    assert resp.json()["role"] == "User"


def test_admin_routes_reject_players(client):
    for path in ("/api/users", "/api/reports", "/api/simulator?squad_id=s1"):
        assert client.get(path, headers=_as(PLAYER)).status_code == 403


def test_role_changes_require_super_admin(client):
    resp = client.post("/api/users/u1/promote", headers=_as(ADMIN))
    assert resp.status_code == 403


# ================================================================
# Users
# ================================================================

def test_update_me_duplicate_email(client, db):
    db.profiles.update_profile.side_effect = DuplicateError("taken")
    resp = client.put("/api/users/me", headers=_as(PLAYER), json={"email": "aoife@example.com"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Email already in use"


def test_approve_user_is_audited(client, db):
    db.profiles.set_approval_status.return_value = Profile(**{**OTHER.model_dump(), "approval_status": "approved"})
    resp = client.post("/api/users/u2/approve", headers=_as(ADMIN))

    assert resp.status_code == 200
    actor, action, target, details = db.audit.record.call_args.args
    assert (actor, action, target) == ("a1", "USER_APPROVED", "u2")
    assert details["actor_name"] == "Aoife Kelly"
    assert details["target_user_name"] == "Cian Doyle"


def test_promote_user_to_admin(client, db):
    db.profiles.set_role.return_value = PLAYER.model_copy(update={"role": Role.ADMIN})
    resp = client.post("/api/users/u1/promote", headers=_as(SUPER))

    assert resp.status_code == 200
    assert resp.json()["role"] == "Admin"
    db.profiles.set_role.assert_awaited_once_with("u1", Role.ADMIN)
    details = db.audit.record.call_args.args[3]
    assert details["previous_role"] == "User"
    assert details["new_role"] == "Admin"


def test_super_admin_cannot_be_demoted(client, db):
    for path in ("/api/users/s1/demote", "/api/users/s1/promote"):
        resp = client.post(path, headers=_as(SUPER))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cannot demote a Super Admin"
    db.profiles.set_role.assert_not_called()


def test_promote_super_on_self(client):
    resp = client.post("/api/users/s1/promote-super", headers=_as(SUPER))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "You are already a Super Admin"


def test_unknown_user_is_not_found(client):
    resp = client.get("/api/users/ghost", headers=_as(ADMIN))
    assert resp.status_code == 404


# ================================================================
# Leaderboard and stats
# ================================================================

def test_leaderboard(client, db):
    db.rounds.list_rounds.return_value = [
        Round(id="r1", user_id="u1", date_of_round=date(2026, 3, 2), total_strokes=78),
        Round(id="r2", user_id="u1", date_of_round=date(2026, 3, 1), total_strokes=82),
        Round(id="r3", user_id="a1", date_of_round=date(2026, 3, 3), total_strokes=75),
        Round(id="r4", user_id="u2", date_of_round=date(2026, 3, 3), total_strokes=0),
    ]
    resp = client.get("/api/leaderboard", headers=_as(PLAYER))

    assert resp.status_code == 200
    body = resp.json()
    assert [e["player_id"] for e in body["entries"]] == ["a1", "u1"]
    assert [e["rank"] for e in body["entries"]] == [1, 2]
    assert body["ranked_players"] == 2
    assert body["total_rounds"] == 3
    assert body["best_score"] == 75


def test_rankings(client):
    resp = client.get("/api/rankings", headers=_as(PLAYER))
    body = resp.json()
    assert resp.status_code == 200
    assert body["players"] == 4
    assert body["rankings"][0]["player_id"] == "a1"
    assert body["best_handicap"] == 4.1


def test_player_stats_unknown_player(client):
    resp = client.get("/api/stats/ghost", headers=_as(PLAYER))
    assert resp.status_code == 404


def test_player_chart_unknown_chart(client):
    resp = client.get("/api/stats/u1/charts/pie", headers=_as(PLAYER))
    assert resp.status_code == 404


# ================================================================
# Reports
# ================================================================

def test_report_export_csv(client, db):
    db.rounds.list_rounds.return_value = [
        Round(id="r1", user_id="u1", course_id="c1", date_of_round=date.today() - timedelta(days=2),
              total_strokes=78, total_par=72, weather="Sunny"),
    ]
    db.profiles.get_profiles.return_value = [PLAYER]
    db.courses.list_courses.return_value = [Course(id="c1", name="Portmarnock")]

    resp = client.get("/api/reports/export?days=7", headers=_as(ADMIN))

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert resp.headers["content-disposition"].startswith('attachment; filename="PGC-Report-AllPlayers-')
    lines = resp.text.split("\n")
    assert lines[0] == "Player Name,Date,Course,Score,Par,Weather,Wind (kph),Temp (C)"
    assert lines[1].startswith('"Orla Byrne",')
    assert ',"Portmarnock",78,72,"Sunny",,' in lines[1]


def test_report_summary(client, db):
    db.rounds.list_rounds.return_value = [
        Round(id="r1", user_id="u1", course_id="c1", date_of_round=date.today(), total_strokes=80),
    ]
    db.profiles.get_profiles.return_value = [PLAYER]

    resp = client.get("/api/reports", headers=_as(ADMIN))
    body = resp.json()
    assert resp.status_code == 200
    assert body["insights"]["total_rounds"] == 1
    assert body["rows"][0]["course_name"] == "Unknown Course"


def test_report_rejects_unknown_preset(client):
    resp = client.get("/api/reports?days=45", headers=_as(ADMIN))
    assert resp.status_code == 422


def test_report_unknown_squad(client, db):
    db.squads.get_squad.return_value = None
    resp = client.get("/api/reports?squad_id=nope", headers=_as(ADMIN))
    assert resp.status_code == 404


# ================================================================
# Courses
# ================================================================

def test_create_course_duplicate(client, db):
    db.courses.create_course.side_effect = DuplicateError("exists")
    resp = client.post("/api/courses", headers=_as(ADMIN), json={"name": "The Island"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "A course with this name already exists"


def test_update_course_validates_fields(client, db):
    db.courses.get_course.return_value = Course(id="c1", name="The Island")
    resp = client.put("/api/courses/c1", headers=_as(ADMIN), json={"slope": 300})

    assert resp.status_code == 422
    db.courses.update_course.assert_not_called()


def test_update_course_maps_tee_color(client, db):
    db.courses.get_course.return_value = Course(id="c1", name="The Island")
    db.courses.update_course.return_value = Course(id="c1", name="The Island", tee_color="White")

    resp = client.put("/api/courses/c1", headers=_as(ADMIN), json={"tee_color": "White"})
    assert resp.status_code == 200
    db.courses.update_course.assert_awaited_once_with("c1", tees="White")


def test_delete_course_with_rounds(client, db):
    db.courses.get_course.return_value = Course(id="c1", name="The Island")
    db.courses.delete_course.side_effect = DependentRecordsError("Cannot delete this course.", count=2)

    resp = client.delete("/api/courses/c1", headers=_as(ADMIN))
    assert resp.status_code == 409


# ================================================================
# Rounds
# ================================================================

def _entry(strokes=5):
    return {
        "course_id": "c1",
        "date": "2026-03-14",
        "weather": "Other",
        "holes": [{"hole": i, "par": 4, "strokes": strokes} for i in range(1, 19)],
    }


def test_create_round_with_weather(client, db, weather):
    db.courses.get_course.return_value = Course(id="c1", name="Portmarnock", location="Portmarnock, Dublin")
    db.rounds.create_round.side_effect = lambda r: r.model_copy(update={"id": "r9"})
    weather.fetch.return_value = WeatherReading(weather="Windy", temp_c=9.5, wind_speed_kph=30.0)

    resp = client.post("/api/rounds", headers=_as(PLAYER), json=_entry())

    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == "r9"
    assert body["user_id"] == "u1"
    assert body["course_name"] == "Portmarnock"
    assert body["total_strokes"] == 90
    assert body["score_to_par"] == 18
    assert body["weather"] == "Windy"
    assert body["temp_c"] == 9.5
    weather.fetch.assert_called_once_with(date(2026, 3, 14), "Portmarnock, Dublin")


def test_create_round_unknown_course(client, db):
    db.courses.get_course.return_value = None
    resp = client.post("/api/rounds", headers=_as(PLAYER), json=_entry())
    assert resp.status_code == 404
    db.rounds.create_round.assert_not_called()


@pytest.mark.parametrize("caller, expected", [
    (PLAYER, 204),
    (ADMIN, 204),
    (OTHER, 403),
])
def test_delete_round_permissions(client, db, caller, expected):
    db.rounds.get_round.return_value = Round(id="r1", user_id="u1", total_strokes=80)
    db.rounds.delete_round.return_value = True

    resp = client.delete("/api/rounds/r1", headers=_as(caller))
    assert resp.status_code == expected


# ================================================================
# Goals
# ================================================================

def test_goal_lifecycle(client):
    created = client.post("/api/goals", headers=_as(PLAYER),
                          json={"type": "score_average", "target_value": 78})
    assert created.status_code == 201
    goal_id = created.json()["id"]

    listed = client.get("/api/goals", headers=_as(PLAYER)).json()
    assert [g["id"] for g in listed] == [goal_id]
    assert listed[0]["is_met"] is False

    assert client.get("/api/goals", headers=_as(OTHER)).json() == []
    assert client.delete(f"/api/goals/{goal_id}", headers=_as(PLAYER)).status_code == 204
    assert client.delete(f"/api/goals/{goal_id}", headers=_as(PLAYER)).status_code == 404


def test_goal_rejects_non_positive_target(client):
    resp = client.post("/api/goals", headers=_as(PLAYER), json={"type": "score_average", "target_value": 0})
    assert resp.status_code == 422


# ================================================================
# Weekly digest
# ================================================================

def test_weekly_digest_requires_secret(client):
    assert client.get("/api/digest/weekly").status_code == 401
    assert client.get("/api/digest/weekly", headers={"Authorization": "Bearer wrong"}).status_code == 401


def test_weekly_digest_without_configured_secret(client):
    client.app.dependency_overrides[get_app_settings] = lambda: Settings()
    assert client.get("/api/digest/weekly?secret=s3cret").status_code == 500


def test_weekly_digest_sends_to_admins(client, sender):
    resp = client.post("/api/digest/weekly", headers={"Authorization": "Bearer s3cret"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["recipients"] == 2
    assert body["sent"] == 2
    assert body["message"] == "Weekly digest sent to 2 recipients"
    assert sorted(m["to"] for m in sender.sent) == ["aoife@example.com", "sean@example.com"]


def test_weekly_digest_without_recipients(client, db, sender):
    db.profiles.list_profiles.return_value = [PLAYER]
    resp = client.get("/api/digest/weekly?secret=s3cret")

    assert resp.json()["message"] == "No admin recipients found"
    assert sender.sent == []


def test_test_digest_goes_to_caller_only(client, sender):
    resp = client.post("/api/digest/test", headers=_as(SUPER))
    assert resp.status_code == 200
    assert [m["to"] for m in sender.sent] == ["sean@example.com"]

    assert client.post("/api/digest/test", headers=_as(ADMIN)).status_code == 403


def test_health_without_database_is_degraded(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "degraded", "database": False, "latency_ms": None}


# ================================================================
# Simulator
# ================================================================

def test_simulator_picks_best_players(client, db):
    db.squads.get_squad.return_value = Squad(id="s1", name="Senior Cup")
    db.squads.list_members.return_value = [
        SquadMember(squad_id="s1", user_id="u1"),
        SquadMember(squad_id="s1", user_id="a1"),
    ]
    db.profiles.get_profiles.return_value = [PLAYER, ADMIN]
    db.rounds.list_rounds.return_value = [
        Round(id="r1", user_id="u1", date_of_round=date(2026, 3, 2), total_strokes=80, total_par=72),
        Round(id="r2", user_id="a1", date_of_round=date(2026, 3, 1), total_strokes=74, total_par=72),
    ]

    resp = client.get("/api/simulator?squad_id=s1&format=2_away", headers=_as(ADMIN))

    assert resp.status_code == 200
    body = resp.json()
    assert body["selected"] == ["a1", "u1"]
    assert body["team"]["projected_score"] == 154


def test_simulator_unknown_squad(client, db):
    db.squads.get_squad.return_value = None
    resp = client.get("/api/simulator?squad_id=nope", headers=_as(ADMIN))
    assert resp.status_code == 404


def _squad_of_three(db):
    db.squads.get_squad.return_value = Squad(id="s1", name="Senior Cup")
    db.squads.list_members.return_value = [
        SquadMember(squad_id="s1", user_id=user_id) for user_id in ("u1", "a1", "u2")
    ]
    db.profiles.get_profiles.return_value = [PLAYER, ADMIN, OTHER]
    db.rounds.list_rounds.return_value = [
        Round(id="r1", user_id="u1", date_of_round=date(2026, 3, 2), total_strokes=80, total_par=72),
        Round(id="r2", user_id="a1", date_of_round=date(2026, 3, 1), total_strokes=74, total_par=72),
        Round(id="r3", user_id="u2", date_of_round=date(2026, 3, 1), total_strokes=90, total_par=72),
    ]


def test_simulator_selection_follows_squad_ranking(client, db):
    _squad_of_three(db)
    resp = client.get("/api/simulator?squad_id=s1&format=2_away&selected=u1&selected=a1",
                      headers=_as(ADMIN))

    assert resp.status_code == 200
    assert resp.json()["selected"] == ["a1", "u1"]
    assert resp.json()["team"]["projected_score"] == 154


def test_simulator_ignores_repeated_selection(client, db):
    _squad_of_three(db)
    resp = client.get(
        "/api/simulator?squad_id=s1&format=3_away&selected=u1&selected=u1&selected=a1",
        headers=_as(ADMIN),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["selected"] == ["a1", "u1"]
    assert body["team"]["projected_score"] is None


def test_create_round_rejects_impossible_hole_score(client, db):
    db.courses.get_course.return_value = Course(id="c1", name="Portmarnock", location="Dublin")
    entry = _entry()
    entry["holes"][0]["strokes"] = 21

    resp = client.post("/api/rounds", headers=_as(PLAYER), json=entry)
    assert resp.status_code == 422
    db.rounds.create_round.assert_not_called()

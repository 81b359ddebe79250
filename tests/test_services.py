import smtplib
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from analytics.digest import WeeklyDigest
from models import Profile
from services.email import NullEmailSender, SmtpEmailSender, send_weekly_digest
from services.weather import (
    WeatherLookup,
    fahrenheit_to_celsius,
    map_conditions_to_category,
    mph_to_kph,
    parse_timeline,
)


def _payload(temp=59.0, wind=6.2, conditions="Partially cloudy"):
    return {
        "days": [{
            "temp": 50.0,
            "windspeed": 30.0,
            "conditions": "Rain",
            "hours": [
                {"datetime": "11:00:00", "temp": 55.0, "windspeed": 5.0, "conditions": "Clear"},
                {"datetime": "12:00:00", "temp": temp, "windspeed": wind, "conditions": conditions},
            ],
        }]
    }


def _session(payload=None, ok=True, status=200):
    session = MagicMock()
    resp = session.get.return_value
    resp.ok = ok
    resp.status_code = status
    resp.text = "error body"
    resp.json.return_value = payload if payload is not None else _payload()
    return session


# ================================================================
# Weather
# ================================================================

def test_unit_conversions():
    assert fahrenheit_to_celsius(59) == 15.0
    assert fahrenheit_to_celsius(32) == 0.0
    assert mph_to_kph(10) == 16.1


@pytest.mark.parametrize("conditions, wind, expected", [
    ("Clear", 30.0, "Windy"),
    ("Rain, Overcast", 12.0, "Rainy"),
    ("Clear", 15.0, "Sunny"),
    ("Overcast", 12.0, "Cloudy"),
    ("Snow", 5.0, "Cold"),
    ("", 5.0, "Calm"),
    ("", 18.0, "Other"),
])
def test_map_conditions_to_category(conditions, wind, expected):
    assert map_conditions_to_category(conditions, wind) == expected


def test_parse_timeline_uses_noon_hour():
    reading = parse_timeline(_payload())
    assert reading.temp_c == 15.0
    assert reading.wind_speed_kph == 10.0
    assert reading.weather == "Cloudy"
    assert reading.conditions == "Partially cloudy"


def test_parse_timeline_falls_back_to_day_and_handles_empty():
    reading = parse_timeline({"days": [{"temp": 50.0, "windspeed": 20.0, "conditions": "Rain"}]})
    assert reading.weather == "Windy"
    assert reading.temp_c == 10.0
    assert parse_timeline({"days": []}) is None


def test_weather_lookup_fetch():
    session = _session()
    lookup = WeatherLookup("secret", session=session)
    reading = lookup.fetch(date(2026, 3, 5), "Portmarnock, Dublin")

    assert reading.weather == "Cloudy"
    url = session.get.call_args.args[0]
    assert url.endswith("/Portmarnock%2C%20Dublin/2026-03-05/2026-03-05")
    assert session.get.call_args.kwargs["params"]["key"] == "secret"
    assert session.get.call_args.kwargs["params"]["unitGroup"] == "us"


def test_weather_lookup_skips_without_key_or_location():
    session = _session()
    assert WeatherLookup(None, session=session).fetch(date(2026, 3, 5), "Dublin") is None
    assert WeatherLookup("k", session=session).fetch(date(2026, 3, 5), "  ") is None
    session.get.assert_not_called()


def test_weather_lookup_http_error():
    lookup = WeatherLookup("k", session=_session(ok=False, status=401))
    assert lookup(date(2026, 3, 5), "Dublin") is None


def test_weather_lookup_network_failure():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("down")
    assert WeatherLookup("k", session=session).fetch(date(2026, 3, 5), "Dublin") is None


def test_weather_lookup_bad_json():
    session = _session()
    session.get.return_value.json.side_effect = ValueError("not json")
    assert WeatherLookup("k", session=session).fetch(date(2026, 3, 5), "Dublin") is None


# ================================================================
# Email
# ================================================================

def _digest():
    return WeeklyDigest(week_start="3 Mar 2026", week_end="10 Mar 2026")


def test_send_weekly_digest_records_each_recipient():
    sender = NullEmailSender()
    recipients = [Profile(id="a", email="a@example.com"), Profile(id="b", email="b@example.com")]
    results = send_weekly_digest(sender, _digest(), recipients)

    assert [r.success for r in results] == [True, True]
    assert [m["to"] for m in sender.sent] == ["a@example.com", "b@example.com"]
    assert sender.sent[0]["subject"] == "PGC Weekly Digest - 3 Mar 2026 to 10 Mar 2026"
    assert "PLAYER OF THE WEEK" in sender.sent[0]["text"]
    assert "<html>" in sender.sent[0]["html"]


def test_send_weekly_digest_continues_after_failure():
    sender = MagicMock()
    sender.send.side_effect = [smtplib.SMTPRecipientsRefused({}), None]
    recipients = [Profile(id="a", email="a@example.com"), Profile(id="b", email="b@example.com")]
    results = send_weekly_digest(sender, _digest(), recipients)

    assert results[0].success is False
    assert results[0].error is not None
    assert results[1].success is True


def test_smtp_sender_builds_multipart_message():
    sender = SmtpEmailSender("smtp.example.com", from_email="digest@pgc.ie")
    msg = sender.build_message("a@example.com", "Subject", "<p>hi</p>", "hi")

    assert msg["From"] == "PGC Performance <digest@pgc.ie>"
    assert msg["To"] == "a@example.com"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_smtp_sender_sends_with_starttls():
    sender = SmtpEmailSender("smtp.example.com", 587, user="u", password="p")
    with patch("services.email.smtplib.SMTP") as smtp_cls:
        sender.send("a@example.com", "Subject", "<p>hi</p>", "hi")

    server = smtp_cls.return_value.__enter__.return_value
    smtp_cls.assert_called_once_with("smtp.example.com", 587)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("u", "p")
    server.sendmail.assert_called_once()

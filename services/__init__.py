from services.email import EmailResult, EmailSender, NullEmailSender, SmtpEmailSender, send_weekly_digest
from services.goal_store import GoalStore, InMemoryGoalStore, JsonFileGoalStore
from services.weather import WeatherLookup

__all__ = [
    "EmailResult",
    "EmailSender",
    "NullEmailSender",
    "SmtpEmailSender",
    "send_weekly_digest",
    "GoalStore",
    "InMemoryGoalStore",
    "JsonFileGoalStore",
    "WeatherLookup",
]

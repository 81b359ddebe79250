"""Environment-driven settings. Values come from the process environment or a local .env file."""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_EMAIL_FROM = "noreply@pgc-performance.com"
DEFAULT_CORS_ORIGINS = "http://localhost:3000"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _split(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    visual_crossing_api_key: Optional[str] = None
    cron_secret: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    email_from: str = DEFAULT_EMAIL_FROM
    goals_dir: str = "goals"
    cors_origins: List[str] = field(default_factory=lambda: _split(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        env = os.environ
        return cls(
            database_url=env.get("DATABASE_URL"),
            visual_crossing_api_key=env.get("VISUAL_CROSSING_API_KEY") or None,
            cron_secret=env.get("CRON_SECRET") or None,
            smtp_host=env.get("SMTP_HOST") or None,
            smtp_port=int(env.get("SMTP_PORT", "587")),
            smtp_user=env.get("SMTP_USER") or None,
            smtp_pass=env.get("SMTP_PASS") or None,
            email_from=env.get("EMAIL_FROM") or DEFAULT_EMAIL_FROM,
            goals_dir=env.get("GOALS_DIR", "goals"),
            cors_origins=_split(env.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

"""FastAPI application for the PGC Performance Tracker API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import configure_logging, get_settings
from database.connection import db
from database.db_manager import DatabaseManager
from services.email import NullEmailSender, SmtpEmailSender
from services.goal_store import JsonFileGoalStore
from services.weather import WeatherLookup

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB pool and collaborators on startup, close on shutdown."""
    settings = get_settings()
    configure_logging(settings.log_level)

    await db.initialize(dsn=settings.database_url)
    app.state.db_manager = DatabaseManager(db.pool)
    app.state.goal_store = JsonFileGoalStore(settings.goals_dir)
    app.state.weather_lookup = WeatherLookup(settings.visual_crossing_api_key)
    if settings.email_enabled:
        app.state.email_sender = SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            from_email=settings.email_from,
        )
    else:
        log.warning("SMTP_HOST not set; digest emails will not be delivered")
        app.state.email_sender = NullEmailSender()
    yield
    await db.close()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="PGC Performance API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from api.routers import courses, digest, goals, leaderboard, reports, rounds, simulator, stats, users
    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
    app.include_router(leaderboard.router, prefix="/api", tags=["leaderboard"])
    app.include_router(simulator.router, prefix="/api/simulator", tags=["simulator"])
    app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
    app.include_router(courses.router, prefix="/api/courses", tags=["courses"])
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(goals.router, prefix="/api/goals", tags=["goals"])
    app.include_router(digest.router, prefix="/api/digest", tags=["digest"])

    @app.get("/api/health")
    async def health():
        checks = await db.health_check()
        return {"status": "ok" if checks["database"] else "degraded", **checks}

    return app


app = create_app()

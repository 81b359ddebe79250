from typing import Optional

from fastapi import Depends, Header, HTTPException, Query, Request

from config.settings import Settings, get_settings
from database.db_manager import DatabaseManager
from models import Identity, Profile
from services.email import EmailSender
from services.goal_store import GoalStore
from services.weather import WeatherLookup


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def get_app_settings() -> Settings:
    return get_settings()


def get_goal_store(request: Request) -> GoalStore:
    return request.app.state.goal_store


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_weather_lookup(request: Request) -> WeatherLookup:
    return request.app.state.weather_lookup


# ================================================================
# Identity and role guards
# ================================================================

async def get_current_profile(
    x_user_id: Optional[str] = Header(None),
    db: DatabaseManager = Depends(get_db),
) -> Profile:
    """The caller's profile, from the X-User-Id header."""
    if not x_user_id:
        raise HTTPException(401, "Not authenticated")
    try:
        profile = await db.profiles.get_profile(x_user_id)
    except ValueError:
        profile = None
    if profile is None:
        raise HTTPException(401, "Not authenticated")
    return profile


async def get_identity(profile: Profile = Depends(get_current_profile)) -> Identity:
    return Identity(user_id=profile.id, role=profile.role)


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(403, "Unauthorized: Admin access required")
    return identity


async def require_super_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_super_admin:
        raise HTTPException(403, "Unauthorized: Super Admin access required")
    return identity


def verify_cron_secret(
    authorization: Optional[str] = Header(None),
    secret: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Scheduled jobs authenticate with `Authorization: Bearer <secret>` or `?secret=`."""
    if not settings.cron_secret:
        raise HTTPException(500, "Server configuration error")
    provided = authorization.replace("Bearer ", "", 1) if authorization else secret
    if provided != settings.cron_secret:
        raise HTTPException(401, "Unauthorized")

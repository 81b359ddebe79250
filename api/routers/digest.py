"""Weekly digest delivery, triggered by the scheduler."""

import asyncio
import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from database.db_manager import DatabaseManager
from analytics.digest import WeeklyDigest, admin_recipients, build_weekly_digest, week_window
from api.dependencies import get_db, get_email_sender, get_current_profile, require_super_admin, verify_cron_secret
from api.schemas import DigestRunResponse
from models import Identity, Profile
from services.email import EmailSender, send_weekly_digest

log = logging.getLogger(__name__)

router = APIRouter()


async def _build_digest(db: DatabaseManager, profiles: list, today: date) -> WeeklyDigest:
    start, end = week_window(today)
    return build_weekly_digest(
        rounds=await db.rounds.list_rounds(start_date=start, end_date=end),
        profiles=profiles,
        courses=await db.courses.list_courses(),
        squads=await db.squads.list_squads(),
        members=await db.squads.list_members(),
        today=today,
    )


async def _deliver(
    sender: EmailSender, digest: WeeklyDigest, recipients: list
) -> DigestRunResponse:
    potw = digest.player_of_the_week.name if digest.player_of_the_week else None
    if not recipients:
        log.info("Weekly digest: no admin recipients found")
        return DigestRunResponse(
            success=True,
            message="No admin recipients found",
            total_rounds=digest.total_rounds,
            player_of_the_week=potw,
            squad_stats=len(digest.squad_stats),
            recipients=0,
            sent=0,
            failed=0,
        )

    results = await asyncio.to_thread(send_weekly_digest, sender, digest, recipients)
    sent = sum(1 for r in results if r.success)
    log.info("Weekly digest sent to %d of %d recipients", sent, len(results))
    return DigestRunResponse(
        success=True,
        message=f"Weekly digest sent to {sent} recipients",
        total_rounds=digest.total_rounds,
        player_of_the_week=potw,
        squad_stats=len(digest.squad_stats),
        recipients=len(results),
        sent=sent,
        failed=len(results) - sent,
        results=results,
    )


@router.api_route("/weekly", methods=["GET", "POST"], response_model=DigestRunResponse)
async def run_weekly_digest(
    _: None = Depends(verify_cron_secret),
    db: DatabaseManager = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    """Email last week's summary to every admin with an email address."""
    profiles = await db.profiles.list_profiles()
    digest = await _build_digest(db, profiles, date.today())
    log.info("Weekly digest for %s - %s: %d rounds", digest.week_start, digest.week_end, digest.total_rounds)
    return await _deliver(sender, digest, admin_recipients(profiles))


@router.post("/test", response_model=DigestRunResponse)
async def send_test_digest(
    _: Identity = Depends(require_super_admin),
    profile: Profile = Depends(get_current_profile),
    db: DatabaseManager = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    """Send this week's digest to the calling super admin only."""
    if not profile.email:
        raise HTTPException(400, "No email address on your profile")
    digest = await _build_digest(db, await db.profiles.list_profiles(), date.today())
    return await _deliver(sender, digest, [profile])

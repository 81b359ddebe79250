"""User profile, approval and role management endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional
from database.db_manager import DatabaseManager
from database.exceptions import DuplicateError, NotFoundError
from api.dependencies import get_current_profile, get_db, require_admin, require_super_admin
from models import AdminSquad, ApprovalStatus, Identity, Profile, Role

log = logging.getLogger(__name__)

router = APIRouter()


class UpdateProfileRequest(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    handicap_index: Optional[float] = Field(None, ge=-10, le=54)
    home_club: Optional[str] = None


async def _get_profile_or_404(db: DatabaseManager, user_id: str) -> Profile:
    try:
        profile = await db.profiles.get_profile(user_id)
    except ValueError:
        profile = None
    if not profile:
        raise HTTPException(404, "User not found")
    return profile


async def _audit(
    db: DatabaseManager, actor: Identity, action: str, target: Profile, **details
) -> None:
    actor_profile = await db.profiles.get_profile(actor.user_id)
    details.update(
        actor_name=actor_profile.full_name if actor_profile else None,
        target_user_name=target.full_name,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    await db.audit.record(actor.user_id, action, target.id, details)


async def _change_role(
    db: DatabaseManager, actor: Identity, target: Profile, role: Role, action: str
) -> Profile:
    try:
        updated = await db.profiles.set_role(target.id, role)
    except NotFoundError:
        raise HTTPException(404, "User not found")
    log.info("%s changed role of %s from %s to %s", actor.user_id, target.id, target.role.value, role.value)
    await _audit(db, actor, action, target, previous_role=target.role.value, new_role=role.value)
    return updated


# ================================================================
# Self service
# ================================================================

@router.get("/me", response_model=Profile)
async def get_me(profile: Profile = Depends(get_current_profile)):
    return profile


@router.put("/me", response_model=Profile)
async def update_me(
    req: UpdateProfileRequest,
    db: DatabaseManager = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    updates = req.model_dump(exclude_unset=True)
    try:
        updated = await db.profiles.update_profile(profile.id, **updates)
    except DuplicateError:
        raise HTTPException(409, "Email already in use")
    if not updated:
        raise HTTPException(404, "User not found")
    return updated


# ================================================================
# Admin: listing and approval
# ================================================================

@router.get("", response_model=List[Profile])
async def list_users(
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    return await db.profiles.list_profiles()


@router.get("/pending", response_model=List[Profile])
async def list_pending_users(
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    return await db.profiles.list_profiles(approval_status=ApprovalStatus.PENDING)


@router.get("/{user_id}", response_model=Profile)
async def get_user(
    user_id: str,
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    return await _get_profile_or_404(db, user_id)


@router.get("/{user_id}/squads", response_model=List[AdminSquad])
async def get_admin_squads(
    user_id: str,
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    """Squads an admin has been assigned to view."""
    target = await _get_profile_or_404(db, user_id)
    return await db.squads.list_admin_squads(target.id)


@router.post("/{user_id}/approve", response_model=Profile)
async def approve_user(
    user_id: str,
    db: DatabaseManager = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    target = await _get_profile_or_404(db, user_id)
    updated = await db.profiles.set_approval_status(target.id, ApprovalStatus.APPROVED)
    await _audit(db, identity, "USER_APPROVED", target)
    return updated


@router.post("/{user_id}/reject", response_model=Profile)
async def reject_user(
    user_id: str,
    db: DatabaseManager = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    target = await _get_profile_or_404(db, user_id)
    updated = await db.profiles.set_approval_status(target.id, ApprovalStatus.REJECTED)
    await _audit(db, identity, "USER_REJECTED", target)
    return updated


# ================================================================
# Super admin: role changes
# ================================================================

@router.post("/{user_id}/promote", response_model=Profile)
async def promote_to_admin(
    user_id: str,
    db: DatabaseManager = Depends(get_db),
    identity: Identity = Depends(require_super_admin),
):
    target = await _get_profile_or_404(db, user_id)
    if target.role.is_super_admin:
        raise HTTPException(400, "Cannot demote a Super Admin")
    return await _change_role(db, identity, target, Role.ADMIN, "USER_PROMOTED")


@router.post("/{user_id}/demote", response_model=Profile)
async def demote_to_user(
    user_id: str,
    db: DatabaseManager = Depends(get_db),
    identity: Identity = Depends(require_super_admin),
):
    target = await _get_profile_or_404(db, user_id)
    if target.role.is_super_admin:
        raise HTTPException(400, "Cannot demote a Super Admin")
    return await _change_role(db, identity, target, Role.USER, "USER_DEMOTED")


@router.post("/{user_id}/promote-super", response_model=Profile)
async def promote_to_super_admin(
    user_id: str,
    db: DatabaseManager = Depends(get_db),
    identity: Identity = Depends(require_super_admin),
):
    if user_id == identity.user_id:
        raise HTTPException(400, "You are already a Super Admin")
    target = await _get_profile_or_404(db, user_id)
    if target.role.is_super_admin:
        raise HTTPException(400, "User is already a Super Admin")
    return await _change_role(db, identity, target, Role.SUPER_ADMIN, "USER_PROMOTED_SUPER_ADMIN")

"""Course API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from typing import List, Optional
from database.db_manager import DatabaseManager
from database.exceptions import DependentRecordsError, DuplicateError, IntegrityError, NotFoundError
from api.dependencies import get_current_profile, get_db, require_admin
from api.schemas import CourseSummaryResponse
from models import Course, CourseHole, Identity, Profile

router = APIRouter()


class HoleInput(BaseModel):
    hole_number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=6)
    stroke_index: Optional[int] = Field(None, ge=1, le=18)
    distance_yards: Optional[int] = Field(None, ge=0)


class CreateCourseRequest(BaseModel):
    name: str = Field(..., min_length=1)
    location: Optional[str] = None
    par: Optional[int] = None
    rating: Optional[float] = None
    slope: Optional[int] = None
    course_type: Optional[str] = None
    tee_color: Optional[str] = None
    holes: List[HoleInput] = []


class UpdateCourseRequest(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    par: Optional[int] = None
    rating: Optional[float] = None
    slope: Optional[int] = None
    course_type: Optional[str] = None
    tee_color: Optional[str] = None


def summarize_course(c: Course) -> CourseSummaryResponse:
    return CourseSummaryResponse(
        id=c.id,
        name=c.name,
        location=c.location,
        par=c.get_par(),
        rating=c.rating,
        slope=c.slope,
        course_type=c.course_type,
        tee_color=c.tee_color,
        total_holes=len(c.holes),
    )


async def _get_course_or_404(db: DatabaseManager, course_id: str) -> Course:
    try:
        course = await db.courses.get_course(course_id)
    except ValueError:
        course = None
    if not course:
        raise HTTPException(404, "Course not found")
    return course


@router.get("", response_model=List[CourseSummaryResponse])
async def list_courses(
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    courses = await db.courses.list_courses()
    return [summarize_course(c) for c in courses]


@router.get("/search", response_model=List[CourseSummaryResponse])
async def search_courses(
    q: str = Query(..., min_length=1),
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    courses = await db.courses.search_courses(q)
    return [summarize_course(c) for c in courses]


@router.get("/{course_id}", response_model=Course)
async def get_course(
    course_id: str,
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    return await _get_course_or_404(db, course_id)


@router.post("", status_code=201, response_model=CourseSummaryResponse)
async def create_course(
    req: CreateCourseRequest,
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    course = Course(
        name=req.name.strip(),
        location=req.location,
        par=req.par,
        rating=req.rating,
        slope=req.slope,
        course_type=req.course_type,
        tee_color=req.tee_color,
        holes=[CourseHole(**h.model_dump()) for h in req.holes],
    )
    try:
        created = await db.courses.create_course(course)
    except DuplicateError:
        raise HTTPException(409, "A course with this name already exists")
    except IntegrityError as e:
        raise HTTPException(400, str(e))
    return summarize_course(created)


@router.put("/{course_id}", response_model=CourseSummaryResponse)
async def update_course(
    course_id: str,
    req: UpdateCourseRequest,
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    """Edit a course's details. Renaming onto another course's name is rejected."""
    existing = await _get_course_or_404(db, course_id)

    updates = req.model_dump(exclude_unset=True)
    errors = existing.apply_updates(updates)
    if errors:
        raise HTTPException(422, "; ".join(f"{field}: {msg}" for field, msg in errors.items()))
    if "tee_color" in updates:
        updates["tees"] = updates.pop("tee_color")

    try:
        updated = await db.courses.update_course(course_id, **updates)
    except NotFoundError:
        raise HTTPException(404, "Course not found")
    except DuplicateError as e:
        raise HTTPException(409, str(e))
    return summarize_course(updated)


@router.delete("/{course_id}", status_code=204)
async def delete_course(
    course_id: str,
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    """Delete a course that no round refers to."""
    await _get_course_or_404(db, course_id)
    try:
        deleted = await db.courses.delete_course(course_id)
    except DependentRecordsError as e:
        raise HTTPException(409, str(e))
    if not deleted:
        raise HTTPException(404, "Course not found")

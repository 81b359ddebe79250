"""Squad report endpoints (admin only)."""

from datetime import date
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import ValidationError

from analytics import ReportFilters, ReportRow, build_report_rows, export_to_csv, report_filename
from analytics.reports import DEFAULT_PRESET_DAYS, filter_rounds, report_insights
from database.db_manager import DatabaseManager
from api.dependencies import get_db, require_admin
from api.schemas import ReportResponse
from models import Identity, Squad

router = APIRouter()


def _filters(
    squad_id: Optional[str] = Query(None),
    days: int = Query(DEFAULT_PRESET_DAYS),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    weather: Optional[str] = Query(None),
) -> ReportFilters:
    try:
        return ReportFilters(
            squad_id=squad_id or None,
            days=days,
            start_date=start_date,
            end_date=end_date,
            weather=weather or None,
        )
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))


async def _build_report(
    db: DatabaseManager, filters: ReportFilters
) -> Tuple[List[ReportRow], Optional[Squad]]:
    squad = None
    members = []
    if filters.squad_id:
        try:
            squad = await db.squads.get_squad(filters.squad_id)
        except ValueError:
            squad = None
        if not squad:
            raise HTTPException(404, "Squad not found")
        members = await db.squads.list_members(squad.id)

    start, end = filters.date_bounds()
    rounds = await db.rounds.list_rounds(start_date=start, end_date=end)
    rounds = filter_rounds(rounds, filters, members)

    profiles = await db.profiles.get_profiles({r.user_id for r in rounds})
    courses = await db.courses.list_courses()
    return build_report_rows(rounds, profiles, courses), squad


@router.get("", response_model=ReportResponse)
async def get_report(
    filters: ReportFilters = Depends(_filters),
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    rows, squad = await _build_report(db, filters)
    return ReportResponse(
        rows=rows,
        insights=report_insights(rows),
        filename=report_filename(squad.name if squad else None, filters.as_of),
    )


@router.get("/export")
async def export_report(
    filters: ReportFilters = Depends(_filters),
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    rows, squad = await _build_report(db, filters)
    filename = report_filename(squad.name if squad else None, filters.as_of)
    return Response(
        content=export_to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/squads", response_model=List[Squad])
async def list_report_squads(
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    return await db.squads.list_squads()

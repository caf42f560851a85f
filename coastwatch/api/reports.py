from typing import Optional

from fastapi import APIRouter, Depends, Query, status as http_status
from sqlalchemy.ext.asyncio import AsyncSession

from coastwatch import schemas
from coastwatch.api.deps import get_current_user_id
from coastwatch.core.database import get_db
from coastwatch.core.errors import format_success
from coastwatch.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])

@router.get("")
@router.get("/", include_in_schema=False)
async def read_reports(
    hazard_type: Optional[str] = Query(None, alias="type"),
    severity: Optional[str] = None,
    status: Optional[str] = None,
    reporter_id: Optional[int] = Query(None, alias="reporterId"),
    location_id: Optional[int] = Query(None, alias="locationId"),
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    reports = await ReportService.list_reports(
        db,
        hazard_type=hazard_type,
        severity=severity,
        status=status,
        reporter_id=reporter_id,
        location_id=location_id,
        search=search,
        skip=skip,
        limit=limit,
    )
    return format_success({"reports": schemas.dump_reports(reports)})

@router.get("/stats")
async def read_report_stats(db: AsyncSession = Depends(get_db)):
    stats = await ReportService.stats(db)
    return format_success(schemas.ReportStats(**stats).dump())

@router.post("", status_code=http_status.HTTP_201_CREATED)
@router.post("/", status_code=http_status.HTTP_201_CREATED, include_in_schema=False)
async def create_report(
    body: schemas.ReportCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    report = await ReportService.create_report(
        db,
        user_id,
        hazard_type=body.type,
        description=body.description,
        severity=body.severity,
        location_name=body.location_name,
        lat=body.lat,
        lng=body.lng,
    )
    return format_success({"report": schemas.Report.model_validate(report).dump()}, "Report created successfully")

@router.get("/{report_id}")
async def read_report(report_id: str, db: AsyncSession = Depends(get_db)):
    report = await ReportService.get_report(db, report_id)
    return format_success({"report": schemas.Report.model_validate(report).dump()})

@router.put("/{report_id}/status")
async def update_report_status(
    report_id: str,
    body: schemas.StatusUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    report = await ReportService.update_status(db, user_id, report_id, body.status)
    return format_success(
        {"report": schemas.Report.model_validate(report).dump()}, "Report status updated successfully"
    )

@router.delete("/{report_id}")
async def delete_report(
    report_id: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await ReportService.delete_report(db, user_id, report_id)
    return format_success({}, "Report deleted successfully")

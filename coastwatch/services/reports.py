from loguru import logger
from sqlalchemy import delete, desc, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from coastwatch.core.database import utcnow
from coastwatch.core.errors import BadRequest, Internal, NotFound
from coastwatch.models.report import Report, HazardType, Severity, Status
from coastwatch.models.user import User
from coastwatch.services.locations import LocationService
from coastwatch.services.policy import Action, authorize
from coastwatch.services.validation import (
    check_coordinates,
    is_blank,
    parse_enum,
    parse_id,
    parse_optional_enum,
)

MAX_PAGE_SIZE = 500


def _with_relations(query):
    return query.options(selectinload(Report.reporter), selectinload(Report.location))


class ReportService:
    """Report lifecycle: create, read, status transitions and deletion.

    Identity arguments are user ids taken from a verified token, never from
    the request body. Store errors are logged and surfaced as Internal; a
    report that disappears between read and write surfaces as NotFound and
    is not retried.
    """

    @staticmethod
    async def _load(db: AsyncSession, report_id: int):
        result = await db.execute(
            _with_relations(select(Report).where(Report.id == report_id)).execution_options(
                populate_existing=True
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_reports(
        db: AsyncSession,
        hazard_type=None,
        severity=None,
        status=None,
        reporter_id=None,
        location_id=None,
        search=None,
        skip: int = 0,
        limit: int = 100,
    ):
        hazard_type = parse_optional_enum(HazardType, hazard_type, "hazard type")
        severity = parse_optional_enum(Severity, severity, "severity")
        status = parse_optional_enum(Status, status, "status")
        if skip < 0:
            raise BadRequest(f"Invalid skip: {skip}")
        if limit <= 0 or limit > MAX_PAGE_SIZE:
            raise BadRequest(f"Invalid limit: {limit}")

        query = _with_relations(select(Report))
        if hazard_type:
            query = query.where(Report.type == hazard_type)
        if severity:
            query = query.where(Report.severity == severity)
        if status:
            query = query.where(Report.status == status)
        if reporter_id is not None:
            query = query.where(Report.reporter_id == parse_id(reporter_id, "reporter"))
        if location_id is not None:
            query = query.where(Report.location_id == parse_id(location_id, "location"))
        if search and search.strip():
            query = query.where(Report.description.ilike(f"%{search.strip()}%"))
        query = query.order_by(desc(Report.created_at), desc(Report.id)).offset(skip).limit(limit)

        try:
            result = await db.execute(query)
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Get reports error: {e}")
            raise Internal("Failed to fetch reports")

    @staticmethod
    async def create_report(
        db: AsyncSession,
        user_id: int,
        hazard_type,
        description,
        location_name,
        lat,
        lng,
        severity=None,
    ) -> Report:
        if is_blank(hazard_type) or is_blank(description) or is_blank(location_name) or lat is None or lng is None:
            raise BadRequest("Type, description, locationName, lat, and lng are required")

        hazard_type = parse_enum(HazardType, hazard_type, "hazard type")
        severity = Severity.LOW if is_blank(severity) else parse_enum(Severity, severity, "severity")
        check_coordinates(lat, lng)

        try:
            reporter = await db.get(User, user_id)
            if reporter is None:
                raise NotFound("User not found")

            location = await LocationService.find_or_create(db, location_name.strip(), lat, lng)
            report = Report(
                type=hazard_type,
                description=description.strip(),
                severity=severity,
                status=Status.PENDING,
                reporter_id=reporter.id,
                location_id=location.id,
            )
            db.add(report)
            await db.commit()
            logger.info(
                f"Report id={report.id} ({hazard_type.value}/{severity.value}) created by user {user_id} "
                f"at location {location.id}"
            )
            return await ReportService._load(db, report.id)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Create report error: {e}")
            raise Internal("Failed to create report")

    @staticmethod
    async def get_report(db: AsyncSession, raw_id) -> Report:
        report_id = parse_id(raw_id)
        try:
            report = await ReportService._load(db, report_id)
        except SQLAlchemyError as e:
            logger.error(f"Get report error: {e}")
            raise Internal("Failed to fetch report")
        if report is None:
            raise NotFound("Report not found")
        return report

    @staticmethod
    async def update_status(db: AsyncSession, user_id: int, raw_id, status) -> Report:
        try:
            actor = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Update report status error: {e}")
            raise Internal("Failed to update report status")
        authorize(actor, None, Action.UPDATE_STATUS)

        report_id = parse_id(raw_id)
        if is_blank(status):
            raise BadRequest("Status is required")
        new_status = parse_enum(Status, status, "status")

        try:
            report = await db.get(Report, report_id)
            if report is None:
                raise NotFound("Report not found")
            previous = report.status
            result = await db.execute(
                update(Report)
                .where(Report.id == report_id)
                .values(status=new_status, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await db.rollback()
                raise NotFound("Report not found")
            await db.commit()
            logger.info(
                f"Report {report_id} status {previous.value} -> {new_status.value} by user {user_id}"
            )
            updated = await ReportService._load(db, report_id)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Update report status error: {e}")
            raise Internal("Failed to update report status")
        if updated is None:
            raise NotFound("Report not found")
        return updated

    @staticmethod
    async def delete_report(db: AsyncSession, user_id: int, raw_id) -> None:
        report_id = parse_id(raw_id)
        try:
            actor = await db.get(User, user_id)
            report = await db.get(Report, report_id)
            if actor is None:
                raise NotFound("User not found")
            if report is None:
                raise NotFound("Report not found")
            authorize(actor, report, Action.DELETE)

            result = await db.execute(
                delete(Report).where(Report.id == report_id).execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await db.rollback()
                raise NotFound("Report not found")
            await db.commit()
            db.expunge(report)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Delete report error: {e}")
            raise Internal("Failed to delete report")
        logger.info(f"Report {report_id} deleted by user {user_id}")

    @staticmethod
    async def stats(db: AsyncSession) -> dict:
        async def count_by(column, enum_cls):
            result = await db.execute(select(column, func.count(Report.id)).group_by(column))
            counts = {member.value: 0 for member in enum_cls}
            for value, count in result.all():
                counts[value.value] = count
            return counts

        try:
            by_type = await count_by(Report.type, HazardType)
            by_severity = await count_by(Report.severity, Severity)
            by_status = await count_by(Report.status, Status)
        except SQLAlchemyError as e:
            logger.error(f"Report stats error: {e}")
            raise Internal("Failed to fetch report statistics")
        return {
            "total": sum(by_status.values()),
            "by_type": by_type,
            "by_severity": by_severity,
            "by_status": by_status,
        }

from geopy.distance import geodesic
from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from coastwatch.core.errors import BadRequest, Internal, NotFound
from coastwatch.models.location import Location
from coastwatch.models.report import Report
from coastwatch.services.validation import check_coordinates, parse_id


class LocationService:
    @staticmethod
    async def find(db: AsyncSession, name: str, lat: float, lng: float):
        result = await db.execute(
            select(Location).where(Location.name == name, Location.lat == lat, Location.lng == lng)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_or_create(db: AsyncSession, name: str, lat: float, lng: float) -> Location:
        """Resolve the location for an exact (name, lat, lng) match, creating it if missing.

        Runs inside the caller's transaction; the caller commits. The insert
        happens in a savepoint so that losing a race against an identical
        concurrent submission falls back to the row the other request created.
        """
        location = await LocationService.find(db, name, lat, lng)
        if location:
            return location

        try:
            async with db.begin_nested():
                location = Location(name=name, lat=lat, lng=lng)
                db.add(location)
            logger.info(f"Created location id={location.id} name={name!r} ({lat}, {lng})")
            return location
        except IntegrityError:
            logger.info(f"Location {name!r} ({lat}, {lng}) created concurrently, reusing it")
            location = await LocationService.find(db, name, lat, lng)
            if location is None:
                raise
            return location

    @staticmethod
    async def _with_counts(db: AsyncSession, query):
        counts = (
            select(Report.location_id, func.count(Report.id).label("reports_count"))
            .group_by(Report.location_id)
            .subquery()
        )
        query = query.add_columns(func.coalesce(counts.c.reports_count, 0)).outerjoin(
            counts, counts.c.location_id == Location.id
        )
        result = await db.execute(query)
        return [(location, count) for location, count in result.all()]

    @staticmethod
    async def list_locations(db: AsyncSession, search: str = None):
        query = select(Location)
        if search and search.strip():
            query = query.where(Location.name.ilike(f"%{search.strip()}%"))
        query = query.order_by(Location.name, Location.id)
        try:
            return await LocationService._with_counts(db, query)
        except SQLAlchemyError as e:
            logger.error(f"Database error listing locations: {e}")
            raise Internal("Failed to fetch locations")

    @staticmethod
    async def get_location(db: AsyncSession, raw_id):
        location_id = parse_id(raw_id, "location")
        try:
            rows = await LocationService._with_counts(db, select(Location).where(Location.id == location_id))
        except SQLAlchemyError as e:
            logger.error(f"Database error loading location {location_id}: {e}")
            raise Internal("Failed to fetch location")
        if not rows:
            raise NotFound("Location not found")
        return rows[0]

    @staticmethod
    async def nearby(db: AsyncSession, lat: float, lng: float, radius_km: float = 10.0):
        """Locations within ``radius_km`` of the point, nearest first, as (location, count, distance_km)."""
        check_coordinates(lat, lng)
        if radius_km is None or not radius_km > 0:
            raise BadRequest(f"Invalid radius: {radius_km}")

        logger.info(f"Searching locations near ({lat}, {lng}) within {radius_km}km")
        rows = await LocationService.list_locations(db)
        matches = []
        for location, count in rows:
            distance = geodesic((lat, lng), (location.lat, location.lng)).km
            if distance <= radius_km:
                matches.append((location, count, distance))
        matches.sort(key=lambda m: m[2])
        return matches

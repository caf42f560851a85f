from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from coastwatch import schemas
from coastwatch.core.database import get_db
from coastwatch.core.errors import format_success
from coastwatch.services.locations import LocationService

router = APIRouter(prefix="/locations", tags=["locations"])

def _location(location, count: int) -> dict:
    return schemas.LocationWithCount(
        id=location.id, name=location.name, lat=location.lat, lng=location.lng, reports_count=count
    ).dump()

@router.get("")
@router.get("/", include_in_schema=False)
async def read_locations(search: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    rows = await LocationService.list_locations(db, search)
    return format_success({"locations": [_location(location, count) for location, count in rows]})

@router.get("/nearby")
async def read_nearby_locations(
    lat: float,
    lng: float,
    radius: float = 10.0,
    db: AsyncSession = Depends(get_db),
):
    matches = await LocationService.nearby(db, lat, lng, radius)
    locations = [
        schemas.NearbyLocation(
            id=location.id,
            name=location.name,
            lat=location.lat,
            lng=location.lng,
            reports_count=count,
            distance_km=round(distance, 3),
        ).dump()
        for location, count, distance in matches
    ]
    return format_success({"locations": locations})

@router.get("/{location_id}")
async def read_location(location_id: str, db: AsyncSession = Depends(get_db)):
    location, count = await LocationService.get_location(db, location_id)
    return format_success({"location": _location(location, count)})

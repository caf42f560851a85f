import pytest

from coastwatch.core.errors import BadRequest, NotFound
from coastwatch.services.locations import LocationService
from coastwatch.services.reports import ReportService


async def seed(db, user):
    points = [
        ("Marina Beach", 13.0500, 80.2824),
        ("Elliot's Beach", 12.9989, 80.2718),
        ("Puri Beach", 19.7983, 85.8249),
    ]
    for name, lat, lng in points:
        await ReportService.create_report(db, user.id, "high_waves", "Swell", name, lat, lng)
    await ReportService.create_report(db, user.id, "tsunami", "Again", "Marina Beach", 13.0500, 80.2824)


async def test_find_or_create_is_idempotent(db):
    first = await LocationService.find_or_create(db, "Kovalam", 8.4, 76.97)
    await db.commit()
    second = await LocationService.find_or_create(db, "Kovalam", 8.4, 76.97)
    assert first.id == second.id


async def test_list_locations_with_counts(db, citizen):
    await seed(db, citizen)
    rows = await LocationService.list_locations(db)
    counts = {location.name: count for location, count in rows}
    assert counts == {"Elliot's Beach": 1, "Marina Beach": 2, "Puri Beach": 1}

    rows = await LocationService.list_locations(db, search="marina")
    assert [location.name for location, _ in rows] == ["Marina Beach"]


async def test_nearby_orders_by_distance(db, citizen):
    await seed(db, citizen)
    matches = await LocationService.nearby(db, 13.04, 80.28, radius_km=20)
    assert [location.name for location, _, _ in matches] == ["Marina Beach", "Elliot's Beach"]
    distances = [distance for _, _, distance in matches]
    assert distances == sorted(distances)
    assert all(distance <= 20 for distance in distances)


async def test_nearby_validation(db):
    with pytest.raises(BadRequest):
        await LocationService.nearby(db, 95, 80)
    with pytest.raises(BadRequest):
        await LocationService.nearby(db, 13, 80, radius_km=0)


async def test_get_location(db, citizen):
    await seed(db, citizen)
    rows = await LocationService.list_locations(db, search="Puri")
    location, count = await LocationService.get_location(db, str(rows[0][0].id))
    assert location.name == "Puri Beach"
    assert count == 1
    with pytest.raises(NotFound):
        await LocationService.get_location(db, "999")
    with pytest.raises(BadRequest):
        await LocationService.get_location(db, "north")

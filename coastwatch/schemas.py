from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from coastwatch.models.report import HazardType, Severity, Status
from coastwatch.models.user import Role


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# Requests. Fields are optional so missing values are reported by the services
# with the same message shape as invalid ones.

class RegisterRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ReportCreate(CamelModel):
    type: Optional[str] = None
    description: Optional[str] = None
    severity: Optional[str] = None
    location_name: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class StatusUpdate(CamelModel):
    status: Optional[str] = None


# Responses

class User(ApiModel):
    id: int
    name: Optional[str] = None
    email: str
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReporterSummary(ApiModel):
    id: int
    name: Optional[str] = None
    email: str


class Location(ApiModel):
    id: int
    name: str
    lat: float
    lng: float


class LocationWithCount(Location):
    reports_count: int = 0


class NearbyLocation(LocationWithCount):
    distance_km: float


class Report(ApiModel):
    id: int
    type: HazardType
    description: str
    severity: Severity
    status: Status
    reporter_id: int
    location_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    reporter: Optional[ReporterSummary] = None
    location: Optional[Location] = None


class ReportStats(ApiModel):
    total: int
    by_type: Dict[str, int]
    by_severity: Dict[str, int]
    by_status: Dict[str, int]


def dump_reports(reports) -> List[Dict[str, Any]]:
    return [Report.model_validate(r).dump() for r in reports]

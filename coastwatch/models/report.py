import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from coastwatch.core.database import Base, utcnow

class HazardType(str, enum.Enum):
    TSUNAMI = "TSUNAMI"
    STORM_SURGE = "STORM_SURGE"
    HIGH_WAVES = "HIGH_WAVES"
    COASTAL_FLOODING = "COASTAL_FLOODING"
    ABNORMAL_TIDE = "ABNORMAL_TIDE"

class Severity(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

class Status(str, enum.Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    INVESTIGATING = "INVESTIGATING"
    REJECTED = "REJECTED"

class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(HazardType), nullable=False, index=True)
    description = Column(String, nullable=False)
    severity = Column(Enum(Severity), nullable=False, default=Severity.LOW)
    status = Column(Enum(Status), nullable=False, default=Status.PENDING, index=True)
    reporter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reporter = relationship("User", back_populates="reports")
    location = relationship("Location", back_populates="reports")

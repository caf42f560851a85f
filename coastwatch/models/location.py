from sqlalchemy import Column, Integer, String, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from coastwatch.core.database import Base

class Location(Base):
    __tablename__ = "locations"
    __table_args__ = (UniqueConstraint("name", "lat", "lng", name="uq_location_point"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)

    reports = relationship("Report", back_populates="location")

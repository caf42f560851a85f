import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from coastwatch.core.database import Base, utcnow

class Role(str, enum.Enum):
    CITIZEN = "CITIZEN"
    OFFICIAL = "OFFICIAL"
    ANALYST = "ANALYST"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(Role), nullable=False, default=Role.CITIZEN)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reports = relationship("Report", back_populates="reporter")

    @property
    def is_official(self) -> bool:
        return self.role == Role.OFFICIAL

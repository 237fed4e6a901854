from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid, enum_type
from app.models.enums import RoomType


# Software currently installed in a room, independent of any request
room_software = Table(
    "room_software",
    Base.metadata,
    Column("room_id", GUID, ForeignKey("rooms.id", ondelete="CASCADE"), primary_key=True),
    Column("software_id", GUID, ForeignKey("software.id", ondelete="CASCADE"), primary_key=True),
)


class Department(Base):
    """University department owning departmental rooms"""
    __tablename__ = "departments"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, nullable=False)
    code = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    rooms = relationship("Room", back_populates="department")

    def __repr__(self):
        return f"<Department {self.code}>"


class Room(Base):
    """Teaching room; DEPARTMENTAL rooms reference a department, SHARED rooms none"""
    __tablename__ = "rooms"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    type = Column(enum_type(RoomType), nullable=False)
    department_id = Column(GUID, ForeignKey("departments.id"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    department = relationship("Department", back_populates="rooms")
    software = relationship("Software", secondary=room_software, back_populates="rooms")

    @property
    def software_ids(self):
        return [item.id for item in self.software]

    def __repr__(self):
        return f"<Room {self.name} ({self.type.value if self.type else '-'})>"

from sqlalchemy import Column, String, Text, Boolean, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid, enum_type
from app.models.enums import RequestStatus, InstallationStatus, StatusPin


class Request(Base):
    """A teacher's request to have software installed in rooms for one academic year"""
    __tablename__ = "requests"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    teacher_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    desired_date = Column(Date, nullable=False)
    academic_year = Column(String(4), nullable=False, index=True)  # "YYYY", see AcademicYear
    status = Column(enum_type(RequestStatus), default=RequestStatus.NEW, nullable=False, index=True)
    comment = Column(Text, nullable=True)

    # Closure (set together)
    closure_comment = Column(Text, nullable=True)
    closure_date = Column(DateTime, nullable=True)

    # Extended by attestation confirmation
    expiration_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_modified = Column(DateTime, default=datetime.utcnow, nullable=False)

    teacher = relationship("User", back_populates="requests")
    items = relationship(
        "RequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="RequestItem.created_at",
    )
    attestation = relationship("Attestation", back_populates="request", uselist=False)

    def __repr__(self):
        return f"<Request {self.id} {self.status.value if self.status else '-'}>"


class RequestItem(Base):
    """One software within a request, installed across one or more rooms"""
    __tablename__ = "request_items"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    request_id = Column(GUID, ForeignKey("requests.id", ondelete="CASCADE"), nullable=False, index=True)
    software_id = Column(GUID, ForeignKey("software.id"), nullable=False, index=True)

    installation_status = Column(
        enum_type(InstallationStatus), default=InstallationStatus.PENDING, nullable=False
    )
    # PROBLEM / CHANGED pins freeze installation_status against recomputation
    status_pin = Column(enum_type(StatusPin), default=StatusPin.NONE, nullable=False)
    installation_date = Column(DateTime, nullable=True)
    comment = Column(Text, nullable=True)
    status_change_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    request = relationship("Request", back_populates="items")
    software = relationship("Software")
    room_installations = relationship(
        "RoomInstallation",
        back_populates="request_item",
        cascade="all, delete-orphan",
        order_by="RoomInstallation.assignment_date",
    )

    def __repr__(self):
        return f"<RequestItem {self.id} {self.installation_status.value if self.installation_status else '-'}>"


class RoomInstallation(Base):
    """Whether one request item is installed in one room"""
    __tablename__ = "room_installations"
    __table_args__ = (
        UniqueConstraint("request_item_id", "room_id", name="uq_room_installation_item_room"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    request_item_id = Column(GUID, ForeignKey("request_items.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(GUID, ForeignKey("rooms.id"), nullable=False, index=True)

    installed = Column(Boolean, default=False, nullable=False)
    installation_date = Column(DateTime, nullable=True)  # set iff installed
    assignment_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    comment = Column(Text, nullable=True)
    last_modified = Column(DateTime, default=datetime.utcnow, nullable=False)

    request_item = relationship("RequestItem", back_populates="room_installations")
    room = relationship("Room")

    def __repr__(self):
        return f"<RoomInstallation item={self.request_item_id} room={self.room_id} installed={self.installed}>"

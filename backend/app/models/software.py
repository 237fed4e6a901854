from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid
from app.models.infrastructure import room_software


class Software(Base):
    """Catalog entry; removal is a soft delete through `active`"""
    __tablename__ = "software"
    __table_args__ = (
        UniqueConstraint("name", "version", name="uq_software_name_version"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    publisher = Column(String(255), nullable=True)
    version = Column(String(50), nullable=False)  # major.minor.patch
    usage = Column(Text, nullable=True)
    max_duration_days = Column(Integer, default=365, nullable=False)
    license = Column(Text, nullable=True)
    logo_url = Column(String(500), nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    rooms = relationship("Room", secondary=room_software, back_populates="software")

    def __repr__(self):
        return f"<Software {self.name} {self.version}>"

from sqlalchemy import Column, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid, enum_type
from app.models.enums import AttestationStatus


class Attestation(Base):
    """Yearly confirmation that a request's software is still needed (one per request)"""
    __tablename__ = "attestations"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    request_id = Column(GUID, ForeignKey("requests.id", ondelete="CASCADE"), unique=True, nullable=False)
    academic_year = Column(String(4), nullable=False, index=True)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False, index=True)
    confirmation_date = Column(DateTime, nullable=True)
    status = Column(enum_type(AttestationStatus), default=AttestationStatus.PENDING, nullable=False, index=True)
    reminder_sent_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    request = relationship("Request", back_populates="attestation")

    def __repr__(self):
        return f"<Attestation {self.request_id} {self.status.value if self.status else '-'}>"

from sqlalchemy import Column, Text, DateTime
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid, enum_type
from app.models.enums import HistoryAction, RequestStatus, InstallationStatus


class HistoryEntry(Base):
    """
    Append-only audit trail entry.

    Ids are stored without foreign keys so entries outlive the rows they
    describe and a failed write never depends on referential state.
    """
    __tablename__ = "history_entries"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    request_id = Column(GUID, nullable=False, index=True)
    request_item_id = Column(GUID, nullable=True)
    software_id = Column(GUID, nullable=True, index=True)
    user_id = Column(GUID, nullable=False, index=True)

    action = Column(enum_type(HistoryAction), nullable=False, index=True)
    previous_status = Column(enum_type(RequestStatus, "history_previous_status_enum"), nullable=True)
    new_status = Column(enum_type(RequestStatus, "history_new_status_enum"), nullable=True)
    previous_installation_status = Column(enum_type(InstallationStatus, "history_previous_installation_status_enum"), nullable=True)
    new_installation_status = Column(enum_type(InstallationStatus, "history_new_installation_status_enum"), nullable=True)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<HistoryEntry {self.action.value if self.action else '-'} on {self.request_id}>"

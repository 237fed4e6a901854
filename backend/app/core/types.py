"""Custom SQLAlchemy types shared by the CampusSoft models"""
from sqlalchemy import TypeDecorator, String, Enum as SQLEnum
import enum
import uuid
from typing import Optional, Type


def generate_uuid() -> str:
    """Generate a UUID string"""
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """UUID stored as VARCHAR(36) on every backend, always handed back as str"""
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(value).lower()

    def process_result_value(self, value, dialect):
        if value is not None:
            return str(value)
        return value


def enum_type(enum_cls: Type[enum.Enum], name: Optional[str] = None) -> SQLEnum:
    """
    Enum column type persisted as a check-constrained string holding the
    member value (e.g. "in_progress"), so rows stay readable without the
    Python enum and no native PostgreSQL enum type has to be migrated.
    """
    return SQLEnum(
        enum_cls,
        name=name or f"{enum_cls.__name__.lower()}_enum",
        native_enum=False,
        create_constraint=True,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid, enum_type
from app.models.enums import UserRole


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    last_name = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=True)  # None for SSO-only accounts
    sso_id = Column(String(255), nullable=True)

    role = Column(enum_type(UserRole), default=UserRole.TEACHER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Role specialisations (at most one is set)
    teacher = relationship("Teacher", back_populates="user", uselist=False, cascade="all, delete-orphan")
    it_service_member = relationship("ITServiceMember", back_populates="user", uselist=False, cascade="all, delete-orphan")
    administrator = relationship("Administrator", back_populates="user", uselist=False, cascade="all, delete-orphan")

    requests = relationship("Request", back_populates="teacher")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<User {self.email} ({self.role.value if self.role else '-'})>"


class Teacher(Base):
    """Teacher profile attached to a TEACHER user"""
    __tablename__ = "teachers"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    employee_number = Column(String(50), unique=True, nullable=False, index=True)
    office = Column(String(255), nullable=True)

    user = relationship("User", back_populates="teacher")

    def __repr__(self):
        return f"<Teacher {self.employee_number}>"


class ITServiceMember(Base):
    """IT service profile attached to an IT_SERVICE user"""
    __tablename__ = "it_service_members"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    user = relationship("User", back_populates="it_service_member")


class Administrator(Base):
    """Administrator profile attached to an ADMIN user"""
    __tablename__ = "administrators"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    user = relationship("User", back_populates="administrator")

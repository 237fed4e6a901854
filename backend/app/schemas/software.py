"""
Software catalog schemas
"""
from pydantic import Field
from typing import Optional
from datetime import datetime

from app.schemas.common import InputModel, OrmModel


class SoftwareCreate(InputModel):
    """Version format and duration limit are checked by SoftwareService"""
    name: str = Field(..., min_length=1, max_length=255)
    publisher: Optional[str] = Field(None, max_length=255)
    version: str = Field(..., min_length=1, max_length=50, description="major.minor.patch")
    usage: Optional[str] = None
    max_duration_days: int = Field(default=365, ge=1)
    license: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=500)
    active: bool = True


class SoftwareUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    publisher: Optional[str] = Field(None, max_length=255)
    version: Optional[str] = Field(None, min_length=1, max_length=50)
    usage: Optional[str] = None
    max_duration_days: Optional[int] = Field(None, ge=1)
    license: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=500)
    active: Optional[bool] = None


class SoftwareResponse(OrmModel):
    id: str
    name: str
    publisher: Optional[str] = None
    version: str
    usage: Optional[str] = None
    max_duration_days: int
    license: Optional[str] = None
    logo_url: Optional[str] = None
    active: bool
    created_at: datetime


class InstalledInResponse(OrmModel):
    software_id: str
    room_id: str
    installed: bool

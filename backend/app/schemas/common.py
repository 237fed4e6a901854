"""
Shared schema bases
"""
from pydantic import BaseModel


class InputModel(BaseModel):
    """Base for request bodies: unknown fields are rejected"""

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class OrmModel(BaseModel):
    """Base for responses built from ORM objects"""

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str

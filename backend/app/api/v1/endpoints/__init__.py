# API endpoints
from . import (
    auth,
    departments,
    rooms,
    software,
    users,
    requests,
    installations,
    request_items,
    attestations,
    history,
)

__all__ = [
    "auth",
    "departments",
    "rooms",
    "software",
    "users",
    "requests",
    "installations",
    "request_items",
    "attestations",
    "history",
]

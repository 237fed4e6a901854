from fastapi import APIRouter
from app.api.v1.endpoints import (
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

api_router = APIRouter()


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": "campussoft-backend"}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(departments.router, prefix="/departments", tags=["Departments"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["Rooms"])
api_router.include_router(software.router, prefix="/software", tags=["Software"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(users.teachers_router, prefix="/teachers", tags=["Users"])
api_router.include_router(users.it_service_router, prefix="/it-service", tags=["Users"])
api_router.include_router(requests.router, prefix="/requests", tags=["Requests"])
api_router.include_router(installations.router, prefix="/requests", tags=["Installation"])
api_router.include_router(request_items.router, prefix="/request-items", tags=["Request Items"])
api_router.include_router(attestations.router, prefix="/attestations", tags=["Attestations"])
api_router.include_router(history.router, prefix="/history", tags=["History"])

from fastapi import APIRouter
from app.api.v1.endpoints import admin, auth, deals, events, health, partners, rsvps, societies, society, users

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(societies.router, prefix="/societies", tags=["societies"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(rsvps.router, prefix="/rsvps", tags=["rsvps"])
api_router.include_router(society.router, prefix="/society", tags=["society"])
api_router.include_router(deals.router, prefix="/deals", tags=["deals"])
api_router.include_router(partners.router, prefix="/partners", tags=["partners"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])

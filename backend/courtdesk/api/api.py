"""
Main API router aggregator
"""
from fastapi import APIRouter

from courtdesk.api.endpoints import (
    auth,
    availability,
    cases,
    health,
    hearings,
    lawyers,
    live,
    notifications,
    public,
    reports,
)

# Mounted under /api
api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(public.router, prefix="/public", tags=["Public"])
api_router.include_router(cases.router, prefix="/cases", tags=["Cases"])
api_router.include_router(lawyers.router, prefix="/lawyers", tags=["Lawyers"])
api_router.include_router(hearings.router, prefix="/hearings", tags=["Hearings"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(availability.router, prefix="/availability", tags=["Availability"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])

# Mounted under /ws
ws_router = APIRouter()

ws_router.include_router(live.router, tags=["Real-time"])

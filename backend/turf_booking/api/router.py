"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from turf_booking.api.routes import auth, turfs, bookings, blocks

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(turfs.router)
api_router.include_router(bookings.router)
api_router.include_router(blocks.router)

# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1 import (
    auth,
    events,
    participants,
    analytics,
)

api_router = APIRouter()

api_router.include_router(auth.router,         prefix="/auth",         tags=["auth"])
api_router.include_router(events.router,       prefix="/events",       tags=["events"])
api_router.include_router(participants.router, prefix="/participants", tags=["participants"])
api_router.include_router(analytics.router,    prefix="/analytics",    tags=["analytics"])

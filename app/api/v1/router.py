"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import adapt, exercises, training, users

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    users.router, prefix="/users", tags=["Users"]
)
api_router.include_router(
    exercises.router, prefix="/exercises", tags=["Exercises"]
)
api_router.include_router(
    training.router, prefix="/users/{user_id}", tags=["Training log"]
)
api_router.include_router(
    adapt.router, prefix="/users/{user_id}", tags=["Adaptive engine"]
)

"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
reach the console through fireprobe.api.v1.dependencies.
"""

from fastapi import APIRouter

from fireprobe.api.v1.endpoints import auth, firestore, functions, health, log, session, storage

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(session.router, prefix="/session", tags=["session"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(firestore.router, prefix="/firestore", tags=["firestore"])
api_router.include_router(functions.router, prefix="/functions", tags=["functions"])
api_router.include_router(storage.router, prefix="/storage", tags=["storage"])
api_router.include_router(log.router, prefix="/log", tags=["log"])

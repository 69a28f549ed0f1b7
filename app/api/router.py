from fastapi import APIRouter
from app.api.endpoints import jobs, lifecycle, matching, health

api_router = APIRouter()
api_router.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
api_router.include_router(lifecycle.router, prefix="/lifecycle", tags=["Lifecycle"])
api_router.include_router(matching.router, prefix="/matching", tags=["Matching"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])

from fastapi import APIRouter

from src.taskflow.api.v1 import auth, organizations, projects

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(organizations.router)
api_router.include_router(projects.router)

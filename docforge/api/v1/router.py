from fastapi import APIRouter

from docforge.api.v1.endpoints import artifacts, projects, stages, templates

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(templates.router, prefix="/templates", tags=["Templates"])
api_router.include_router(stages.router, prefix="/stages", tags=["Stages"])
api_router.include_router(artifacts.router, prefix="/artifacts", tags=["Artifacts"])

__all__ = ["api_router"]

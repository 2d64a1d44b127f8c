"""FastAPI dependencies.

Process-wide clients live on ``app.state`` (built in the lifespan); each
request gets its own session and artifact store.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from docforge.core.config import Settings, settings
from docforge.core.database import DatabaseClient
from docforge.core.gateway import LLMGateway
from docforge.repositories.artifact_store import ArtifactStore
from docforge.services.orchestrator import PipelineOrchestrator
from docforge.services.project_service import ProjectService
from docforge.services.storage_service import StorageService


def get_app_settings() -> Settings:
    return settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: DatabaseClient = request.app.state.database
    async for session in database.session():
        yield session


def get_gateway(request: Request) -> LLMGateway:
    return request.app.state.gateway


def get_storage(request: Request) -> StorageService:
    return request.app.state.storage


def get_artifact_store(
    db_session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ArtifactStore:
    return ArtifactStore(db_session)


def get_orchestrator(
    store: Annotated[ArtifactStore, Depends(get_artifact_store)],
    gateway: Annotated[LLMGateway, Depends(get_gateway)],
    storage: Annotated[StorageService, Depends(get_storage)],
    app_settings: Annotated[Settings, Depends(get_app_settings)],
) -> PipelineOrchestrator:
    return PipelineOrchestrator(store, gateway, app_settings, storage=storage)


def get_project_service(
    store: Annotated[ArtifactStore, Depends(get_artifact_store)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> ProjectService:
    return ProjectService(store, storage=storage)

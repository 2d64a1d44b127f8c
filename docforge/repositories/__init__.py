"""Repository layer modules."""

from docforge.repositories.artifact_store import ArtifactStore
from docforge.repositories.base_repository import BaseRepository

__all__ = [
    "ArtifactStore",
    "BaseRepository",
]

"""docforge - LLM-backed artifact generation pipeline for project teams."""

__version__ = "0.1.0"

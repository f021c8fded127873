"""API routers."""

from .chat import router as chat_router
from .documents import router as documents_router
from .health import router as health_router
from .study import router as study_router
from .subjects import router as subjects_router

__all__ = [
    "chat_router",
    "documents_router",
    "health_router",
    "study_router",
    "subjects_router",
]

from app.routers.auth import router as auth_router
from app.routers.diagrams import router as diagrams_router
from app.routers.editor import router as editor_router

__all__ = ["auth_router", "diagrams_router", "editor_router"]

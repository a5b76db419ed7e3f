from app.models.user import User
from app.models.diagram import Diagram

__all__ = ["User", "Diagram"]

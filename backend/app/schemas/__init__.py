from app.schemas.auth import UserCreate, UserLogin, UserResponse, TokenResponse, TokenRefresh
from app.schemas.diagram import DiagramSave, DiagramResponse
from app.schemas.editor import (
    ChatMessage, CredentialStatus, CredentialUpdate, EditorState, GenerateRequest,
    GenerateResponse, MarkupUpdate, Notification,
)

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "TokenResponse", "TokenRefresh",
    "DiagramSave", "DiagramResponse",
    "ChatMessage", "CredentialStatus", "CredentialUpdate", "EditorState",
    "GenerateRequest", "GenerateResponse", "MarkupUpdate", "Notification",
]

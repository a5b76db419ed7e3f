from pydantic import BaseModel, Field

from app.schemas.diagram import DiagramResponse


class CredentialUpdate(BaseModel):
    api_key: str


class CredentialStatus(BaseModel):
    is_set: bool


class MarkupUpdate(BaseModel):
    content: str


class GenerateRequest(BaseModel):
    prompt: str = Field(..., max_length=4000)


class ChatMessage(BaseModel):
    role: str
    content: str


class EditorState(BaseModel):
    markup: str
    prompt: str
    render_key: int
    render_pending: bool
    error: str | None
    in_progress: bool
    credential_set: bool
    messages: list[ChatMessage] = []


class GenerateResponse(BaseModel):
    ok: bool
    markup: str
    error: str | None = None
    state: EditorState


class PromptSuggestion(BaseModel):
    id: str
    title: str
    prompt: str
    description: str | None = None


class PromptCategory(BaseModel):
    id: str
    name: str
    prompts: list[PromptSuggestion]


class CatalogResponse(BaseModel):
    examples: dict[str, str]
    example_prompts: list[str]
    categories: list[PromptCategory]


class Notification(BaseModel):
    title: str
    description: str
    variant: str = "default"


class GalleryResponse(BaseModel):
    authenticated: bool
    my_diagrams: list[DiagramResponse]
    public_diagrams: list[DiagramResponse]
    notifications: list[Notification]

"""
Editor Router for Mermaid Studio

Prompt-to-diagram generation, markup edits, the example catalog, the gallery
lists and the stored API credential.
"""
from typing import Annotated
from uuid import UUID
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models.user import User
from app.routers.auth import get_optional_user
from app.schemas.diagram import DiagramResponse, DiagramSave
from app.schemas.editor import (
    CatalogResponse, CredentialStatus, CredentialUpdate, EditorState,
    GalleryResponse, GenerateRequest, GenerateResponse, MarkupUpdate,
)
from app.services.catalog import EXAMPLES, EXAMPLE_PROMPTS, PROMPT_CATEGORIES
from app.services.credential_service import CredentialHolder
from app.services.diagram_service import DiagramService
from app.services.editor_service import EditorSession
from app.services.gallery_service import DiagramGallery
from app.exceptions import InvalidInputException

router = APIRouter(prefix="/api", tags=["Editor"])


def get_editor(request: Request) -> EditorSession:
    return request.app.state.editor


def get_credentials(request: Request) -> CredentialHolder:
    return request.app.state.credentials


# ==================== Credential ====================

@router.get("/credential", response_model=CredentialStatus)
async def credential_status(credentials: Annotated[CredentialHolder, Depends(get_credentials)]):
    return CredentialStatus(is_set=credentials.is_set())


@router.put("/credential", response_model=CredentialStatus)
async def set_credential(
    data: CredentialUpdate,
    credentials: Annotated[CredentialHolder, Depends(get_credentials)]
):
    """
    Raises:
        InvalidInputException: blank key
    """
    if not credentials.set(data.api_key):
        raise InvalidInputException("api_key", "API key cannot be blank")
    return CredentialStatus(is_set=True)


@router.delete("/credential", status_code=status.HTTP_204_NO_CONTENT)
async def clear_credential(credentials: Annotated[CredentialHolder, Depends(get_credentials)]):
    credentials.clear()


# ==================== Editor ====================

@router.get("/editor", response_model=EditorState)
async def editor_state(editor: Annotated[EditorSession, Depends(get_editor)]):
    return editor.snapshot()


@router.put("/editor/markup", response_model=EditorState)
async def update_markup(
    data: MarkupUpdate,
    editor: Annotated[EditorSession, Depends(get_editor)]
):
    editor.set_markup(data.content)
    return editor.snapshot()


@router.post("/editor/generate", response_model=GenerateResponse)
async def generate_diagram(
    data: GenerateRequest,
    editor: Annotated[EditorSession, Depends(get_editor)]
):
    """
    Errors are reported inline in the response, not as HTTP failures.

    Anonymous callers are allowed; every request spends the shared
    process-wide API key.
    """
    outcome = await editor.generate(data.prompt)
    return GenerateResponse(
        ok=outcome.ok, markup=outcome.markup, error=outcome.error, state=editor.snapshot()
    )


@router.post("/editor/reset", response_model=EditorState)
async def reset_editor(editor: Annotated[EditorSession, Depends(get_editor)]):
    editor.reset()
    return editor.snapshot()


@router.post("/editor/examples/{name}", response_model=EditorState)
async def load_example(
    name: str,
    editor: Annotated[EditorSession, Depends(get_editor)]
):
    """
    Raises:
        ExampleNotFoundException: unknown example name
    """
    editor.load_example(name)
    return editor.snapshot()


@router.get("/editor/catalog", response_model=CatalogResponse)
async def catalog():
    return CatalogResponse(
        examples=EXAMPLES, example_prompts=EXAMPLE_PROMPTS, categories=PROMPT_CATEGORIES
    )


async def load_gallery(
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[User | None, Depends(get_optional_user)]
) -> DiagramGallery:
    diagram_gallery = DiagramGallery(DiagramService(db), identity)
    await diagram_gallery.load()
    return diagram_gallery


def gallery_response(diagram_gallery: DiagramGallery) -> GalleryResponse:
    identity = diagram_gallery.identity
    return GalleryResponse(
        authenticated=identity is not None,
        my_diagrams=[DiagramResponse.model_validate(d) for d in diagram_gallery.my_diagrams],
        public_diagrams=[DiagramResponse.model_validate(d) for d in diagram_gallery.public_diagrams],
        notifications=diagram_gallery.notifications,
    )


@router.get("/editor/gallery", response_model=GalleryResponse)
async def gallery(diagram_gallery: Annotated[DiagramGallery, Depends(load_gallery)]):
    return gallery_response(diagram_gallery)


@router.post("/editor/gallery", response_model=GalleryResponse)
async def save_to_gallery(
    data: DiagramSave,
    diagram_gallery: Annotated[DiagramGallery, Depends(load_gallery)]
):
    """Save failures come back as notifications with the lists unchanged."""
    await diagram_gallery.save(data)
    return gallery_response(diagram_gallery)


@router.delete("/editor/gallery/{diagram_id}", response_model=GalleryResponse)
async def delete_from_gallery(
    diagram_id: UUID,
    diagram_gallery: Annotated[DiagramGallery, Depends(load_gallery)]
):
    await diagram_gallery.delete(diagram_id)
    return gallery_response(diagram_gallery)

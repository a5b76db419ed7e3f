"""
Diagrams Router for Mermaid Studio

Save / open / list / delete of persisted Mermaid diagrams.
"""
from uuid import UUID
from typing import Annotated
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models.user import User
from app.routers.auth import get_optional_user
from app.services.diagram_service import DiagramService
from app.schemas.diagram import DiagramSave, DiagramResponse
from app.exceptions import DiagramNotFoundException

router = APIRouter(prefix="/api/diagrams", tags=["Diagrams"])


@router.post("", response_model=DiagramResponse)
async def save_diagram(
    data: DiagramSave,
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[User | None, Depends(get_optional_user)]
):
    """
    Insert (no id) or update (id present) a diagram.

    Raises:
        UnauthenticatedException: anonymous caller
        PersistenceException: update target missing or not owned
    """
    service = DiagramService(db)
    return await service.save(data, identity)


@router.get("/mine", response_model=list[DiagramResponse])
async def list_my_diagrams(
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[User | None, Depends(get_optional_user)]
):
    service = DiagramService(db)
    return await service.list_mine(identity)


@router.get("/public", response_model=list[DiagramResponse])
async def list_public_diagrams(db: Annotated[AsyncSession, Depends(get_db)]):
    service = DiagramService(db)
    return await service.list_public()


@router.get("/{diagram_id}", response_model=DiagramResponse)
async def get_diagram(
    diagram_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    service = DiagramService(db)
    diagram = await service.get(diagram_id)
    if not diagram:
        raise DiagramNotFoundException()
    return diagram


@router.delete("/{diagram_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_diagram(
    diagram_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[User | None, Depends(get_optional_user)]
):
    """
    Raises:
        UnauthenticatedException: anonymous caller
        DiagramNotFoundException: nothing deleted (missing or owned by someone else)
    """
    service = DiagramService(db)
    if not await service.delete(diagram_id, identity):
        raise DiagramNotFoundException()

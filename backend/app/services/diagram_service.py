from uuid import UUID
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.diagram import Diagram, DEFAULT_TITLE
from app.models.user import User
from app.schemas.diagram import DiagramSave
from app.exceptions import InvalidInputException, PersistenceException, UnauthenticatedException
from app.utils.logging_config import diagram_logger


def require_identity(identity: User | None) -> User:
    if identity is None:
        raise UnauthenticatedException()
    return identity


class DiagramService:
    """
    Diagram persistence scoped to the caller's identity.

    Writes and deletes only touch rows owned by the caller; get() is unscoped
    so any known id can be opened, list_public() works anonymously.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, data: DiagramSave, identity: User | None) -> Diagram:
        """
        Insert (no id) or update (id present) a diagram owned by identity.

        Raises:
            UnauthenticatedException: no identity
            InvalidInputException: blank content
            PersistenceException: update target missing/not owned, or DB failure
        """
        user = require_identity(identity)
        if not data.content or not data.content.strip():
            raise InvalidInputException("content", "Diagram content cannot be empty")
        title = data.title.strip() if data.title else ""

        try:
            if data.id is None:
                diagram = Diagram(
                    title=title or DEFAULT_TITLE,
                    description=data.description,
                    content=data.content,
                    thumbnail_url=data.thumbnail_url,
                    is_public=data.is_public,
                    owner_id=user.id,
                )
                self.db.add(diagram)
            else:
                diagram = await self._get_owned(data.id, user.id)
                if diagram is None:
                    raise PersistenceException(
                        "Diagram could not be saved", {"diagram_id": str(data.id)}
                    )
                diagram.title = title or DEFAULT_TITLE
                diagram.description = data.description
                diagram.content = data.content
                diagram.thumbnail_url = data.thumbnail_url
                diagram.is_public = data.is_public
            await self.db.commit()
            await self.db.refresh(diagram)
        except SQLAlchemyError as e:
            await self.db.rollback()
            diagram_logger.error(f"Saving diagram failed: {e}")
            raise PersistenceException("Diagram could not be saved") from e

        diagram_logger.info(
            "Diagram saved",
            extra={"diagram_id": str(diagram.id), "owner_id": str(user.id)},
        )
        return diagram

    async def get(self, diagram_id: UUID) -> Diagram | None:
        try:
            result = await self.db.execute(select(Diagram).where(Diagram.id == diagram_id))
        except SQLAlchemyError as e:
            raise PersistenceException("Diagram could not be loaded") from e
        return result.scalar_one_or_none()

    async def list_mine(self, identity: User | None) -> list[Diagram]:
        user = require_identity(identity)
        return await self._list(
            select(Diagram)
            .where(Diagram.owner_id == user.id)
            .order_by(Diagram.updated_at.desc())
        )

    async def list_public(self) -> list[Diagram]:
        return await self._list(
            select(Diagram)
            .where(Diagram.is_public.is_(True))
            .order_by(Diagram.updated_at.desc())
        )

    async def delete(self, diagram_id: UUID, identity: User | None) -> bool:
        """Delete an owned diagram. Returns False when nothing matched (missing or not owned)."""
        user = require_identity(identity)
        try:
            result = await self.db.execute(
                delete(Diagram).where(Diagram.id == diagram_id, Diagram.owner_id == user.id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceException("Diagram could not be deleted") from e

        deleted = result.rowcount > 0
        diagram_logger.info(
            f"Diagram delete {'applied' if deleted else 'matched no rows'}",
            extra={"diagram_id": str(diagram_id), "deleted_by": str(user.id)},
        )
        return deleted

    async def _get_owned(self, diagram_id: UUID, owner_id: UUID) -> Diagram | None:
        result = await self.db.execute(
            select(Diagram).where(Diagram.id == diagram_id, Diagram.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def _list(self, query) -> list[Diagram]:
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise PersistenceException("Diagrams could not be loaded") from e
        return list(result.scalars().all())

from uuid import UUID

from app.exceptions import AppException
from app.models.diagram import Diagram
from app.models.user import User
from app.schemas.diagram import DiagramSave
from app.schemas.editor import Notification
from app.services.diagram_service import DiagramService
from app.utils.logging_config import diagram_logger


class DiagramGallery:
    """
    "My diagrams" and "public diagrams" lists for one caller.

    Every action catches AppException and turns it into a notification, so the
    lists only change when the backend call succeeded.
    """

    def __init__(self, service: DiagramService, identity: User | None):
        self.service = service
        self.identity = identity
        self.my_diagrams: list[Diagram] = []
        self.public_diagrams: list[Diagram] = []
        self.notifications: list[Notification] = []

    def notify(self, title: str, description: str, variant: str = "default") -> None:
        self.notifications.append(Notification(title=title, description=description, variant=variant))

    async def load(self) -> None:
        if self.identity is not None:
            try:
                self.my_diagrams = await self.service.list_mine(self.identity)
            except AppException as exc:
                diagram_logger.warning(f"Loading user diagrams failed: {exc.message}")
                self.notify("Failed to load your diagrams", exc.message, "destructive")
        try:
            self.public_diagrams = await self.service.list_public()
        except AppException as exc:
            diagram_logger.warning(f"Loading public diagrams failed: {exc.message}")
            self.notify("Failed to load public diagrams", exc.message, "destructive")

    async def save(self, data: DiagramSave) -> Diagram | None:
        try:
            diagram = await self.service.save(data, self.identity)
        except AppException as exc:
            self.notify("Failed to save diagram", exc.message, "destructive")
            return None

        self.my_diagrams = [diagram] + [d for d in self.my_diagrams if d.id != diagram.id]
        others = [d for d in self.public_diagrams if d.id != diagram.id]
        self.public_diagrams = [diagram] + others if diagram.is_public else others
        self.notify("Diagram saved", "Your diagram has been saved successfully")
        return diagram

    async def delete(self, diagram_id: UUID) -> bool:
        try:
            deleted = await self.service.delete(diagram_id, self.identity)
        except AppException as exc:
            self.notify("Failed to delete diagram", exc.message, "destructive")
            return False

        if not deleted:
            self.notify(
                "Diagram not deleted",
                "The diagram no longer exists or belongs to another user",
                "destructive",
            )
            return False

        self.my_diagrams = [d for d in self.my_diagrams if d.id != diagram_id]
        self.public_diagrams = [d for d in self.public_diagrams if d.id != diagram_id]
        self.notify("Diagram deleted", "Your diagram has been deleted successfully")
        return True

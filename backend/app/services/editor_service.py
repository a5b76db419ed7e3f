"""
Editor state: the current markup, the prompt box, the inline error and the
conversation log, wired to the generation client and the render scheduler.
"""
import asyncio
from typing import Callable, Optional

from pydantic import BaseModel

from app.exceptions import AppException, EmptyGenerationException
from app.schemas.editor import ChatMessage, EditorState
from app.services.catalog import DEFAULT_DIAGRAM, get_example
from app.services.generation_service import GenerationClient
from app.services.render_scheduler import DEFAULT_DEBOUNCE_SECONDS, RenderScheduler
from app.services.sanitizer import sanitize_markup
from app.utils.logging_config import editor_logger


class MarkupStore:
    """Holds the current diagram markup."""

    def __init__(self, initial: str = DEFAULT_DIAGRAM, on_change: Optional[Callable[[str], None]] = None):
        self._content = initial
        self._on_change = on_change

    @property
    def content(self) -> str:
        return self._content

    def set(self, content: str) -> bool:
        """Replace the markup. Returns False when the value is unchanged."""
        if content == self._content:
            return False
        self._content = content
        if self._on_change is not None:
            self._on_change(content)
        return True


class GenerationOutcome(BaseModel):
    ok: bool
    markup: str
    error: Optional[str] = None


class EditorSession:
    def __init__(
        self,
        client: GenerationClient,
        store: Optional[MarkupStore] = None,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.client = client
        self.store = store or MarkupStore()
        self.prompt = ""
        self.error: Optional[str] = None
        self.messages: list[ChatMessage] = []
        self.scheduler = RenderScheduler(delay=debounce, on_cycle_start=self.clear_error, loop=loop)

    @property
    def markup(self) -> str:
        return self.store.content

    @property
    def render_key(self) -> int:
        return self.scheduler.render_key

    @property
    def in_progress(self) -> bool:
        return self.client.in_progress

    def clear_error(self) -> None:
        self.error = None

    def set_markup(self, content: str) -> None:
        if self.store.set(content):
            self.scheduler.schedule()

    async def generate(self, prompt: Optional[str] = None) -> GenerationOutcome:
        """
        Generate markup for the prompt and load it into the editor.

        Failures never propagate: the message lands in self.error and the
        current markup is left untouched.
        """
        submitted = self.prompt if prompt is None else prompt
        # A refused second submission must not replace the prompt of the running one
        if not self.client.in_progress:
            self.prompt = submitted
        try:
            raw = await self.client.generate(submitted)
            markup = sanitize_markup(raw)
            if not markup:
                raise EmptyGenerationException()
        except AppException as exc:
            self.error = exc.message
            editor_logger.warning(f"Generation failed: {exc.code.value} {exc.message}")
            return GenerationOutcome(ok=False, markup=self.markup, error=exc.message)

        self.messages.append(ChatMessage(role="user", content=submitted.strip()))
        self.messages.append(ChatMessage(role="assistant", content=markup))
        self.clear_error()
        self.set_markup(markup)
        return GenerationOutcome(ok=True, markup=markup)

    def reset(self) -> None:
        self.prompt = ""
        self.set_markup(DEFAULT_DIAGRAM)

    def load_example(self, name: str) -> str:
        markup = get_example(name)
        self.set_markup(markup)
        return markup

    def snapshot(self) -> EditorState:
        return EditorState(
            markup=self.markup,
            prompt=self.prompt,
            render_key=self.render_key,
            render_pending=self.scheduler.pending,
            error=self.error,
            in_progress=self.in_progress,
            credential_set=self.client.credentials.is_set(),
            messages=list(self.messages),
        )

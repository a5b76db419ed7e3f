"""
Debounced render trigger for the diagram preview.

Every markup change calls schedule(). The scheduler owns a single timer slot:
the pending timer is cancelled before a new one is armed, so only the last
change inside a quiescence window bumps the render key.
"""
import asyncio
from typing import Callable, Optional

from app.utils.logging_config import editor_logger

DEFAULT_DEBOUNCE_SECONDS = 0.3


class RenderScheduler:
    def __init__(
        self,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        on_cycle_start: Optional[Callable[[], None]] = None,
        on_render: Optional[Callable[[int], None]] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.delay = delay
        self.render_key = 0
        self._on_cycle_start = on_cycle_start
        self._on_render = on_render
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        """Restart the debounce window; clears the visible error first."""
        self.cancel()
        if self._on_cycle_start is not None:
            self._on_cycle_start()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.render_key += 1
        editor_logger.debug(f"Render triggered (key={self.render_key})")
        if self._on_render is not None:
            self._on_render(self.render_key)

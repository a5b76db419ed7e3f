import json
from pathlib import Path
from typing import Optional

from app.utils.logging_config import get_logger

logger = get_logger(__name__)


class CredentialHolder:
    """
    Holds the client-supplied API key for the generation endpoint.

    The key lives in a named slot of a small JSON file so it survives restarts.
    load() runs at startup and clear() on sign-out. Without a store path the
    key is kept in memory only. The key itself is never validated here; a bad
    key shows up as an authorization error from the upstream endpoint.
    """

    def __init__(self, store_path: Optional[str | Path] = None, key_name: str = "openai_api_key"):
        self.store_path = Path(store_path) if store_path else None
        self.key_name = key_name
        self._key: Optional[str] = None

    def load(self) -> None:
        self._key = self._read_slot().get(self.key_name) or None
        logger.info(f"Credential slot loaded (set={self.is_set()})")

    def set(self, key: str) -> bool:
        """Store a non-blank key. Returns False and changes nothing otherwise."""
        if not key or not key.strip():
            return False
        self._key = key.strip()
        slot = self._read_slot()
        slot[self.key_name] = self._key
        self._write_slot(slot)
        logger.info("API credential stored")
        return True

    def is_set(self) -> bool:
        return bool(self._key)

    def get(self) -> Optional[str]:
        return self._key

    def clear(self) -> None:
        self._key = None
        slot = self._read_slot()
        if slot.pop(self.key_name, None) is not None:
            self._write_slot(slot)
        logger.info("API credential cleared")

    def _read_slot(self) -> dict[str, str]:
        if self.store_path is None or not self.store_path.exists():
            return {}
        try:
            data = json.loads(self.store_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable credential store {self.store_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_slot(self, slot: dict[str, str]) -> None:
        if self.store_path is None:
            return
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        self.store_path.write_text(json.dumps(slot), encoding="utf-8")

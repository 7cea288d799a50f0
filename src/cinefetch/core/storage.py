"""Key-value byte stores backing the movie cache."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional, Protocol, Union, runtime_checkable
from uuid import uuid4

from loguru import logger


@runtime_checkable
class KeyValueStore(Protocol):
    """Single-namespace byte store."""

    def get(self, key: str) -> Optional[bytes]:
        """Return the stored bytes or None."""
        ...

    def set(self, key: str, value: bytes) -> None:
        """Replace the value stored at key."""
        ...

    def delete(self, key: str) -> bool:
        """Remove key; return True if something was removed."""
        ...


class InMemoryStore:
    """Process-local store. Contents are lost when the process exits."""

    def __init__(self) -> None:
        self._data: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None


class FileStore:
    """
    One file per key under a base directory.

    Writes go to a temp file that is then renamed over the target, so a reader
    sees either the previous value or the new one, never a partial write.
    """

    _UNSAFE = re.compile(r"[^A-Za-z0-9._-]")

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path).expanduser()
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Initialized FileStore at {self.base_path}")

    def path_for(self, key: str) -> Path:
        """Filesystem path for key."""
        safe = self._UNSAFE.sub("_", key.strip()) or "_"
        return self.base_path / f"{safe}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Failed to read {path}: {e}")
            return None

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        temp_path = path.with_name(f"{path.name}.{uuid4().hex}.tmp")
        try:
            temp_path.write_bytes(value)
            temp_path.replace(path)
            logger.debug(f"Stored {len(value)} bytes at {path}")
        except Exception as e:
            if temp_path.exists():
                temp_path.unlink()
            logger.error(f"Failed to store data at {path}: {e}")
            raise

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if path.exists():
            path.unlink()
            return True
        return False

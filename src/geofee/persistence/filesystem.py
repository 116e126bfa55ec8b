"""File-based persistence for short-lived location documents."""

from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Optional

from ..config import settings

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileBackend:
    """Stores one JSON document per key under ``root``."""

    def __init__(self, root: Path | None = None) -> None:
        base = root or settings.location_store_path
        if base is None:
            raise ValueError("A root directory is required for file-based location storage.")
        self.root = Path(base).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self.root / f"{_SAFE_KEY.sub('_', key)}.json"

    def read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return None
            try:
                with path.open("r", encoding="utf-8") as handle:
                    return json.load(handle)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Discarding unreadable location document {path.name}: {e}")
                path.unlink(missing_ok=True)
                return None

    def write(self, key: str, data: Any, *, indent: int = 2) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        with self._lock:
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=indent)
            tmp_path.replace(path)

    def delete(self, key: str) -> None:
        with self._lock:
            self._path(key).unlink(missing_ok=True)

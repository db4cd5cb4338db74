"""Local processed-order records.

This is an advisory, client-local guard against resubmitting the same order:
``is_processed`` and ``mark_processed`` are separate steps with no locking, so
two concurrent submissions can both pass the check. Real de-duplication
belongs to the backend's ``Idempotency-Key`` handling.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from liqpass.utils import now_ms

logger = logging.getLogger(__name__)


def order_key(order_id: str) -> str:
    return f"order_{order_id}"


class DedupeStore(Protocol):
    def is_processed(self, order_id: str) -> bool: ...

    def mark_processed(self, order_id: str, amount: float, method: str) -> None: ...


class InMemoryDedupeStore:
    def __init__(self):
        self._records: dict[str, dict] = {}

    def is_processed(self, order_id: str) -> bool:
        return order_key(order_id) in self._records

    def mark_processed(self, order_id: str, amount: float, method: str) -> None:
        self._records[order_key(order_id)] = {"timestamp": now_ms(), "amount": amount, "method": method}

    def get(self, order_id: str) -> dict | None:
        return self._records.get(order_key(order_id))


class JsonFileDedupeStore:
    """Processed orders kept in one JSON object on disk, keyed ``order_<id>``."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable dedupe store %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def is_processed(self, order_id: str) -> bool:
        return order_key(order_id) in self._load()

    def mark_processed(self, order_id: str, amount: float, method: str) -> None:
        records = self._load()
        records[order_key(order_id)] = {"timestamp": now_ms(), "amount": amount, "method": method}
        self._write(records)

    def _write(self, records: dict) -> None:
        """Replace the file atomically so a crash mid-write keeps the previous records."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get(self, order_id: str) -> dict | None:
        return self._load().get(order_key(order_id))

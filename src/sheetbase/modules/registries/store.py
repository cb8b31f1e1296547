"""
Sheetbase Registries - Durable Store

JSON file holding the last known value list per registry. Independent of
the datastore cache: entries never expire and survive restarts.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FieldRegistryStore:
    """Registry name -> sorted value list, persisted to one JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._values: dict[str, list[str]] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable registry store %s: %s", self.path, e)
            return
        if isinstance(loaded, dict):
            self._values = {
                str(k): [str(v) for v in values]
                for k, values in loaded.items()
                if isinstance(values, list)
            }

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2, ensure_ascii=False)

    def get(self, name: str) -> list[str] | None:
        values = self._values.get(name)
        return list(values) if values is not None else None

    def put(self, name: str, values: list[str]) -> None:
        self._values[name] = list(values)
        self._save()

    def remove(self, name: str) -> None:
        if self._values.pop(name, None) is not None:
            self._save()

    def clear(self) -> None:
        self._values.clear()
        self._save()

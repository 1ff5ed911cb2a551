"""JSON persistence for the to-do list."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence


logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Todo:
    """A single to-do item.

    ``id`` only lives in memory so menu handlers can tell duplicate texts
    apart; it is neither persisted nor part of equality.
    """

    text: str
    id: str = field(default_factory=_new_id, compare=False, repr=False)

    def to_dict(self) -> dict:
        return {"text": self.text}


class TodoStore:
    """Reads and writes the to-do list as an indented JSON array."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> List[Todo]:
        """Return the persisted list, or an empty one if there is nothing usable."""
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Error reading todo file %s: %s", self.path, e)
            return []
        except json.JSONDecodeError as e:
            logger.warning("Error decoding todo data in %s: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning("Ignoring todo file %s: expected a JSON array", self.path)
            return []

        todos = []
        for entry in data:
            if isinstance(entry, dict) and isinstance(entry.get("text"), str):
                todos.append(Todo(entry["text"]))
            else:
                logger.warning("Skipping malformed todo entry: %r", entry)
        return todos

    def save(self, todos: Sequence[Todo]) -> bool:
        """Overwrite the file with ``todos``. Failures are logged, not raised."""
        try:
            payload = json.dumps(
                [todo.to_dict() for todo in todos],
                indent=2,
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as e:
            logger.error("Error encoding todo data: %s", e)
            return False

        try:
            self.path.write_text(payload, encoding="utf-8")
        except OSError as e:
            logger.error("Error writing todo file %s: %s", self.path, e)
            return False

        logger.debug("Saved %d todo(s) to %s", len(todos), self.path)
        return True

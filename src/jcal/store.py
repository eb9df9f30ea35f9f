from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError as PydanticValidationError

from .errors import StoreError
from .models import ScheduleDocument

logger = logging.getLogger(__name__)

# Keys a todo record cannot keep; they are dropped on load
_DETAILED_ONLY_KEYS = ("dateTime", "content")


def _warn_todo_extras(data: Any, path: Path) -> None:
    if not isinstance(data, dict) or not isinstance(data.get("schedules"), list):
        return
    for item in data["schedules"]:
        if not isinstance(item, dict) or item.get("type", item.get("kind")) != "todo":
            continue
        dropped = [key for key in _DETAILED_ONLY_KEYS if key in item]
        if dropped:
            logger.warning(
                "%s: todo %s carries %s; dropped on the next save",
                path,
                item.get("id"),
                ", ".join(dropped),
            )


class JsonScheduleStore:
    """
    Persists the whole schedule collection as one JSON document.

    Shape: {"schedules": [...]}, UTF-8, 2-space indentation. A missing file
    loads as an empty collection and is created on first save.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> ScheduleDocument:
        """
        Read the document. Missing file -> empty document; other OS errors propagate.

        Raises StoreError when the file is not valid JSON or not a valid document.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No store at %s, starting empty", self._path)
            return ScheduleDocument()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"{self._path} is not valid JSON: {e}") from e
        _warn_todo_extras(data, self._path)
        try:
            document = ScheduleDocument.model_validate(data)
        except PydanticValidationError as e:
            raise StoreError(f"{self._path} is not a valid schedule document: {e}") from e

        logger.debug("Loaded %d schedules from %s", len(document.schedules), self._path)
        return document

    def dumps(self, document: ScheduleDocument) -> str:
        return json.dumps(document.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)

    def save(self, document: ScheduleDocument) -> None:
        """Write the document through a temp file swapped in with os.replace."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp.write_text(self.dumps(document), encoding="utf-8")
            os.replace(tmp, self._path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Saved %d schedules to %s", len(document.schedules), self._path)

    def init(self) -> bool:
        """
        Create an empty store unless one with schedules already exists.
        Returns True when a file was written.
        """
        if self.load().schedules:
            return False
        self.save(ScheduleDocument())
        return True

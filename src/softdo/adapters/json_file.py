"""JSON file task storage adapter."""

import json
import logging
import os
from pathlib import Path

from softdo.core.tasks import Task
from softdo.ports.task_repo import RepositoryUnreadable

logger = logging.getLogger(__name__)


class JsonTaskFile:
    """
    JSON file task storage.

    Implements TaskRepository protocol. The whole list is one JSON array of
    task records, rewritten on every save.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> list[Task]:
        """
        Load all tasks. A missing file is an empty list.

        Raises RepositoryUnreadable if the file is not a JSON array.
        Individual malformed records are skipped.
        """
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RepositoryUnreadable(f"Task file {self.path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise RepositoryUnreadable(f"Task file {self.path} does not hold a list")

        tasks = []
        for record in data:
            try:
                tasks.append(Task.from_record(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed task record {record!r}: {e}")
        return tasks

    def save(self, tasks: list[Task]) -> None:
        """Replace the file contents with tasks. OS errors propagate."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([t.to_record() for t in tasks], ensure_ascii=False, indent=2)

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self.path)

    def fingerprint(self) -> tuple[int, int, int] | None:
        """(inode, mtime in ns, size) of the file, or None if it does not exist."""
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return None
        return (st.st_ino, st.st_mtime_ns, st.st_size)

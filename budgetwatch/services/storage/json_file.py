"""
JSON File Storage Implementation

Each namespace lives in its own JSON file holding one flat object.
JSON is used as the default backend because:
1. The user can read and fix the file by hand
2. No database setup required
3. A whole namespace is small enough to rewrite on every change

TRADEOFFS:
- Every commit rewrites the whole file (fine for a handful of accounts)
- One writer process at a time

Writes go to a temporary file next to the target which then replaces
it, so a crash mid-write leaves the previous file intact.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union

from budgetwatch.services.storage.interface import CorruptDataError, StorageError
from budgetwatch.services.storage.memory import InMemoryKeyValueStore


class JsonFileKeyValueStore(InMemoryKeyValueStore):
    """
    File-backed key-value namespace.

    The file is read once on construction; reads are then served from
    memory and every commit rewrites the file before the new state
    becomes visible.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        super().__init__(self._load())

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        """Read the namespace file. A missing file is an empty namespace."""
        if not self._path.exists():
            return {}

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptDataError(f"Cannot parse {self._path}: {e}")
        except OSError as e:
            raise StorageError(f"Cannot read {self._path}: {e}")

        if not isinstance(data, dict):
            raise CorruptDataError(
                f"Expected a JSON object in {self._path}, found {type(data).__name__}"
            )
        return data

    def _write(self, data: dict[str, Any]) -> None:
        directory = self._path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to write {self._path}: {e}")

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol


class StorageReadError(Exception):
    """Raised by a persistence backend when an existing slot could not be read."""


class StorageWriteError(Exception):
    """Raised by a persistence backend when the slot could not be written."""


class Persistence(Protocol):
    """Protocol describing the durable storage slot used by the recipe store."""

    def load(self) -> Optional[bytes]:
        """Return the stored value, or ``None`` when the slot does not exist.

        Any other failure raises :class:`StorageReadError`.
        """

    def save(self, data: bytes) -> None:
        """Replace the stored value or raise :class:`StorageWriteError`."""


class FilePersistence(Persistence):
    """Stores the slot as a single JSON file on the local filesystem."""

    def __init__(self, path: os.PathLike | str) -> None:
        self._path = Path(path)

    @classmethod
    def in_directory(cls, directory: os.PathLike | str, key: str = "recipes") -> "FilePersistence":
        return cls(Path(directory) / f"{key}.json")

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[bytes]:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageReadError(f"Could not read {self._path}: {exc}") from exc

    def save(self, data: bytes) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Write next to the target and swap it in so a failed write never
            # leaves a truncated file behind.
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageWriteError(f"Could not write {self._path}: {exc}") from exc


__all__ = ["FilePersistence", "Persistence", "StorageReadError", "StorageWriteError"]

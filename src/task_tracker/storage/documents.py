"""
task_tracker.storage.documents

Filesystem-backed content store for task documents.

Responsibilities:
- Write, read, locate, check and delete blobs addressed by their stored name.
- Refuse names that could escape the upload directory.
"""

from __future__ import annotations

from pathlib import Path


class DocumentStore:
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, name: str) -> Path | None:
        # Stored names are flat; anything with a separator or a dot-segment is not ours.
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            return None
        return self._root / name

    def write(self, name: str, data: bytes) -> None:
        path = self._resolve(name)
        if path is None:
            raise ValueError(f"invalid document name: {name!r}")
        self._root.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def path_for(self, name: str) -> Path | None:
        """Location of a stored document, or `None` if the name is invalid or absent."""

        path = self._resolve(name)
        if path is None or not path.is_file():
            return None
        return path

    def exists(self, name: str) -> bool:
        return self.path_for(name) is not None

    def read(self, name: str) -> bytes | None:
        path = self.path_for(name)
        return None if path is None else path.read_bytes()

    def delete(self, name: str) -> None:
        path = self._resolve(name)
        if path is not None:
            path.unlink(missing_ok=True)


# --- Module Notes -----------------------------------------------------------
# Writes are synchronous on the event loop; documents are size-capped by settings.

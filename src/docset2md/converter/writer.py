"""Markdown file output with per-run write statistics."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class WriteStats:
    files_written: int = 0
    directories_created: int = 0
    bytes_written: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "files_written": self.files_written,
            "directories_created": self.directories_created,
            "bytes_written": self.bytes_written,
        }


class FileWriter:
    """Write UTF-8 text files, creating parent directories once per run."""

    def __init__(self) -> None:
        self._created_dirs: set[Path] = set()
        self._files_written = 0
        self._bytes_written = 0

    def reset(self) -> None:
        self._created_dirs.clear()
        self._files_written = 0
        self._bytes_written = 0

    def ensure_dir(self, directory: Path) -> None:
        if directory in self._created_dirs:
            return
        directory.mkdir(parents=True, exist_ok=True)
        self._created_dirs.add(directory)

    def write(self, file_path: Path, content: str) -> None:
        payload = content.encode("utf-8")
        self.ensure_dir(file_path.parent)
        file_path.write_bytes(payload)
        self._files_written += 1
        self._bytes_written += len(payload)

    def stats(self) -> WriteStats:
        return WriteStats(
            files_written=self._files_written,
            directories_created=len(self._created_dirs),
            bytes_written=self._bytes_written,
        )

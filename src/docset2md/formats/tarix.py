"""Random access to members of Dash ``tarix.tgz`` archives."""

from __future__ import annotations

from collections import OrderedDict
import logging
from pathlib import Path
import tarfile

from docset2md.formats.base import connect_readonly


logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 1000


class TarixArchive:
    """Indexed gzip tar archive with an LRU cache of decoded members.

    ``tarixIndex.db`` lists the member paths in its ``tarindex`` table; a
    path that is not indexed is treated as absent without touching the
    archive.
    """

    def __init__(
        self,
        archive_path: str | Path,
        index_path: str | Path,
        *,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> None:
        self.archive_path = Path(archive_path)
        self.index_path = Path(index_path)
        if not self.archive_path.is_file():
            raise FileNotFoundError(f"Tarix archive not found: {self.archive_path}")
        self._index = connect_readonly(self.index_path)
        self._cache_size = cache_size
        self._cache: OrderedDict[str, str] = OrderedDict()
        self._tar: tarfile.TarFile | None = None

    def has_file(self, path: str) -> bool:
        row = self._index.execute("SELECT hash FROM tarindex WHERE path = ?", (path,)).fetchone()
        return row is not None

    def list_paths(self, pattern: str | None = None) -> list[str]:
        if pattern is None:
            rows = self._index.execute("SELECT path FROM tarindex ORDER BY path").fetchall()
        else:
            rows = self._index.execute(
                "SELECT path FROM tarindex WHERE path LIKE ? ORDER BY path",
                (pattern,),
            ).fetchall()
        return [row["path"] for row in rows]

    def extract_file(self, path: str) -> str:
        """Return a member decoded as UTF-8; raise KeyError when it is absent."""

        cached = self._cache.get(path)
        if cached is not None:
            self._cache.move_to_end(path)
            return cached

        if not self.has_file(path):
            raise KeyError(f"File not found in tarix index: {path}")

        content = self._read_member(path)
        self._cache[path] = content
        if len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return content

    def _archive(self) -> tarfile.TarFile:
        if self._tar is None:
            logger.debug("Opening tarix archive %s", self.archive_path)
            self._tar = tarfile.open(self.archive_path, mode="r:gz")
        return self._tar

    def _read_member(self, path: str) -> str:
        archive = self._archive()
        for candidate in (path, f"./{path}"):
            try:
                member = archive.getmember(candidate)
            except KeyError:
                continue
            handle = archive.extractfile(member)
            if handle is None:
                break
            with handle:
                return handle.read().decode("utf-8", errors="replace")
        raise KeyError(f"File not found in tar: {path}")

    def close(self) -> None:
        if self._tar is not None:
            self._tar.close()
            self._tar = None
        self._index.close()
        self._cache.clear()

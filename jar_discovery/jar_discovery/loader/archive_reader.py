"""Archive reader interface and its ``zipfile`` implementation."""

from __future__ import annotations

import hashlib
import logging
import zipfile
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from jar_discovery.errors import ArchiveReadError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1 << 20


@runtime_checkable
class ArchiveReader(Protocol):
    """Yields the entries of one archive together with its file metadata."""

    @property
    def location(self) -> str: ...

    @property
    def size(self) -> int: ...

    @property
    def last_modified(self) -> datetime: ...

    def checksum(self) -> str:
        """Return a content hash of the whole archive."""
        ...

    def entries(self) -> Iterator[tuple[str, bytes]]:
        """Yield ``(entry path, raw bytes)`` for every file entry.

        Raises:
            ArchiveReadError: If the archive or an entry cannot be read.
        """
        ...


class ZipArchiveReader:
    """Read a JAR (or any zip) from the local filesystem.

    Parameters
    ----------
    path:
        Archive on disk.
    location:
        Reported location; defaults to ``str(path)``.  Useful when the file
        is a local copy of a remote artifact.

    Raises
    ------
    ArchiveReadError
        If *path* cannot be stat'ed.
    """

    def __init__(self, path: Path | str, *, location: str | None = None) -> None:
        self._path = Path(path)
        self._location = location or str(path)
        try:
            stat = self._path.stat()
        except OSError as exc:
            raise ArchiveReadError(f"failed to stat archive {self._path}, {exc}") from exc
        self._size = stat.st_size
        self._last_modified = datetime.fromtimestamp(stat.st_mtime, tz=UTC)

    @property
    def location(self) -> str:
        return self._location

    @property
    def size(self) -> int:
        return self._size

    @property
    def last_modified(self) -> datetime:
        return self._last_modified

    def checksum(self) -> str:
        """Return the SHA-256 hex digest of the archive bytes."""
        digest = hashlib.sha256()
        try:
            with self._path.open("rb") as fh:
                for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
                    digest.update(chunk)
        except OSError as exc:
            raise ArchiveReadError(f"failed to read archive {self._path}, {exc}") from exc
        return digest.hexdigest()

    def entries(self) -> Iterator[tuple[str, bytes]]:
        try:
            zf = zipfile.ZipFile(self._path)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveReadError(f"failed to open archive {self._path}, {exc}") from exc

        with zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                try:
                    data = zf.read(info)
                # RuntimeError covers encrypted entries.
                except (OSError, zipfile.BadZipFile, RuntimeError) as exc:
                    raise ArchiveReadError(
                        f"failed to read file {info.filename} from archive, {exc}",
                        entry=info.filename,
                    ) from exc
                yield info.filename, data

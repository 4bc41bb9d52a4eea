"""Archive reading and snapshot construction."""

from jar_discovery.loader.archive_reader import ArchiveReader, ZipArchiveReader
from jar_discovery.loader.jar_loader import build_snapshot

__all__ = [
    "ArchiveReader",
    "ZipArchiveReader",
    "build_snapshot",
]

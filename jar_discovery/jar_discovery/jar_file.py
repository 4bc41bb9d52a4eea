"""Read-only facade over one archive's snapshot.

A :class:`JarFile` exposes one accessor per derived fact.  Accessors are pure
reads of the immutable snapshot (plus, for the application name and port, a
synchronous call to the supplied :class:`JvmProcess`), so calling them
repeatedly always yields the same result and they are safe to share across
threads.

Typical usage::

    jar = load_jar_file(Path("/opt/app/orders.jar"))
    jar.get_app_type()          # AppType.SPRING_BOOT_FAT_JAR
    jar.get_app_port(process)   # 9090
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from jar_discovery.config import ClassificationPatterns, Settings, load_settings
from jar_discovery.loader.archive_reader import ArchiveReader, ZipArchiveReader
from jar_discovery.loader.jar_loader import build_snapshot
from jar_discovery.models.archive import AppType, ArchiveSnapshot, DiscoveryIssue
from jar_discovery.process import JvmProcess
from jar_discovery.resolver import (
    APP_NAME_CHAIN,
    APP_PORT_CHAIN,
    APP_TYPE_CHAIN,
    ARTIFACT_NAME_CHAIN,
    JDK_VERSION_CHAIN,
    SPRING_BOOT_VERSION_CHAIN,
    VERSION_CHAIN,
    ProbeContext,
)

logger = logging.getLogger(__name__)


class JarFile:
    """Resolved metadata view of a single Java archive."""

    def __init__(self, snapshot: ArchiveSnapshot) -> None:
        self._snapshot = snapshot
        self._ctx = ProbeContext(snapshot=snapshot)

    @classmethod
    def from_archive(cls, reader: ArchiveReader, patterns: ClassificationPatterns | None = None) -> JarFile:
        """Build the snapshot from *reader* and wrap it.

        Raises
        ------
        ArchiveReadError
            If any entry of the archive cannot be read.
        """
        if patterns is None:
            patterns = ClassificationPatterns()
        return cls(build_snapshot(reader, patterns))

    @property
    def snapshot(self) -> ArchiveSnapshot:
        return self._snapshot

    @property
    def issues(self) -> tuple[DiscoveryIssue, ...]:
        """Warnings recorded while the snapshot was built."""
        return self._snapshot.issues

    # -- Derived facts --

    def get_app_type(self) -> AppType:
        return APP_TYPE_CHAIN.resolve(self._ctx)

    def get_artifact_name(self) -> str:
        """Return the artifact name; falls back to the file name, so never empty for a named file."""
        return ARTIFACT_NAME_CHAIN.resolve(self._ctx)

    def get_app_name(self, process: JvmProcess | None = None) -> str:
        """Return ``spring.application.name``, or ``""`` when no source declares it."""
        return APP_NAME_CHAIN.resolve(ProbeContext(snapshot=self._snapshot, process=process))

    def get_app_port(self, process: JvmProcess | None = None) -> int:
        """Return ``server.port``, defaulting to 8080."""
        return APP_PORT_CHAIN.resolve(ProbeContext(snapshot=self._snapshot, process=process))

    def get_build_jdk_version(self) -> str:
        return JDK_VERSION_CHAIN.resolve(self._ctx)

    def get_spring_boot_version(self) -> str:
        return SPRING_BOOT_VERSION_CHAIN.resolve(self._ctx)

    def get_version(self) -> str:
        return VERSION_CHAIN.resolve(self._ctx)

    # -- Passthrough --

    def get_location(self) -> str:
        return self._snapshot.location

    def get_checksum(self) -> str:
        return self._snapshot.checksum

    def get_dependencies(self) -> list[str]:
        return list(self._snapshot.dependencies)

    def get_application_configurations(self) -> dict[str, str]:
        return dict(self._snapshot.application_config_files)

    def get_logging_files(self) -> dict[str, str]:
        return dict(self._snapshot.logging_config_files)

    def get_certificates(self) -> list[str]:
        return list(self._snapshot.certificate_paths)

    def get_static_files(self) -> list[str]:
        return list(self._snapshot.static_asset_paths)

    def get_last_modified_time(self) -> datetime:
        return self._snapshot.last_modified

    def get_size(self) -> int:
        return self._snapshot.size

    def __repr__(self) -> str:
        return f"JarFile({self._snapshot.location!r})"


def load_jar_file(path: Path | str, settings: Settings | None = None, *, location: str | None = None) -> JarFile:
    """Open the archive at *path* and return its :class:`JarFile`.

    The classification patterns are read from *settings* (or freshly loaded
    settings) exactly once for this archive.
    """
    if settings is None:
        settings = load_settings()
    reader = ZipArchiveReader(path, location=location)
    jar = JarFile.from_archive(reader, settings.classification_patterns())
    if jar.issues:
        logger.info("Loaded '%s' with %d warning(s)", reader.location, len(jar.issues))
    return jar

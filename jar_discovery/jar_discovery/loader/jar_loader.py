"""Build an :class:`ArchiveSnapshot` from a single pass over an archive.

Every entry is read once, classified, and routed into each bucket whose rule
matches.  The pom is parsed after the pass completes.  A malformed pom is a
warning recorded on the snapshot; a failed entry read aborts construction.

Typical usage::

    snapshot = build_snapshot(ZipArchiveReader(Path("orders.jar")), settings.classification_patterns())
"""

from __future__ import annotations

import logging
import posixpath

from jar_discovery.classifier import EntryClassifier, EntryRole
from jar_discovery.config import ClassificationPatterns
from jar_discovery.errors import ArchiveReadError, BuildDescriptorParseError
from jar_discovery.loader.archive_reader import ArchiveReader
from jar_discovery.logging_config import archive_context
from jar_discovery.models.archive import ArchiveSnapshot, DiscoveryIssue, MavenProject
from jar_discovery.parser.manifest import MANIFEST_PATH, parse_manifest
from jar_discovery.parser.pom import parse_pom

logger = logging.getLogger(__name__)

DEFAULT_LIB_PATHS: tuple[str, ...] = ("BOOT-INF/lib/", "WEB-INF/lib/")
_LIB_EXTENSION = ".jar"


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _is_dependency(path: str) -> bool:
    return path.startswith(DEFAULT_LIB_PATHS) and path.endswith(_LIB_EXTENSION)


def build_snapshot(reader: ArchiveReader, patterns: ClassificationPatterns) -> ArchiveSnapshot:
    """Read every entry of *reader* and return the resulting snapshot.

    Parameters
    ----------
    reader:
        Source of entries and archive metadata.
    patterns:
        One consistent read of the classification pattern store.

    Returns
    -------
    ArchiveSnapshot
        Fully populated snapshot.  Recoverable problems are listed in
        ``issues``.

    Raises
    ------
    ArchiveReadError
        If the archive or any entry cannot be read.  No partial snapshot
        is returned.
    """
    with archive_context(reader.location):
        return _scan(reader, patterns)


def _scan(reader: ArchiveReader, patterns: ClassificationPatterns) -> ArchiveSnapshot:
    classifier = EntryClassifier(patterns)
    location = reader.location

    manifest: dict[str, str] = {}
    dependencies: list[str] = []
    app_configs: dict[str, str] = {}
    logging_configs: dict[str, str] = {}
    certificates: list[str] = []
    static_files: list[str] = []
    pom_entry: tuple[str, str] | None = None
    entry_count = 0

    try:
        for path, data in reader.entries():
            entry_count += 1

            if path == MANIFEST_PATH:
                manifest = parse_manifest(_decode(data))
            if _is_dependency(path):
                dependencies.append(posixpath.basename(path))

            roles = classifier.roles(path)
            if EntryRole.BUILD_DESCRIPTOR in roles:
                if pom_entry is None:
                    pom_entry = (path, _decode(data))
                else:
                    logger.debug("Ignoring additional pom '%s' in %s", path, location)
            if EntryRole.APPLICATION_CONFIG in roles:
                app_configs[path] = _decode(data)
            if EntryRole.LOGGING_CONFIG in roles:
                logging_configs[path] = _decode(data)
            if EntryRole.CERTIFICATE in roles:
                certificates.append(path)
            if EntryRole.STATIC_ASSET in roles:
                static_files.append(path)

        checksum = reader.checksum()
    except ArchiveReadError as exc:
        logger.error("Failed to read archive: %s", exc)
        raise
    except OSError as exc:
        logger.error("Failed to read archive: %s", exc)
        raise ArchiveReadError(f"failed to read archive {location}, {exc}") from exc

    issues: list[DiscoveryIssue] = []
    build_descriptor: MavenProject | None = None
    if pom_entry is not None:
        pom_path, pom_text = pom_entry
        try:
            build_descriptor = parse_pom(pom_text, entry=pom_path)
        except BuildDescriptorParseError as exc:
            logger.warning("%s", exc)
            issues.append(exc.to_issue())

    snapshot = ArchiveSnapshot(
        checksum=checksum,
        location=location,
        manifest_fields=manifest,
        dependencies=tuple(dependencies),
        application_config_files=app_configs,
        logging_config_files=logging_configs,
        certificate_paths=tuple(certificates),
        static_asset_paths=tuple(static_files),
        build_descriptor=build_descriptor,
        last_modified=reader.last_modified,
        size=reader.size,
        issues=tuple(issues),
    )

    logger.info(
        "Loaded %d entries from '%s': %d dependencies, %d app config(s), %d logging config(s), pom %s",
        entry_count,
        location,
        len(dependencies),
        len(app_configs),
        len(logging_configs),
        "parsed" if build_descriptor is not None else "absent",
    )
    return snapshot

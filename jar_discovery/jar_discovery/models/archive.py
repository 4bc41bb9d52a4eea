"""Snapshot models describing one inspected Java archive.

An :class:`ArchiveSnapshot` is built exactly once from a fully-read archive
and never mutated afterwards.  Every derived fact exposed by
:class:`~jar_discovery.jar_file.JarFile` is computed from it.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer


def _read_only(value: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(value))


# Validated as a dict, stored as a read-only view, dumped as a plain dict.
ReadOnlyMap = Annotated[
    Mapping[str, str],
    AfterValidator(_read_only),
    PlainSerializer(dict, return_type=dict[str, str]),
]


class AppType(str, Enum):
    """Packaging style of a Java archive."""

    SPRING_BOOT_FAT_JAR = "SpringBootFatJar"
    EXECUTABLE_JAR = "ExecutableJar"


class Severity(str, Enum):
    """Recoverability of a construction-time failure."""

    WARNING = "Warning"  # Source unusable, field left absent
    ERROR = "Error"  # Required read failed, no snapshot


class DiscoveryIssue(BaseModel):
    """A recoverable problem encountered while building a snapshot."""

    model_config = ConfigDict(frozen=True)

    severity: Severity = Field(default=Severity.WARNING)
    message: str = Field(..., description="Human-readable description of the problem.")
    entry: str | None = Field(default=None, description="Archive entry the problem relates to, if any.")


class MavenCoordinates(BaseModel):
    """groupId / artifactId / version triple.

    Missing elements are represented as empty strings so that coordinate
    comparison never needs a ``None`` check.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""


class MavenProject(BaseModel):
    """The subset of a ``pom.xml`` the resolver relies on."""

    model_config = ConfigDict(frozen=True)

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    name: str = ""
    parent: MavenCoordinates = Field(default_factory=MavenCoordinates)
    properties: ReadOnlyMap = Field(
        default_factory=dict,
        validate_default=True,
        description="Entries of the <properties> element, keyed by tag name.",
    )


class ArchiveSnapshot(BaseModel):
    """Immutable extracted state of a single archive."""

    model_config = ConfigDict(frozen=True)

    # -- Identity --
    checksum: str = Field(..., description="SHA-256 digest of the archive bytes.")
    location: str = Field(..., min_length=1, description="Source path or URI of the archive.")

    # -- Extracted content --
    manifest_fields: ReadOnlyMap = Field(
        default_factory=dict,
        validate_default=True,
        description="META-INF/MANIFEST.MF entries with trimmed values.",
    )
    dependencies: tuple[str, ...] = Field(
        default=(),
        description="Bundled library file names in encounter order.",
    )
    application_config_files: ReadOnlyMap = Field(
        default_factory=dict,
        validate_default=True,
        description="Application configuration entries keyed by path.",
    )
    logging_config_files: ReadOnlyMap = Field(
        default_factory=dict,
        validate_default=True,
        description="Logging configuration entries keyed by path.",
    )
    certificate_paths: tuple[str, ...] = ()
    static_asset_paths: tuple[str, ...] = ()
    build_descriptor: MavenProject | None = Field(
        default=None,
        description="Parsed pom.xml; None when missing or unparsable.",
    )

    # -- File information --
    last_modified: datetime
    size: int = Field(..., ge=0)

    # -- Construction diagnostics --
    issues: tuple[DiscoveryIssue, ...] = ()

"""Domain models for archive discovery."""

from jar_discovery.models.archive import (
    AppType,
    ArchiveSnapshot,
    DiscoveryIssue,
    MavenCoordinates,
    MavenProject,
    Severity,
)

__all__ = [
    "AppType",
    "ArchiveSnapshot",
    "DiscoveryIssue",
    "MavenCoordinates",
    "MavenProject",
    "Severity",
]

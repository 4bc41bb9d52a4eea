"""Exceptions raised while building an archive snapshot."""

from __future__ import annotations

from jar_discovery.models.archive import DiscoveryIssue, Severity


class DiscoveryError(Exception):
    """Base class for discovery failures, tagged with a :class:`Severity`."""

    severity: Severity = Severity.ERROR

    def __init__(self, message: str, *, entry: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.entry = entry

    def to_issue(self) -> DiscoveryIssue:
        """Return the snapshot-level record for this failure."""
        return DiscoveryIssue(severity=self.severity, message=self.message, entry=self.entry)


class ArchiveReadError(DiscoveryError):
    """Raised when the archive or one of its entries cannot be read."""

    severity = Severity.ERROR


class BuildDescriptorParseError(DiscoveryError):
    """Raised when an embedded ``pom.xml`` is not well-formed XML."""

    severity = Severity.WARNING

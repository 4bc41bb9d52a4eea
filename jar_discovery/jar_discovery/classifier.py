"""Label archive entries by the role they play in a Java application.

Rules are evaluated independently, so an entry may carry several roles
(e.g. a ``.pem`` under ``static/`` is both a certificate and a static
asset).  The snapshot builder routes an entry to every matching bucket.
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
from enum import Enum

from jar_discovery.config import ClassificationPatterns

logger = logging.getLogger(__name__)

POM_FILE_NAME = "pom.xml"
DEFAULT_MVN_PATH = "META-INF/maven/"


class EntryRole(str, Enum):
    """Role of a single archive entry.  Declaration order is priority order."""

    BUILD_DESCRIPTOR = "BUILD_DESCRIPTOR"
    APPLICATION_CONFIG = "APPLICATION_CONFIG"
    LOGGING_CONFIG = "LOGGING_CONFIG"
    CERTIFICATE = "CERTIFICATE"
    STATIC_ASSET = "STATIC_ASSET"
    OTHER = "OTHER"


def _extension(path: str) -> str:
    return os.path.splitext(path)[1]


class EntryClassifier:
    """Classify entry paths against one consistent set of patterns.

    Parameters
    ----------
    patterns:
        Pattern lists read from the configuration store.  Regular
        expressions are compiled once at construction time.
    """

    def __init__(self, patterns: ClassificationPatterns) -> None:
        self._patterns = patterns
        self._app_res = [re.compile(p) for p in patterns.app_config_patterns]
        self._logging_res = [re.compile(p) for p in patterns.logging_config_patterns]

    @property
    def patterns(self) -> ClassificationPatterns:
        return self._patterns

    def is_build_descriptor(self, path: str) -> bool:
        return path.startswith(DEFAULT_MVN_PATH) and posixpath.basename(path).lower() == POM_FILE_NAME

    def is_application_config(self, path: str) -> bool:
        name = posixpath.basename(path)
        return any(p.search(name) for p in self._app_res)

    def is_logging_config(self, path: str) -> bool:
        name = posixpath.basename(path)
        return any(p.search(name) for p in self._logging_res)

    def is_certificate(self, path: str) -> bool:
        return _extension(path) in self._patterns.certificate_extensions

    def is_static_asset(self, path: str) -> bool:
        if any(folder in path for folder in self._patterns.static_folders):
            return True
        return _extension(path) in self._patterns.static_extensions

    def roles(self, path: str) -> frozenset[EntryRole]:
        """Return every role whose rule matches *path*, or ``{OTHER}``."""
        checks = (
            (EntryRole.BUILD_DESCRIPTOR, self.is_build_descriptor),
            (EntryRole.APPLICATION_CONFIG, self.is_application_config),
            (EntryRole.LOGGING_CONFIG, self.is_logging_config),
            (EntryRole.CERTIFICATE, self.is_certificate),
            (EntryRole.STATIC_ASSET, self.is_static_asset),
        )
        matched = frozenset(role for role, check in checks if check(path))
        return matched or frozenset({EntryRole.OTHER})

    def classify(self, path: str) -> EntryRole:
        """Return the highest-priority role of *path*."""
        matched = self.roles(path)
        for role in EntryRole:
            if role in matched:
                return role
        return EntryRole.OTHER

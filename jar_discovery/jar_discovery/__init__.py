"""Metadata discovery for packaged Java applications."""

from jar_discovery.errors import ArchiveReadError, BuildDescriptorParseError, DiscoveryError
from jar_discovery.jar_file import JarFile, load_jar_file
from jar_discovery.models.archive import AppType, ArchiveSnapshot, Severity
from jar_discovery.process import JvmProcess, StaticJvmProcess

__all__ = [
    "AppType",
    "ArchiveReadError",
    "ArchiveSnapshot",
    "BuildDescriptorParseError",
    "DiscoveryError",
    "JarFile",
    "JvmProcess",
    "Severity",
    "StaticJvmProcess",
    "load_jar_file",
]

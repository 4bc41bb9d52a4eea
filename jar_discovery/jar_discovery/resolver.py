"""Ordered-probe resolution of derived archive facts.

Every fact a :class:`~jar_discovery.jar_file.JarFile` exposes is resolved by
a :class:`ProbeChain`: an ordered table of probes, each of which looks at a
single source and returns ``(value, found)``.  The first probe that reports
``found`` wins.  When none does, the chain's default is returned.

Source authority, highest first::

    runtime JVM option > pom.xml > MANIFEST.MF > bundled config > file name > default

Probes never raise.  A failing lookup is logged at DEBUG and reported as
not found so the next probe gets its turn.

The chains are module-level constants so each ordering can be unit-tested
directly against a hand-built :class:`ArchiveSnapshot`.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from jar_discovery.models.archive import AppType, ArchiveSnapshot
from jar_discovery.parser.manifest import (
    APP_NAME_FIELD,
    JAR_LAUNCHER_CLASS_NAME,
    JDK_VERSION_FIELD,
    JDK_VERSION_FIELD_FOR_1X,
    MAIN_CLASS_FIELD,
    PROPERTIES_LAUNCHER_CLASS_NAME,
    SPRING_BOOT_VERSION_FIELD,
    VERSION_FIELD,
)
from jar_discovery.parser.properties import get_config_from_properties
from jar_discovery.parser.yaml_config import get_config_from_yaml
from jar_discovery.process import JvmProcess, parse_jvm_options

logger = logging.getLogger(__name__)

T = TypeVar("T")

SPRING_BOOT_STARTER_GROUP_ID = "org.springframework.boot"
SPRING_BOOT_STARTER_ARTIFACT_ID = "spring-boot-starter-parent"
SPRING_BOOT_JAR_FILE_PREFIX = "spring-boot"

JAVA_VERSION_PROPERTY_NAME = "java.version"
COMPILER_TARGET_PROPERTY_NAME = "maven.compiler.target"
# Same key as the target property; see DESIGN.md before changing.
COMPILER_RELEASE_PROPERTY_NAME = "maven.compiler.target"

APPLICATION_NAME_KEY = "spring.application.name"
APPLICATION_PORT_KEY = "server.port"
DEFAULT_APP_PORT = 8080

_YAML_EXTENSIONS = (".yml", ".yaml")
_PROPERTIES_EXTENSIONS = (".properties",)


# ---------------------------------------------------------------------------
# Generic evaluator
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProbeContext:
    """Everything a probe may look at: the snapshot and, optionally, a live process."""

    snapshot: ArchiveSnapshot
    process: JvmProcess | None = None


Probe = Callable[[ProbeContext], tuple[T, bool]]


def first_match(probes: Sequence[Probe[T]], ctx: ProbeContext) -> tuple[T | None, bool]:
    """Evaluate *probes* in order and return the first found value."""
    for probe in probes:
        value, found = probe(ctx)
        if found:
            return value, True
    return None, False


class ProbeChain(Generic[T]):
    """A named, ordered probe table with a fallback value.

    Parameters
    ----------
    name:
        Fact name, used in log messages.
    probes:
        Probes in priority order.
    default:
        Value returned when no probe finds anything.
    """

    def __init__(self, name: str, probes: Sequence[Probe[T]], default: T) -> None:
        self.name = name
        self.probes: tuple[Probe[T], ...] = tuple(probes)
        self.default = default

    def resolve(self, ctx: ProbeContext) -> T:
        value, found = first_match(self.probes, ctx)
        if found:
            logger.debug("Resolved %s = %r", self.name, value)
            return value  # type: ignore[return-value]
        logger.debug("No probe matched for %s; using default %r", self.name, self.default)
        return self.default

    def __repr__(self) -> str:
        names = ", ".join(getattr(p, "__name__", repr(p)) for p in self.probes)
        return f"ProbeChain({self.name!r}, [{names}], default={self.default!r})"


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _non_empty(value: str) -> tuple[str, bool]:
    stripped = value.strip()
    return stripped, len(stripped) > 0


def _manifest_field(ctx: ProbeContext, field: str) -> tuple[str, bool]:
    if field in ctx.snapshot.manifest_fields:
        return _non_empty(ctx.snapshot.manifest_fields[field])
    return "", False


def _parent_is_starter(ctx: ProbeContext) -> bool:
    pom = ctx.snapshot.build_descriptor
    return (
        pom is not None
        and pom.parent.group_id == SPRING_BOOT_STARTER_GROUP_ID
        and pom.parent.artifact_id == SPRING_BOOT_STARTER_ARTIFACT_ID
    )


def _config_files(ctx: ProbeContext, extensions: tuple[str, ...]) -> list[tuple[str, str]]:
    return [
        (path, text)
        for path, text in ctx.snapshot.application_config_files.items()
        if posixpath.splitext(path)[1] in extensions
    ]


def _jvm_options(ctx: ProbeContext) -> dict[str, str] | None:
    if ctx.process is None:
        return None
    try:
        options = ctx.process.get_jvm_options()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Unable to read JVM options from %r: %s", ctx.process, exc)
        return None
    return parse_jvm_options(options)


def _parse_port(value: str) -> tuple[int, bool]:
    try:
        return int(value.strip()), True
    except ValueError:
        return 0, False


# ---------------------------------------------------------------------------
# Packaging type
# ---------------------------------------------------------------------------


def app_type_from_manifest(ctx: ProbeContext) -> tuple[AppType | None, bool]:
    if MAIN_CLASS_FIELD not in ctx.snapshot.manifest_fields:
        return None, False
    main_class = ctx.snapshot.manifest_fields[MAIN_CLASS_FIELD]
    if main_class == JAR_LAUNCHER_CLASS_NAME:
        # Inconclusive: defer to the pom and dependency probes.
        return None, False
    if main_class == PROPERTIES_LAUNCHER_CLASS_NAME:
        return AppType.SPRING_BOOT_FAT_JAR, True
    return AppType.EXECUTABLE_JAR, True


def app_type_from_pom(ctx: ProbeContext) -> tuple[AppType | None, bool]:
    if _parent_is_starter(ctx):
        return AppType.SPRING_BOOT_FAT_JAR, True
    return None, False


def app_type_from_dependencies(ctx: ProbeContext) -> tuple[AppType | None, bool]:
    for lib in ctx.snapshot.dependencies:
        if SPRING_BOOT_JAR_FILE_PREFIX in lib:
            return AppType.SPRING_BOOT_FAT_JAR, True
    return None, False


APP_TYPE_CHAIN: ProbeChain[AppType] = ProbeChain(
    "app_type",
    [app_type_from_manifest, app_type_from_pom, app_type_from_dependencies],
    default=AppType.EXECUTABLE_JAR,
)


# ---------------------------------------------------------------------------
# Artifact name
# ---------------------------------------------------------------------------


def artifact_name_from_pom(ctx: ProbeContext) -> tuple[str, bool]:
    pom = ctx.snapshot.build_descriptor
    if pom is None:
        return "", False
    return pom.name, len(pom.name) > 0


def artifact_name_from_manifest(ctx: ProbeContext) -> tuple[str, bool]:
    return _manifest_field(ctx, APP_NAME_FIELD)


def artifact_name_from_filename(ctx: ProbeContext) -> tuple[str, bool]:
    base = posixpath.basename(ctx.snapshot.location)
    return posixpath.splitext(base)[0], True


ARTIFACT_NAME_CHAIN: ProbeChain[str] = ProbeChain(
    "artifact_name",
    [artifact_name_from_pom, artifact_name_from_manifest, artifact_name_from_filename],
    default="",
)


# ---------------------------------------------------------------------------
# Running application name
# ---------------------------------------------------------------------------


def app_name_from_jvm_options(ctx: ProbeContext) -> tuple[str, bool]:
    options = _jvm_options(ctx)
    if options is None:
        return "", False
    # Only the system-property form names the application.
    for flag, value in options.items():
        if flag.strip() == "-D" + APPLICATION_NAME_KEY:
            return value, len(value) > 0
    return "", False


def app_name_from_properties(ctx: ProbeContext) -> tuple[str, bool]:
    for _, text in _config_files(ctx, _PROPERTIES_EXTENSIONS):
        value, found = get_config_from_properties(APPLICATION_NAME_KEY, text)
        if found:
            value, non_empty = _non_empty(value)
            if non_empty:
                return value, True
    return "", False


def app_name_from_yaml(ctx: ProbeContext) -> tuple[str, bool]:
    for _, text in _config_files(ctx, _YAML_EXTENSIONS):
        value, found = get_config_from_yaml(APPLICATION_NAME_KEY, text, str)
        if found and value is not None:
            value, non_empty = _non_empty(value)
            if non_empty:
                return value, True
    return "", False


APP_NAME_CHAIN: ProbeChain[str] = ProbeChain(
    "app_name",
    [app_name_from_jvm_options, app_name_from_properties, app_name_from_yaml],
    default="",
)


# ---------------------------------------------------------------------------
# Running application port
# ---------------------------------------------------------------------------


def app_port_from_jvm_options(ctx: ProbeContext) -> tuple[int, bool]:
    options = _jvm_options(ctx)
    if options is None:
        return 0, False
    for flag, value in options.items():
        if flag in ("-D" + APPLICATION_PORT_KEY, "--" + APPLICATION_PORT_KEY):
            return _parse_port(value)
    return 0, False


def app_port_from_yaml(ctx: ProbeContext) -> tuple[int, bool]:
    for _, text in _config_files(ctx, _YAML_EXTENSIONS):
        port, found = get_config_from_yaml(APPLICATION_PORT_KEY, text, int)
        if found and port is not None:
            return port, True
        raw, found = get_config_from_yaml(APPLICATION_PORT_KEY, text, str)
        if found and raw is not None:
            # A non-numeric value ends this probe.
            return _parse_port(raw)
    return 0, False


def app_port_from_properties(ctx: ProbeContext) -> tuple[int, bool]:
    for _, text in _config_files(ctx, _PROPERTIES_EXTENSIONS):
        raw, found = get_config_from_properties(APPLICATION_PORT_KEY, text)
        if found:
            return _parse_port(raw)
    return 0, False


def app_port_default(ctx: ProbeContext) -> tuple[int, bool]:
    return DEFAULT_APP_PORT, True


APP_PORT_CHAIN: ProbeChain[int] = ProbeChain(
    "app_port",
    [app_port_from_jvm_options, app_port_from_yaml, app_port_from_properties, app_port_default],
    default=DEFAULT_APP_PORT,
)


# ---------------------------------------------------------------------------
# Target JDK version
# ---------------------------------------------------------------------------


def jdk_version_from_pom(ctx: ProbeContext) -> tuple[str, bool]:
    pom = ctx.snapshot.build_descriptor
    if pom is None:
        return "", False
    for key in (JAVA_VERSION_PROPERTY_NAME, COMPILER_RELEASE_PROPERTY_NAME, COMPILER_TARGET_PROPERTY_NAME):
        if key in pom.properties:
            # The first declared key decides, even when its value is blank.
            return _non_empty(pom.properties[key])
    return "", False


def jdk_version_from_manifest(ctx: ProbeContext) -> tuple[str, bool]:
    return _manifest_field(ctx, JDK_VERSION_FIELD)


def jdk_version_from_legacy_manifest(ctx: ProbeContext) -> tuple[str, bool]:
    return _manifest_field(ctx, JDK_VERSION_FIELD_FOR_1X)


JDK_VERSION_CHAIN: ProbeChain[str] = ProbeChain(
    "build_jdk_version",
    [jdk_version_from_pom, jdk_version_from_manifest, jdk_version_from_legacy_manifest],
    default="",
)


# ---------------------------------------------------------------------------
# Spring Boot version
# ---------------------------------------------------------------------------


def spring_boot_version_from_pom(ctx: ProbeContext) -> tuple[str, bool]:
    pom = ctx.snapshot.build_descriptor
    if pom is None or not _parent_is_starter(ctx):
        return "", False
    return _non_empty(pom.parent.version)


def spring_boot_version_from_manifest(ctx: ProbeContext) -> tuple[str, bool]:
    if SPRING_BOOT_VERSION_FIELD in ctx.snapshot.manifest_fields:
        return ctx.snapshot.manifest_fields[SPRING_BOOT_VERSION_FIELD].strip(), True
    return "", False


SPRING_BOOT_VERSION_CHAIN: ProbeChain[str] = ProbeChain(
    "spring_boot_version",
    [spring_boot_version_from_pom, spring_boot_version_from_manifest],
    default="",
)


# ---------------------------------------------------------------------------
# Artifact version
# ---------------------------------------------------------------------------


def version_from_pom(ctx: ProbeContext) -> tuple[str, bool]:
    pom = ctx.snapshot.build_descriptor
    if pom is None:
        return "", False
    return pom.version, len(pom.version) > 0


def version_from_manifest(ctx: ProbeContext) -> tuple[str, bool]:
    if VERSION_FIELD in ctx.snapshot.manifest_fields:
        return ctx.snapshot.manifest_fields[VERSION_FIELD].strip(), True
    return "", False


VERSION_CHAIN: ProbeChain[str] = ProbeChain(
    "version",
    [version_from_pom, version_from_manifest],
    default="",
)

"""Parse ``META-INF/MANIFEST.MF`` text into key/value pairs."""

from __future__ import annotations

MANIFEST_PATH = "META-INF/MANIFEST.MF"

MAIN_CLASS_FIELD = "Main-Class"
APP_NAME_FIELD = "Implementation-Title"
VERSION_FIELD = "Implementation-Version"
JDK_VERSION_FIELD = "Build-Jdk-Spec"
JDK_VERSION_FIELD_FOR_1X = "Build-Jdk"
SPRING_BOOT_VERSION_FIELD = "Spring-Boot-Version"

JAR_LAUNCHER_CLASS_NAME = "org.springframework.boot.loader.JarLauncher"
PROPERTIES_LAUNCHER_CLASS_NAME = "org.springframework.boot.loader.PropertiesLauncher"


def parse_manifest(content: str) -> dict[str, str]:
    """Split each manifest line at its first colon.

    The key and value are both trimmed.  A line with no colon (or one whose
    only colon is the first character) becomes a key with an empty value.
    Blank lines are skipped.  Continuation lines are not folded, so a
    wrapped value shows up as its own key.
    """
    manifest: dict[str, str] = {}
    for line in content.splitlines():
        if not line.strip():
            continue
        idx = line.find(":")
        if idx > 0:
            manifest[line[:idx].strip()] = line[idx + 1 :].strip()
        else:
            manifest[line.strip()] = ""
    return manifest

"""Read the embedded Maven ``pom.xml`` into a :class:`MavenProject`.

Only the elements the resolver needs are extracted: the project's own
coordinates and name, the ``<parent>`` coordinates, and the flat
``<properties>`` map.  Lookups use the ``{*}`` wildcard so that poms with
and without the Maven POM namespace are handled alike.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from jar_discovery.errors import BuildDescriptorParseError
from jar_discovery.models.archive import MavenCoordinates, MavenProject


def _child_text(node: ET.Element | None, tag: str) -> str:
    if node is None:
        return ""
    child = node.find(f"{{*}}{tag}")
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_pom(content: str, *, entry: str | None = None) -> MavenProject:
    """Parse *content* as a Maven project descriptor.

    Parameters
    ----------
    content:
        Raw XML text of the pom.
    entry:
        Archive path of the pom, attached to any raised error.

    Raises
    ------
    BuildDescriptorParseError
        If *content* is not well-formed XML.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise BuildDescriptorParseError(f"unable to read pom.xml from jar, {exc}", entry=entry) from exc

    parent = root.find("{*}parent")
    properties: dict[str, str] = {}
    props_node = root.find("{*}properties")
    if props_node is not None:
        for prop in props_node:
            # Comments and processing instructions have non-string tags.
            if not isinstance(prop.tag, str):
                continue
            properties[_local_name(prop.tag)] = (prop.text or "").strip()

    return MavenProject(
        group_id=_child_text(root, "groupId"),
        artifact_id=_child_text(root, "artifactId"),
        version=_child_text(root, "version"),
        name=_child_text(root, "name"),
        parent=MavenCoordinates(
            group_id=_child_text(parent, "groupId"),
            artifact_id=_child_text(parent, "artifactId"),
            version=_child_text(parent, "version"),
        ),
        properties=properties,
    )

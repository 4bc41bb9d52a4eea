"""Manifest, pom.xml, properties and YAML parsing."""

from jar_discovery.parser.manifest import parse_manifest
from jar_discovery.parser.pom import parse_pom
from jar_discovery.parser.properties import get_config_from_properties, parse_properties
from jar_discovery.parser.yaml_config import get_config_from_yaml

__all__ = [
    "get_config_from_properties",
    "get_config_from_yaml",
    "parse_manifest",
    "parse_pom",
    "parse_properties",
]

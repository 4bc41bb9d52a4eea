"""Typed key lookup in Spring-style YAML configuration.

Spring accepts the same property either nested::

    server:
      port: 9090

or flattened (``server.port: 9090``), and any mixture of the two.  Lookups
therefore try the longest dotted prefix first at every level.  Multi-document
files (``---`` separated profiles) are searched in document order.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import yaml  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


def _lookup(node: Any, parts: list[str]) -> Any:
    if not parts:
        return node
    if not isinstance(node, dict):
        return _MISSING
    for i in range(len(parts), 0, -1):
        candidate = ".".join(parts[:i])
        if candidate in node:
            found = _lookup(node[candidate], parts[i:])
            if found is not _MISSING:
                return found
    return _MISSING


def _matches_type(value: Any, expected_type: type) -> bool:
    # bool is a subclass of int; ``port: true`` is not a port.
    if expected_type is int and isinstance(value, bool):
        return False
    return isinstance(value, expected_type)


def get_config_from_yaml(key: str, content: str, expected_type: type[T]) -> tuple[T | None, bool]:
    """Return ``(value, True)`` for the first *key* of *expected_type* in *content*.

    A missing key, a value of another type, or text that is not valid YAML
    all yield ``(None, False)``.
    """
    try:
        documents = list(yaml.safe_load_all(content))
    except yaml.YAMLError as exc:
        logger.debug("Ignoring unparsable YAML while looking up '%s': %s", key, exc)
        return None, False

    parts = key.split(".")
    for document in documents:
        value = _lookup(document, parts)
        if value is not _MISSING and _matches_type(value, expected_type):
            return value, True
    return None, False

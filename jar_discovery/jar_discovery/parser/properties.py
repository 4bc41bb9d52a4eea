"""Java ``.properties`` parsing and key lookup.

Supports the parts of the format that show up in Spring configuration and
JVM option lists:

* ``#`` and ``!`` comment lines
* ``key=value``, ``key: value`` and ``key value`` separators
* backslash line continuation

Unicode escapes and escaped separators inside keys are not interpreted.
"""

from __future__ import annotations

_SEPARATORS = "=:"


def _logical_lines(content: str) -> list[str]:
    """Join backslash-continued physical lines into logical lines."""
    lines: list[str] = []
    pending = ""
    for raw in content.splitlines():
        line = raw.lstrip() if pending else raw
        if not pending and line.lstrip()[:1] in ("#", "!"):
            # Comment lines never continue.
            lines.append(line)
            continue
        # An odd number of trailing backslashes continues the line.
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        lines.append(pending + line)
        pending = ""
    if pending:
        lines.append(pending)
    return lines


def _split_entry(line: str) -> tuple[str, str]:
    for idx, ch in enumerate(line):
        if ch in _SEPARATORS:
            return line[:idx].strip(), line[idx + 1 :].strip()
        if ch.isspace():
            rest = line[idx:].lstrip()
            # ``key = value`` still uses ``=`` as the separator.
            if rest[:1] in _SEPARATORS:
                rest = rest[1:]
            return line[:idx].strip(), rest.strip()
    return line.strip(), ""


def parse_properties(content: str) -> dict[str, str]:
    """Parse *content* into a key/value mapping.  Later duplicates win."""
    result: dict[str, str] = {}
    for line in _logical_lines(content):
        stripped = line.strip()
        if not stripped or stripped[0] in "#!":
            continue
        key, value = _split_entry(stripped)
        result[key] = value
    return result


def get_config_from_properties(key: str, content: str) -> tuple[str, bool]:
    """Look up *key* in properties text, returning ``(value, found)``."""
    props = parse_properties(content)
    if key in props:
        return props[key], True
    return "", False

"""Access to the JVM options of a running Java process.

Reading options from a live process belongs to the caller; the resolver only
depends on the :class:`JvmProcess` protocol.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

_SEPARATORS = "=:"


@runtime_checkable
class JvmProcess(Protocol):
    """Source of a process's runtime invocation options (``-D...``, ``--...``)."""

    def get_jvm_options(self) -> list[str]:
        """Return the current option strings.

        Raises:
            Exception: Any failure; dependent probes treat it as "not found".
        """
        ...


class StaticJvmProcess:
    """A :class:`JvmProcess` backed by a fixed option list."""

    def __init__(self, options: Sequence[str] = ()) -> None:
        self._options = list(options)

    def get_jvm_options(self) -> list[str]:
        return list(self._options)

    def __repr__(self) -> str:
        return f"StaticJvmProcess({self._options!r})"


def _split_option(option: str) -> tuple[str, str]:
    for idx, ch in enumerate(option):
        if ch in _SEPARATORS:
            return option[:idx].strip(), option[idx + 1 :].strip()
    return option, ""


def parse_jvm_options(options: Sequence[str]) -> dict[str, str]:
    """Map option flags to values, e.g. ``-Dserver.port=9090`` → ``{"-Dserver.port": "9090"}``.

    Each option is split on its own at the first ``=`` or ``:``, so a value
    ending in a backslash never runs into the next option.  A bare flag such
    as ``-Xmx512m`` maps to an empty value and a repeated flag keeps its last
    value, matching how the JVM resolves duplicates.
    """
    result: dict[str, str] = {}
    for raw in options:
        option = raw.strip()
        if not option:
            continue
        flag, value = _split_option(option)
        result[flag] = value
    return result

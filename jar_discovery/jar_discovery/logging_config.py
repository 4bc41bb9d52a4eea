"""Logging setup for discovery runs.

Every module logs through ``logging.getLogger(__name__)``.  This module only
decides where records go: plain text by default, or single-line JSON when
``JAR_DISCOVERY_STRUCTURED_LOGGING=true`` so that log aggregators can index
discovery output without regex parsing.

While an archive is being loaded, :func:`archive_context` records its
location and :class:`ArchiveContextFilter` stamps it onto every record as
``record.archive``, including records from the parsers.

Output schema per line::

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "WARNING",
        "logger": "jar_discovery.loader.jar_loader",
        "message": "unable to read pom.xml from jar, ...",
        "archive": "/opt/app/orders.jar",   // present inside archive_context
        "exc_info": "Traceback ..."          // present only on exceptions
    }
"""

from __future__ import annotations

import json
import logging
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from jar_discovery.config import Settings

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_current_archive: ContextVar[str | None] = ContextVar("jar_discovery_archive", default=None)


@contextmanager
def archive_context(location: str) -> Iterator[None]:
    """Attribute log records emitted inside the block to *location*."""
    token = _current_archive.set(location)
    try:
        yield
    finally:
        _current_archive.reset(token)


class ArchiveContextFilter(logging.Filter):
    """Set ``record.archive`` from the active :func:`archive_context`.

    An ``archive`` passed explicitly through ``extra`` is left untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "archive", None) is None:
            record.archive = _current_archive.get()
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        archive = getattr(record, "archive", None)
        if archive is not None:
            payload["archive"] = archive
        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(settings: Settings) -> None:
    """Install a root handler according to *settings*.

    Existing root handlers are replaced so repeated calls do not duplicate
    output.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.addFilter(ArchiveContextFilter())
    handler.setFormatter(JSONFormatter() if settings.structured_logging else logging.Formatter(_TEXT_FORMAT))

    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if settings.debug else settings.log_level)

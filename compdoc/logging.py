"""Logging setup for compdoc runs.

Every module logs under the ``compdoc`` hierarchy. Per-component messages go
through :class:`ComponentLogAdapter`, which tags each record with the
component being processed so failures in a parallel run stay attributable.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping, Tuple

ROOT_LOGGER = "compdoc"

_CONSOLE_FORMAT = "[compdoc] %(levelname)s %(message)s"
_VERBOSE_CONSOLE_FORMAT = "[compdoc] %(levelname)s %(threadName)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"


class ComponentLogAdapter(logging.LoggerAdapter):
    """Prefixes messages with ``[name (id)]`` and records both as extras."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        name = self.extra.get("component_name", "?")
        component_id = self.extra.get("component_id")
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        tag = f"{name} ({component_id})" if component_id and component_id != name else name
        return f"[{tag}] {msg}", kwargs


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``compdoc`` or one of its children."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def component_logger(
    component_name: str, component_id: str | None = None, name: str = "pipeline"
) -> ComponentLogAdapter:
    """Return a logger whose messages name the component they concern."""
    return ComponentLogAdapter(
        get_logger(name),
        {"component_name": component_name, "component_id": component_id},
    )


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console (and optional file) handlers on the ``compdoc`` logger.

    ``verbose`` wins over ``quiet``. Calling this again replaces the handlers.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(
        logging.Formatter(_VERBOSE_CONSOLE_FORMAT if verbose else _CONSOLE_FORMAT)
    )
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        # The file always gets the full debug trail.
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.setLevel(logging.DEBUG)
        logger.addHandler(sink)

    return logger


__all__ = ["ComponentLogAdapter", "component_logger", "configure_logging", "get_logger"]

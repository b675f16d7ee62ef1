"""
ethdev — logging
----------------

Diagnostics of the tool itself go to stderr through the `ethdev` logger tree,
either as one JSON object per line or as a short colored text line. The node's
own output never passes through here: the child process inherits the
terminal directly.

Fields bound with `bind()` (command, datadir, action) ride along on every
record emitted afterwards in the same context:

    from ethdev import logging as elog

    elog.configure(json=False, level="INFO")
    log = elog.get_logger(__name__)

    elog.bind(command="devchain")
    log.info("devchain action", extra={"action": "ready"})
"""

from __future__ import annotations

import datetime as _dt
import io
import json
import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_LOG_CONTEXT", default={})

DEFAULT_CONTEXT_KEYS = ("command", "datadir", "action")

LOG_FORMAT_ENV = "ETHDEV_LOG_FORMAT"

# Attribute names of a bare LogRecord; anything else arrived via `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def context() -> Dict[str, Any]:
    """Return a *copy* of the active logging context."""
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    """Merge fields into the active context."""
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _plain(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def clear_context() -> None:
    _LOG_CONTEXT.set({})


def _plain(v: Any) -> Any:
    if isinstance(v, Path):
        return str(v)
    if isinstance(v, tuple):
        return [_plain(i) for i in v]
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    return str(v)


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Bound context first, then the record's own extras (which win on clashes)."""
    fields = context()
    for k, v in vars(record).items():
        if k not in _RECORD_ATTRS and not k.startswith("_"):
            fields[k] = _plain(v)
    return fields


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        out: Dict[str, Any] = {
            "time": _dt.datetime.fromtimestamp(record.created, _dt.timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        out.update(record_fields(record))
        if record.exc_info:
            out["exc"] = self.formatException(record.exc_info)
        return json.dumps(out, default=str)


class TextFormatter(logging.Formatter):
    """
    One line per record, context keys first:

        warning ethdev.devchain.orchestrator: node init exited non-zero; starting anyway [command=devchain exit_code=1]
    """

    COLORS = {"debug": "2", "info": "36", "warning": "33", "error": "31", "critical": "1;31"}

    def __init__(self, color: bool = False) -> None:
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        fields = record_fields(record)
        keys = [k for k in DEFAULT_CONTEXT_KEYS if fields.get(k) is not None]
        keys += [k for k in fields if k not in DEFAULT_CONTEXT_KEYS and fields[k] is not None]

        level = record.levelname.lower()
        if self.color:
            level = f"\x1b[{self.COLORS.get(level, '0')}m{level}\x1b[0m"
        line = f"{level} {record.name}: {record.getMessage()}"
        if keys:
            line += " [" + " ".join(f"{k}={fields[k]}" for k in keys) + "]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _is_terminal(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: Optional[io.TextIOBase] = None,
) -> None:
    """
    Configure the `ethdev` logger tree.

    Parameters
    ----------
    json : bool | None
        If None, determined by env ETHDEV_LOG_FORMAT=(json|text) and TTY detection.
    level : str | int
        Minimum log level.
    stream : TextIO
        Stream for the console handler (default: stderr at call time).
    """
    stream = stream or sys.stderr  # type: ignore[assignment]
    lvl = _coerce_level(level)
    tree = logging.getLogger("ethdev")
    tree.setLevel(lvl)
    for h in list(tree.handlers):
        tree.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setLevel(lvl)
    if _decide_json(json, stream):
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter(color=_is_terminal(stream) and "NO_COLOR" not in os.environ))
    tree.addHandler(handler)
    tree.propagate = False

    logging.getLogger("httpx").setLevel(max(lvl, logging.WARNING))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "ethdev")


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def _decide_json(json_flag: Optional[bool], stream: Any) -> bool:
    if json_flag is not None:
        return json_flag
    env = os.environ.get(LOG_FORMAT_ENV, "").strip().lower()
    if env in ("json", "text"):
        return env == "json"
    # JSON when piped, text when interactive
    return not _is_terminal(stream)


__all__ = [
    "DEFAULT_CONTEXT_KEYS",
    "LOG_FORMAT_ENV",
    "context",
    "bind",
    "clear_context",
    "record_fields",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "get_logger",
]

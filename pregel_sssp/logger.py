"""Event loggers shared by the engine, the workers and the vertex program.

Events are a name plus keyword fields. Loggers can be bound to extra
context fields (``job``, ``worker``) which are emitted before the event's
own fields.
"""

from __future__ import annotations

import json
import sys
import threading
from typing import Any, Dict, Protocol


class Logger(Protocol):
    """Protocol for event loggers."""

    def info(self, event: str, **fields: Any) -> None:
        ...

    def debug(self, event: str, **fields: Any) -> None:
        ...

    def warning(self, event: str, **fields: Any) -> None:
        ...

    def bind(self, **fields: Any) -> "Logger":
        """Return a logger that adds ``fields`` to every event."""
        ...


class NoopLogger:
    """Logger that discards all events."""

    def info(self, event: str, **fields: Any) -> None:  # pragma: no cover - noop
        return

    def debug(self, event: str, **fields: Any) -> None:  # pragma: no cover - noop
        return

    def warning(self, event: str, **fields: Any) -> None:  # pragma: no cover - noop
        return

    def bind(self, **fields: Any) -> "NoopLogger":
        return self


class StdLogger:
    """Write ``level event key=value`` lines, or one JSON object per line.

    Vertex ids and other values JSON cannot encode are rendered with ``str``.
    Bound loggers share the stream and its lock, so workers running on a
    thread pool never interleave partial lines.
    """

    _levels: Dict[str, int] = {"debug": 10, "info": 20, "warning": 30}

    def __init__(
        self,
        level: str = "warning",
        json_fmt: bool = False,
        stream: Any | None = None,
        context: Dict[str, Any] | None = None,
        _lock: Any | None = None,
    ) -> None:
        if level not in self._levels:
            raise ValueError(f"unknown log level {level!r}")
        self.level = level
        self.json_fmt = json_fmt
        self.stream = stream or sys.stderr
        self.context = dict(context or {})
        self._lock = _lock or threading.Lock()

    def bind(self, **fields: Any) -> "StdLogger":
        return StdLogger(
            self.level,
            self.json_fmt,
            self.stream,
            {**self.context, **fields},
            self._lock,
        )

    def enabled(self, level: str) -> bool:
        return self._levels[level] >= self._levels[self.level]

    def log(self, level: str, event: str, **fields: Any) -> None:
        if not self.enabled(level):
            return
        merged = {**self.context, **fields}
        if self.json_fmt:
            line = json.dumps({"level": level, "event": event, **merged}, default=str)
        else:
            kv = " ".join(f"{k}={v}" for k, v in merged.items())
            line = f"{level} {event} {kv}".rstrip()
        with self._lock:
            self.stream.write(line + "\n")

    def info(self, event: str, **fields: Any) -> None:
        self.log("info", event, **fields)

    def debug(self, event: str, **fields: Any) -> None:
        self.log("debug", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log("warning", event, **fields)


__all__ = ["Logger", "NoopLogger", "StdLogger"]

"""JSONL tracing of memory backend traffic."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DEFAULT_LOG_DIR = Path.home() / ".openclaw" / "logs"


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    method: str | None = None
    container_tag: str | None = None
    duration_ms: float | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {}}


class JSONLLogger:
    """Writes structured plugin events as JSON lines.

    Request/response tracing is only written when ``debug`` is on;
    plain events are always written.
    """

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "supermemory.jsonl",
        max_size_mb: float = 10.0,
        debug: bool = False,
    ) -> None:
        self.log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self.debug = debug

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), default=str) + "\n")

    def log(
        self,
        event: str,
        *,
        method: str | None = None,
        container_tag: str | None = None,
        duration_ms: float | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            method=method,
            container_tag=container_tag,
            duration_ms=duration_ms,
            error=error,
            extra=extra,
        )
        self._write(entry)

    def log_request(self, method: str, params: dict[str, Any]) -> None:
        """Trace an outgoing backend call (debug only)."""
        if not self.debug:
            return
        self.log("request", method=method, params=params)

    def log_response(
        self, method: str, data: Any, *, duration_ms: float | None = None
    ) -> None:
        """Trace a backend response (debug only)."""
        if not self.debug:
            return
        self.log("response", method=method, duration_ms=duration_ms, data=data)

    def log_error(self, method: str, error: BaseException | str) -> None:
        """Record a failed call. Always written."""
        self.log("error", method=method, error=str(error))

"""Structured JSONL generation log utilities."""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

_KEPT_STRING_KEYS = frozenset({"method", "type_name", "api_name", "output_dir"})
_URL_KEYS = frozenset({"url", "source"})
_SECRET_KEYS = frozenset({"token", "cookie", "body", "authorization"})
_RESULT_KEYS = ("final_type_name", "type_conflict", "type_duplicate", "api_duplicate")


@dataclass(slots=True, frozen=True)
class GenerationEvent:
    """Sanitized record of one endpoint generation attempt."""

    timestamp: str
    command: str
    api_name: str
    ok: bool
    blocked: bool
    error_code: str | None
    metadata: dict[str, object]

    @classmethod
    def from_response(
        cls,
        command: str,
        api_name: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> GenerationEvent:
        """Build an event from command arguments and the emitted response envelope."""
        error = response.get("error")
        error_code = error.get("code") if isinstance(error, dict) else None
        metadata = sanitize_arguments(arguments)
        result = response.get("result")
        if response.get("ok") and isinstance(result, dict):
            metadata.update({key: result[key] for key in _RESULT_KEYS if key in result})
        return cls(
            timestamp=utc_timestamp(),
            command=command,
            api_name=api_name,
            ok=bool(response.get("ok")),
            blocked=bool(response.get("blocked")),
            error_code=error_code if isinstance(error_code, str) else None,
            metadata=metadata,
        )


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Reduce command arguments to values that are safe to persist.

    Tokens, cookies and request bodies are replaced by presence/length markers.
    URL query strings and userinfo are dropped. Header mappings keep their
    names only.
    """
    sanitized: dict[str, object] = {}
    for key in sorted(arguments):
        value = arguments[key]
        if key in _SECRET_KEYS:
            sanitized[f"{key}_present"] = value is not None and value != ""
            if isinstance(value, str):
                sanitized[f"{key}_length"] = len(value)
        elif key in _URL_KEYS and isinstance(value, str):
            sanitized.update(_sanitize_url(key, value))
        elif key in _KEPT_STRING_KEYS and isinstance(value, str):
            sanitized[key] = value
        elif value is None or isinstance(value, (bool, int, float)):
            sanitized[key] = value
        elif isinstance(value, str):
            sanitized[f"{key}_present"] = True
            sanitized[f"{key}_length"] = len(value)
        elif isinstance(value, dict):
            sanitized[f"{key}_keys"] = sorted(str(name) for name in value)
        elif isinstance(value, (list, tuple)):
            if all(isinstance(item, str) for item in value):
                sanitized[key] = list(value)
            else:
                sanitized[f"{key}_length"] = len(value)
        else:
            sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


def _sanitize_url(key: str, value: str) -> dict[str, object]:
    parts = urlsplit(value)
    if not parts.scheme:
        return {key: value}
    host = parts.hostname or ""
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    cleaned = urlunsplit((parts.scheme, host, parts.path, "", ""))
    return {key: cleaned, f"{key}_query_present": bool(parts.query)}


class JsonlGenerationLog:
    """Append-only JSONL generation log and bounded reader."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: GenerationEvent) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def read(
        self,
        since: str | None = None,
        limit: int = 50,
        api_name: str | None = None,
    ) -> list[dict[str, object]]:
        """Return the newest matching events in file order.

        ``since`` is an inclusive ISO timestamp lower bound; corrupt lines are
        skipped.
        """
        if limit < 1:
            return []
        entries = [
            record
            for record in self._records()
            if _matches(record, since=since, api_name=api_name)
        ]
        return entries[-limit:]

    def _records(self) -> Iterator[dict[str, object]]:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if isinstance(record, dict):
                    yield record


def _matches(record: dict[str, object], since: str | None, api_name: str | None) -> bool:
    if api_name is not None and record.get("api_name") != api_name:
        return False
    if since is None:
        return True
    timestamp = record.get("timestamp")
    return isinstance(timestamp, str) and timestamp >= since

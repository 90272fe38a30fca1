"""Usage store: the JSON document holding tracked sessions and the summary.

The document shape is ``{"sessions": [...], "summary": {...}}``. It is not
versioned, so readers tolerate missing top-level keys.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

RawUsageData = dict[str, Any]


class UsageDataCorruptionError(Exception):
    """The store exists but can't be read as a usage document."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Corrupt usage data at {path}: {reason}")
        self.path = path
        self.reason = reason


class UsageStore(Protocol):
    """Anything that can load and save the raw usage document."""

    def load(self) -> RawUsageData: ...

    def save(self, data: RawUsageData) -> None: ...


def empty_usage_data() -> RawUsageData:
    return {"sessions": [], "summary": {}}


def coerce_usage_data(parsed: Any, source: str) -> RawUsageData:
    """Shape a decoded document into ``{"sessions": list, "summary": dict}``."""
    if not isinstance(parsed, dict):
        raise UsageDataCorruptionError(
            source, f"expected a JSON object, got {type(parsed).__name__}"
        )

    sessions = parsed.get("sessions")
    summary = parsed.get("summary")
    return {
        "sessions": list(sessions) if isinstance(sessions, list) else [],
        "summary": summary if isinstance(summary, dict) else {},
    }


class JsonFileUsageStore:
    """Usage store backed by a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> RawUsageData:
        """Read the document fresh from disk.

        A missing file is an empty store. Anything else that prevents
        reading a JSON object raises ``UsageDataCorruptionError``.
        """
        try:
            with self.path.open("r", encoding="utf-8") as f:
                parsed = json.load(f)
        except FileNotFoundError:
            logger.info(
                "Usage file not found, treating store as empty",
                extra={"usage_file": str(self.path)},
            )
            return empty_usage_data()
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(
                f"Unable to load usage data: {e}",
                exc_info=True,
                extra={"usage_file": str(self.path)},
            )
            raise UsageDataCorruptionError(str(self.path), str(e)) from e

        return coerce_usage_data(parsed, str(self.path))

    def save(self, data: RawUsageData) -> None:
        """Write the document, replacing the previous file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class InMemoryUsageStore:
    """Usage store kept in a dict, for fixtures and tests."""

    def __init__(self, data: Any = None) -> None:
        self.data = empty_usage_data() if data is None else data
        self.saves = 0

    def load(self) -> RawUsageData:
        # Round-trip through JSON so callers never share state with the store
        return coerce_usage_data(json.loads(json.dumps(self.data)), "<memory>")

    def save(self, data: RawUsageData) -> None:
        self.data = json.loads(json.dumps(data))
        self.saves += 1

"""Usage tracking: records AI-assisted sessions into the usage store."""

import logging
import os
import random
import string
import threading
import time
from collections.abc import Mapping
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from stat import S_ISREG
from typing import Any

from usage_audit.core.config import Settings, get_settings
from usage_audit.models.audit import AuditSession, FileInfo, TokenCounts
from usage_audit.services.audit.aggregator import apply_session, empty_summary
from usage_audit.services.audit.normalize import to_number_or_zero
from usage_audit.services.audit.store import (
    JsonFileUsageStore,
    UsageDataCorruptionError,
    UsageStore,
    empty_usage_data,
)

logger = logging.getLogger(__name__)

# Environment variables that identify the assistant driving the change
TOOL_ENV_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Cursor", ("CURSOR_SESSION_ID", "CURSOR_VERSION")),
    ("Claude Code", ("CLAUDE_SESSION_ID", "ANTHROPIC_API_KEY")),
    ("GitHub Copilot", ("GITHUB_COPILOT", "COPILOT_SESSION")),
)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_READ_CHUNK = 64 * 1024


def detect_tool(environ: Mapping[str, str] | None = None) -> str | None:
    """Guess the AI tool from environment markers, or None."""
    env = os.environ if environ is None else environ
    for tool, markers in TOOL_ENV_MARKERS:
        if any(env.get(marker) for marker in markers):
            return tool
    return None


def new_session_id() -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"session-{int(time.time() * 1000)}-{suffix}"


def _count_lines(target: Path) -> int:
    lines = 1
    with target.open("rb") as f:
        for chunk in iter(lambda: f.read(_READ_CHUNK), b""):
            lines += chunk.count(b"\n")
    return lines


def file_stats(path: str, root: Path | None = None) -> FileInfo:
    """Line count, size and mtime of ``path`` relative to ``root``.

    Only regular files inside ``root`` (default: the working directory) are
    inspected. Anything else, or anything unreadable, is recorded with zero
    counts and no modification time.
    """
    base = (root or Path.cwd()).resolve()
    try:
        target = (base / path).resolve()
        if not target.is_relative_to(base):
            logger.warning(f"Ignoring file outside the workspace: {path}")
            return FileInfo(path=path)
        stat = target.stat()
        if not S_ISREG(stat.st_mode):
            return FileInfo(path=path)
        lines = _count_lines(target)
    except (OSError, ValueError):
        return FileInfo(path=path)

    return FileInfo(
        path=path,
        lines=lines,
        size=stat.st_size,
        modified=datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(
            timespec="milliseconds"
        ),
    )


class UsageTracker:
    """Appends sessions to the store and keeps its summary current."""

    def __init__(
        self,
        store: UsageStore,
        max_sessions: int = 1000,
        prompt_max_chars: int = 200,
        default_user_id: str = "unknown",
        root: Path | None = None,
    ) -> None:
        self.store = store
        self.max_sessions = max_sessions
        self.prompt_max_chars = prompt_max_chars
        self.default_user_id = default_user_id
        self.root = root
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, store: UsageStore, settings: Settings) -> "UsageTracker":
        return cls(
            store,
            max_sessions=settings.max_retained_sessions,
            prompt_max_chars=settings.prompt_max_chars,
            default_user_id=settings.default_user_id,
        )

    def _load(self) -> dict[str, Any]:
        try:
            return self.store.load()
        except UsageDataCorruptionError as e:
            logger.warning(f"Could not parse usage data, starting fresh: {e.reason}")
            return empty_usage_data()

    def build_session(
        self,
        model: str = "unknown",
        tool: str | None = None,
        input_tokens: Any = 0,
        output_tokens: Any = 0,
        files: list[str] | None = None,
        prompt: str | None = None,
        commit: str | None = None,
        branch: str | None = None,
        user_id: str | None = None,
    ) -> AuditSession:
        input_count = int(to_number_or_zero(input_tokens))
        output_count = int(to_number_or_zero(output_tokens))
        return AuditSession(
            id=new_session_id(),
            timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            tool=tool or detect_tool() or "Unknown",
            model=model or "unknown",
            tokens=TokenCounts(
                input=input_count,
                output=output_count,
                total=input_count + output_count,
            ),
            files=[file_stats(path, self.root) for path in files or []],
            commit=commit,
            branch=branch,
            user_id=user_id or self.default_user_id,
            prompt=prompt[: self.prompt_max_chars] if prompt else None,
        )

    def track(self, **fields: Any) -> AuditSession:
        """Record one session and return it.

        Accepts the keyword arguments of ``build_session``. The oldest
        sessions are evicted once more than ``max_sessions`` are retained;
        the summary keeps counting them.
        """
        session = self.build_session(**fields)
        record = session.model_dump(by_alias=True)

        with self._lock:
            data = self._load()
            summary = data["summary"] or empty_summary()
            data["summary"] = apply_session(summary, record)
            data["sessions"].append(record)
            if len(data["sessions"]) > self.max_sessions:
                data["sessions"] = data["sessions"][-self.max_sessions :]
            self.store.save(data)

        logger.info(
            f"Tracked {session.tool}/{session.model} "
            f"tokens={session.tokens.total} files={len(session.files)}",
            extra={"session_id": session.id},
        )
        return session


@lru_cache
def get_usage_tracker() -> UsageTracker:
    """Process-wide tracker so every write shares one lock."""
    settings = get_settings()
    return UsageTracker.from_settings(JsonFileUsageStore(settings.usage_file), settings)

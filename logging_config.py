"""Centralised logging configuration for the editor server.

Usage:
    from logging_config import setup_logging, editor_id_var, component_id_var

    # At process startup:
    setup_logging("Server")

    # Inside request handlers (automatic via api/_helpers.py):
    editor_id_var.set("ab12cd34ef56")
    component_id_var.set("switch-1a2b3c4d")

All existing ``logging.getLogger(__name__).info(...)`` calls work unchanged —
the ContextFilter injects editor/component context automatically.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from contextvars import ContextVar
from pathlib import Path

# ── Context variables (set per request by the API helpers) ─────────────────

editor_id_var: ContextVar[str] = ContextVar("editor_id_var", default="")
component_id_var: ContextVar[str] = ContextVar("component_id_var", default="")


# ── Filter: stamps context onto every LogRecord ────────────────────────────

class ContextFilter(logging.Filter):
    """Injects ``role``, ``editor_id``, and ``component_id`` onto each record."""

    def __init__(self, role: str) -> None:
        super().__init__()
        self.role = role

    def filter(self, record: logging.LogRecord) -> bool:
        record.role = self.role  # type: ignore[attr-defined]
        record.editor_id = editor_id_var.get("")  # type: ignore[attr-defined]
        record.component_id = component_id_var.get("")  # type: ignore[attr-defined]
        return True


# ── Formatter: builds [Role][Editor][Component][LEVEL] prefix ──────────────

class ContextFormatter(logging.Formatter):
    """Produces lines like:

    2026-02-17 14:30:00 [Server][INFO] services.sessions:41 - Created editor session ab12cd34
    2026-02-17 14:30:01 [Server][Editor ab12cd34][Component switch-1a2b3c4d][INFO] services.graph:88 - Appended elseif
    """

    def format(self, record: logging.LogRecord) -> str:
        role = getattr(record, "role", "")
        editor_id = getattr(record, "editor_id", "")
        component_id = getattr(record, "component_id", "")

        parts = [f"[{role}]"] if role else []
        if editor_id:
            parts.append(f"[Editor {editor_id[:8]}]")
        if component_id:
            parts.append(f"[Component {component_id}]")
        parts.append(f"[{record.levelname}]")

        prefix = "".join(parts)
        timestamp = self.formatTime(record, self.datefmt)
        location = f"{record.name}:{record.lineno}"
        message = record.getMessage()

        formatted = f"{timestamp} {prefix} {location} - {message}"
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            formatted += "\n" + record.exc_text
        if record.stack_info:
            formatted += "\n" + record.stack_info
        return formatted


# ── Setup function ─────────────────────────────────────────────────────────

def setup_logging(role: str) -> None:
    """Configure the root logger for *role* (e.g. ``"Server"``).

    - Adds a stderr StreamHandler (always).
    - Adds a RotatingFileHandler when ``settings.LOG_FILE`` is set.
    - Tames noisy third-party loggers.
    - Makes uvicorn loggers propagate through root (when role is Server).

    Safe to call multiple times (idempotent via handler name check).
    """
    from config import settings

    root = logging.getLogger()

    if any(getattr(h, "name", None) == "_flowcanvas_stream" for h in root.handlers):
        return

    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    ctx_filter = ContextFilter(role)
    formatter = ContextFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.name = "_flowcanvas_stream"
    stream_handler.addFilter(ctx_filter)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_path),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.name = "_flowcanvas_file"
        file_handler.addFilter(ctx_filter)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in ("httpx", "httpcore", "urllib3", "multipart"):
        logging.getLogger(name).setLevel(logging.WARNING)

    # Make uvicorn loggers propagate through root so they get our format
    if "server" in role.lower():
        for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
            uv_logger = logging.getLogger(name)
            uv_logger.handlers.clear()
            uv_logger.propagate = True

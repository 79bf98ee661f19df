"""
Structured logging for the dress checklist runner.

JSON logs when LOG_FORMAT=json, readable lines otherwise. Records go to
stderr, which keeps diagnostics separate from the output file. The input
line number being processed is attached to every record.

Usage:
    from dress_checklist.logger import logger

    logger.set_line(3)
    logger.warning("ERR: Command id 9 is not valid.")
    logger.event("run_completed", accepted=10, rejected=1)
"""

import logging
import json
import os
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dress_checklist.settings import settings


_line_number_var: ContextVar[Optional[int]] = ContextVar('line_number', default=None)
_extra_context_var: ContextVar[Optional[Dict[str, Any]]] = ContextVar('extra_context', default=None)


class StructuredLogger:
    """
    Structured logger with JSON support and line tracking.

    - JSON format (LOG_FORMAT=json)
    - Readable format (default)
    - Current input line number on every record
    - event() for run milestones
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)

        if not self.logger.handlers:
            self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure level, handler and format from settings and environment"""
        level_name = settings.get_nested("logging.level", "INFO")
        level = getattr(logging, str(level_name).upper(), logging.INFO)
        self.logger.setLevel(level)

        handler = logging.StreamHandler()
        handler.setLevel(level)

        log_format = os.environ.get("LOG_FORMAT", "readable")

        if log_format == "json":
            formatter = logging.Formatter("%(message)s")
        else:
            formatter = logging.Formatter(
                "[%(asctime)s] %(levelname)s - %(message)s",
                datefmt="%H:%M:%S"
            )

        handler.setFormatter(formatter)
        self.logger.addHandler(handler)

        self.logger.propagate = False

    def set_level(self, level_name: str) -> None:
        """Override the level configured from settings"""
        level = getattr(logging, level_name.upper(), logging.INFO)
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)

    @property
    def line_number(self) -> Optional[int]:
        """Context-local input line number"""
        return _line_number_var.get()

    def set_line(self, line_number: int) -> None:
        _line_number_var.set(line_number)

    def clear_line(self) -> None:
        _line_number_var.set(None)

    @property
    def _extra_context(self) -> Dict[str, Any]:
        ctx = _extra_context_var.get()
        if ctx is None:
            ctx = {}
            _extra_context_var.set(ctx)
        return ctx

    def set_context(self, **kwargs: Any) -> None:
        """Set extra context attached to every record"""
        ctx = self._extra_context
        ctx.update(kwargs)
        _extra_context_var.set(ctx)

    def clear_context(self) -> None:
        _extra_context_var.set({})

    def _format_structured(self, level: str, message: str, **kwargs: Any) -> Dict[str, Any]:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "logger": self.name,
            "message": message,
        }

        if self.line_number is not None:
            log_entry["line"] = self.line_number

        if self._extra_context:
            log_entry.update(self._extra_context)

        if kwargs:
            log_entry.update(kwargs)

        return log_entry

    def _should_use_json(self) -> bool:
        return os.environ.get("LOG_FORMAT", "readable") == "json"

    def _format_readable(self, message: str, **kwargs: Any) -> str:
        if kwargs:
            extras = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            message = f"{message} [{extras}]"

        if self.line_number is not None:
            message = f"[line {self.line_number}] {message}"

        return message

    def _log(self, level: str, message: str, log_method, **kwargs: Any) -> None:
        if self._should_use_json():
            structured = self._format_structured(level, message, **kwargs)
            log_method(json.dumps(structured, ensure_ascii=False))
        else:
            log_method(self._format_readable(message, **kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log("DEBUG", message, self.logger.debug, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log("INFO", message, self.logger.info, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log("WARNING", message, self.logger.warning, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log("ERROR", message, self.logger.error, **kwargs)

    def event(self, event_type: str, **kwargs: Any) -> None:
        """
        Log a run milestone.

        Example:
            logger.event("rules_loaded", path="rules.yaml", count=8)
        """
        self._log("EVENT", event_type, self.logger.info, **kwargs)


# Singleton logger; module loggers (logging.getLogger(__name__)) are its children
logger = StructuredLogger("dress_checklist")


def create_test_logger(name: str = "test") -> StructuredLogger:
    """Create an isolated logger for tests"""
    return StructuredLogger(f"dress_checklist.{name}")

"""Centralized logging bootstrap with per-run log directories."""

from __future__ import annotations

import json
import logging
import logging.config
import os
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


_RUN_DIR_ENV = "TODOTRAY_RUN_DIR"
LOG_FILE_NAME = "todotray.log"
JSON_LOG_FILE_NAME = "todotray.jsonl"

_CURRENT_STATE: Optional["LoggingState"] = None


@dataclass(slots=True)
class LoggingState:
    """Holds runtime logging options derived from configuration."""

    run_dir: Optional[Path]
    structured: bool


class JsonFormatter(logging.Formatter):
    """Simple JSON formatter for structured logging files."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short doc
        data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack"] = self.formatStack(record.stack_info)

        return json.dumps(data, ensure_ascii=True)


def bootstrap_logging(config: dict[str, Any], base_dir: Path | str = ".") -> LoggingState:
    """Configure logging based on config dict and environment overrides."""

    logging_cfg = config.get("logging", {}) or {}

    level_name = str(logging_cfg.get("level") or "INFO")
    level = getattr(logging, level_name.upper(), logging.INFO)

    structured = bool(logging_cfg.get("structured", False))

    retention = int(logging_cfg.get("run_retention", 5))
    run_dir: Optional[Path] = None
    run_dir_error: Optional[OSError] = None
    try:
        run_dir = ensure_run_directory(Path(base_dir) / "logs", retention)
    except OSError as exc:
        run_dir_error = exc

    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "plain",
            "stream": "ext://sys.stdout",
        },
    }

    if run_dir is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "level": level,
            "formatter": "plain",
            "filename": str(run_dir / LOG_FILE_NAME),
            "encoding": "utf-8",
        }

    if structured and run_dir is not None:
        handlers["json"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "json",
            "filename": str(run_dir / JSON_LOG_FILE_NAME),
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                },
                "json": {
                    "()": JsonFormatter,
                },
            },
            "handlers": handlers,
            "root": {
                "level": level,
                "handlers": list(handlers.keys()),
            },
        }
    )

    state = LoggingState(run_dir=run_dir, structured=structured)

    global _CURRENT_STATE
    _CURRENT_STATE = state

    logger = logging.getLogger(__name__)
    if run_dir_error is not None:
        logger.warning("Could not create log directory, logging to console only: %s", run_dir_error)
    else:
        logger.debug("Logging initialized in %s", run_dir)
    return state


def ensure_run_directory(base: Path, retention: int) -> Path:
    """Create per-run log directory and enforce retention."""

    env_override = os.environ.get(_RUN_DIR_ENV)
    if env_override:
        run_dir = Path(env_override).expanduser().resolve()
        run_dir.mkdir(parents=True, exist_ok=True)
        return run_dir

    base.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    run_dir = base / f"run-{timestamp}"
    run_dir.mkdir(parents=True, exist_ok=True)

    run_dirs = sorted(
        (d for d in base.iterdir() if d.is_dir() and d.name.startswith("run-")),
        key=lambda path: path.name,
    )

    if retention > 0:
        while len(run_dirs) > retention:
            oldest = run_dirs.pop(0)
            shutil.rmtree(oldest, ignore_errors=True)

    return run_dir


def get_current_run_dir() -> Optional[Path]:
    """Return the active log run directory if logging was bootstrapped."""

    return _CURRENT_STATE.run_dir if _CURRENT_STATE else None

# missingkit/config/logging_config.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  missingkit — Logging Configuration                                       ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Console + Rotating File Sinks (loguru)                                ║
║  ✓ Optional Structured JSONL Sink                                        ║
║  ✓ Stdlib logging / warnings Interception                                ║
║  ✓ Bound Loggers & Timing Decorator                                      ║
╚════════════════════════════════════════════════════════════════════════════╝

Logging Flow:
```
    Library code
         ├─→ loguru.logger (bound with step / component)
         ├─→ stdlib logging → InterceptHandler → loguru
         └─→ warnings.warn  → logging.captureWarnings → loguru

    Sinks:
    ├── Console (stderr, colorized)
    ├── missingkit.log (all logs, rotated)     [not in TEST_MODE]
    ├── errors.log (ERROR+ only)               [not in TEST_MODE]
    └── missingkit.jsonl (structured JSON)     [LOG_JSON_ENABLED]
```

The library itself never installs sinks on import; applications call
``setup_logging()`` once at start-up.

Usage:
```python
    from missingkit.config.logging_config import setup_logging, get_logger

    setup_logging(log_level="DEBUG")
    log = get_logger(__name__, component="notebook")
    log.info("Ready")
```

Dependencies:
    • loguru
"""

from __future__ import annotations

import logging
import sys
import time
import warnings
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from loguru import logger

from missingkit.config.constants import LOG_FORMAT_COMPACT, LOG_FORMAT_HUMAN
from missingkit.config.settings import settings

__all__ = [
    "setup_logging",
    "get_logger",
    "set_log_level",
    "log_execution_time",
    "InterceptHandler",
]


# ═══════════════════════════════════════════════════════════════════════════
# Stdlib Logging Interception
# ═══════════════════════════════════════════════════════════════════════════

class InterceptHandler(logging.Handler):
    """
    🔌 **Stdlib Logging Interceptor**

    Routes standard library logging records (including captured
    ``warnings``) to loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Emit log record to loguru."""
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        logger.bind(step=record.name) \
              .opt(depth=depth, exception=record.exc_info) \
              .log(level, record.getMessage())


def _patch_record(record: Dict[str, Any]) -> None:
    """Make sure every record carries the fields the formats reference."""
    record["extra"].setdefault("step", "-")


# ═══════════════════════════════════════════════════════════════════════════
# Initialization State
# ═══════════════════════════════════════════════════════════════════════════

_INITIALIZED_FLAG = False
_SINK_IDS: List[int] = []


# ═══════════════════════════════════════════════════════════════════════════
# Main Setup
# ═══════════════════════════════════════════════════════════════════════════

def setup_logging(
    app_name: Optional[str] = None,
    log_level: Optional[str] = None,
    *,
    enable_json: Optional[bool] = None,
    console_compact: Optional[bool] = None,
    logs_path: Optional[Union[str, Path]] = None,
    reset_existing: bool = False
) -> None:
    """
    🔧 **Setup Centralized Logging**

    Initializes the loguru sinks. Idempotent unless ``reset_existing``.

    Args:
        app_name: Application name (defaults to settings.APP_NAME)
        log_level: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        enable_json: Enable JSONL sink
        console_compact: Use compact console format
        logs_path: Directory for log files
        reset_existing: Force re-initialization
    """
    global _INITIALIZED_FLAG

    if _INITIALIZED_FLAG and not reset_existing:
        return

    app_name = app_name or settings.APP_NAME
    log_level = (log_level or settings.LOG_LEVEL).upper()
    logs_dir = Path(logs_path or settings.LOGS_PATH).expanduser().resolve()
    enable_json = settings.LOG_JSON_ENABLED if enable_json is None else enable_json
    console_compact = (
        settings.LOG_CONSOLE_COMPACT if console_compact is None else console_compact
    )

    # Remove existing sinks
    logger.remove()
    _SINK_IDS.clear()
    logger.configure(patcher=_patch_record)

    # Console sink
    _SINK_IDS.append(
        logger.add(
            sys.stderr,
            format=LOG_FORMAT_COMPACT if console_compact else LOG_FORMAT_HUMAN,
            level=log_level,
            colorize=True,
            backtrace=(log_level == "DEBUG"),
            diagnose=False
        )
    )

    if settings.file_logging_enabled:
        logs_dir.mkdir(parents=True, exist_ok=True)

        # Main log file
        _SINK_IDS.append(
            logger.add(
                logs_dir / f"{app_name}.log",
                format=LOG_FORMAT_HUMAN,
                level=log_level,
                rotation=settings.LOG_ROTATION,
                retention=settings.LOG_RETENTION,
                compression="zip",
                encoding="utf-8"
            )
        )

        # Error log file
        _SINK_IDS.append(
            logger.add(
                logs_dir / "errors.log",
                format=LOG_FORMAT_HUMAN,
                level="ERROR",
                rotation=settings.LOG_ROTATION,
                retention="90 days",
                compression="zip",
                encoding="utf-8"
            )
        )

        # JSONL sink
        if enable_json:
            _SINK_IDS.append(
                logger.add(
                    logs_dir / f"{app_name}.jsonl",
                    serialize=True,
                    level=log_level,
                    rotation=settings.LOG_ROTATION,
                    retention=settings.LOG_RETENTION,
                    compression="zip",
                    encoding="utf-8"
                )
            )

    # Intercept stdlib logging and warnings
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.captureWarnings(True)
    warnings.simplefilter("default")

    logger.info(
        f"✓ Logging initialized: app={app_name}, level={log_level}, "
        f"json={enable_json}, files={settings.file_logging_enabled}"
    )

    _INITIALIZED_FLAG = True


# ═══════════════════════════════════════════════════════════════════════════
# Utilities
# ═══════════════════════════════════════════════════════════════════════════

def get_logger(name: Optional[str] = None, **binds: Any):
    """
    📝 **Get Bound Logger**

    Args:
        name: Logger name (usually __name__)
        **binds: Additional bindings

    Returns:
        Bound loguru logger
    """
    lgr = logger

    if name:
        lgr = lgr.bind(name=name)

    if binds:
        lgr = lgr.bind(**binds)

    return lgr


def set_log_level(level: str) -> None:
    """Change the console/file log level at runtime."""
    setup_logging(log_level=level, reset_existing=True)


# ═══════════════════════════════════════════════════════════════════════════
# Decorators
# ═══════════════════════════════════════════════════════════════════════════

def log_execution_time(func: Callable) -> Callable:
    """
    ⏱️ **Log Execution Time Decorator**

    Logs the wall-clock duration of ``func`` at DEBUG level and re-raises
    any exception after logging it.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__qualname__} failed after "
                         f"{time.perf_counter() - start:.3f}s: {e}")
            raise
        finally:
            logger.debug(f"{func.__qualname__} took {time.perf_counter() - start:.4f}s")

    return wrapper

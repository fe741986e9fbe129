"""
debug_trace.py

Debug instrumentation for following the import pipeline record by record.
Disabled by default; enable with ``set_enabled(True)`` or the
``general.debug_trace`` setting.
"""

import sys
from datetime import datetime
from functools import wraps
from typing import Optional

# Set to True to enable debug tracing
DEBUG_TRACE = False

# Set to True to trace per-entity events (very verbose)
TRACE_ENTITY = False

# Log file (None for stderr only)
LOG_FILE: Optional[str] = None

_log_file = None


def set_enabled(enabled: bool, log_file: Optional[str] = None, entities: bool = False):
    """Switch tracing on or off at runtime."""
    global DEBUG_TRACE, TRACE_ENTITY, LOG_FILE
    DEBUG_TRACE = enabled
    TRACE_ENTITY = entities
    if log_file != LOG_FILE:
        close_log()
        LOG_FILE = log_file


def _get_log_file():
    global _log_file
    if LOG_FILE and _log_file is None:
        try:
            _log_file = open(LOG_FILE, "w", encoding="utf-8")
        except OSError:
            pass
    return _log_file


def trace(msg: str, category: str = "INFO"):
    """Print a trace message with timestamp."""
    if not DEBUG_TRACE:
        return
    if category == "ENTITY" and not TRACE_ENTITY:
        return

    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{timestamp}] [{category}] {msg}"

    print(line, file=sys.stderr, flush=True)

    log_file = _get_log_file()
    if log_file:
        try:
            log_file.write(line + "\n")
            log_file.flush()
        except OSError:
            pass


def trace_call(category: str = "CALL"):
    """Decorator to trace function calls."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not DEBUG_TRACE:
                return func(*args, **kwargs)
            func_name = func.__qualname__
            trace(f">>> {func_name}", category)
            try:
                result = func(*args, **kwargs)
                trace(f"<<< {func_name}", category)
                return result
            except Exception as e:
                trace(f"!!! {func_name} raised {type(e).__name__}: {e}", "ERROR")
                raise
        return wrapper
    return decorator


def close_log():
    """Close log file."""
    global _log_file
    if _log_file:
        try:
            _log_file.close()
        except OSError:
            pass
        _log_file = None

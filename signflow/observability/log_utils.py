"""
Logging utilities for safe structured logging.

Provides helpers for safe logging without string concatenation errors,
and for keeping opaque signature payloads out of log lines.

Dependencies: None
System role: Logging helper functions
"""

from typing import Any


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Safely convert any value to a string for logging.

    Handles lists, dicts, None, and other types safely.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            val_str = value
        elif isinstance(value, (list, tuple)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def describe_payload(payload: str | bytes | None) -> str:
    """Summarize an opaque payload by size only."""
    if payload is None:
        return "None"
    return f"<{type(payload).__name__} len={len(payload)}>"

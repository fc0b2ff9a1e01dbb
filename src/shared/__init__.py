"""Shared utilities and helpers."""
from shared.progress import (
    CancelledError,
    ConsoleProgress,
    check_cancelled,
    clear_cancel_event,
    set_cancel_event,
)

__all__ = [
    'CancelledError',
    'ConsoleProgress',
    'check_cancelled',
    'clear_cancel_event',
    'set_cancel_event',
]

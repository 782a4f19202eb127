"""Function availability policy (pure, snapshot driven)."""

from usbmodes.policy.availability import (
    Decision,
    evaluate,
    is_click_ignored,
    is_supported,
    resolve_current_function,
    supported_functions,
)

__all__ = [
    "Decision",
    "evaluate",
    "is_click_ignored",
    "is_supported",
    "resolve_current_function",
    "supported_functions",
]

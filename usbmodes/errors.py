from __future__ import annotations

from usbmodes.core.functions import UnknownFunctionError, UsbFunction


class UsbModesError(RuntimeError):
    pass


class TetheringStartFailed(UsbModesError):
    """Reported through the tethering callback; recovered by reverting the function mask."""

    def __init__(self, error_code: int) -> None:
        super().__init__(f"tethering start failed (error={error_code})")
        self.error_code = error_code


class InvalidSelectionError(UsbModesError, ValueError):
    def __init__(self, choice: object, count: int) -> None:
        super().__init__(f"invalid selection {choice!r}: expected an index in [0, {count}) or a UsbFunction")
        self.choice = choice


class FunctionNotSupported(UsbModesError):
    def __init__(self, function: UsbFunction, reason: str = "") -> None:
        msg = f"usb function {function} is not available"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.function = function
        self.reason = reason


__all__ = [
    "FunctionNotSupported",
    "InvalidSelectionError",
    "TetheringStartFailed",
    "UnknownFunctionError",
    "UsbModesError",
]

"""USB connection mode policy.

Decides which USB functions (file transfer, tethering, MIDI, PTP, webcam,
charging only) may be offered, and applies a selection through pluggable
USB/tethering services.
"""

from usbmodes.core.capabilities import CapabilitySnapshot, Restriction, RestrictionTier
from usbmodes.core.functions import ALL_FUNCTIONS, NONE_FUNCTION, UsbFunction
from usbmodes.policy.availability import is_click_ignored, is_supported, resolve_current_function
from usbmodes.session import UsbFunctionSession

__all__ = [
    "ALL_FUNCTIONS",
    "CapabilitySnapshot",
    "NONE_FUNCTION",
    "Restriction",
    "RestrictionTier",
    "UsbFunction",
    "UsbFunctionSession",
    "is_click_ignored",
    "is_supported",
    "resolve_current_function",
]

"""
Function availability policy.

Pure functions over a CapabilitySnapshot. Gates are evaluated in a fixed order
and the first failing gate denies:

1. capability   - MIDI feature / tethering support
2. user tier    - DISALLOW_USB_FILE_TRANSFER (MTP/PTP), DISALLOW_CONFIG_TETHERING (RNDIS)
3. system tier  - the same restrictions at the base tier, plus the UVC feature flag
4. non-admin    - tethering is owner-only

Checks AND against the mask, so a combined mask is denied if any bit is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Union

from usbmodes.core.capabilities import CapabilitySnapshot, Restriction, RestrictionTier
from usbmodes.core.functions import (
    ALL_FUNCTIONS,
    FILE_TRANSFER_FUNCTIONS,
    FUNCTION_ACCESSORY,
    FUNCTION_MIDI,
    FUNCTION_MTP,
    FUNCTION_NCM,
    FUNCTION_RNDIS,
    FUNCTION_UVC,
    NONE_FUNCTION,
    TETHERING_FUNCTIONS,
    UsbFunction,
    function_by_mask,
    functions_to_string,
)

Gate = Literal["capability", "user_restriction", "system_restriction", "non_admin"]
FunctionLike = Union[UsbFunction, int]


@dataclass(frozen=True)
class Decision:
    mask: int
    allowed: bool
    gate: Optional[Gate] = None
    reason: str = ""


def _mask(function: FunctionLike) -> int:
    return function.mask if isinstance(function, UsbFunction) else int(function)


def _restricted(mask: int, caps: CapabilitySnapshot, tier: RestrictionTier) -> Optional[str]:
    if (mask & FILE_TRANSFER_FUNCTIONS) and caps.has_restriction(Restriction.DISALLOW_USB_FILE_TRANSFER, tier):
        return Restriction.DISALLOW_USB_FILE_TRANSFER.value
    if (mask & TETHERING_FUNCTIONS) and caps.has_restriction(Restriction.DISALLOW_CONFIG_TETHERING, tier):
        return Restriction.DISALLOW_CONFIG_TETHERING.value
    return None


def evaluate(function: FunctionLike, caps: CapabilitySnapshot) -> Decision:
    """Run the gates in order and report the first one that denies."""
    mask = _mask(function)

    if (mask & FUNCTION_MIDI) and not caps.midi_supported:
        return Decision(mask, False, "capability", "midi not supported")
    if (mask & FUNCTION_RNDIS) and not caps.tethering_supported:
        return Decision(mask, False, "capability", "tethering not supported")

    hit = _restricted(mask, caps, RestrictionTier.USER)
    if hit:
        return Decision(mask, False, "user_restriction", hit)

    hit = _restricted(mask, caps, RestrictionTier.BASE)
    if hit:
        return Decision(mask, False, "system_restriction", hit)
    if (mask & FUNCTION_UVC) and not caps.uvc_enabled:
        return Decision(mask, False, "system_restriction", "uvc disabled")

    if not caps.is_admin_user and (mask & FUNCTION_RNDIS):
        return Decision(mask, False, "non_admin", "tethering requires admin user")

    return Decision(mask, True)


def is_supported(function: FunctionLike, caps: CapabilitySnapshot) -> bool:
    return evaluate(function, caps).allowed


def supported_functions(caps: CapabilitySnapshot) -> List[UsbFunction]:
    return [f for f in ALL_FUNCTIONS if is_supported(f, caps)]


def is_click_ignored(function: FunctionLike, caps: CapabilitySnapshot) -> bool:
    """Selecting MTP while in accessory mode would tear down the accessory session."""
    return bool(caps.current_functions & FUNCTION_ACCESSORY) and _mask(function) == FUNCTION_MTP


def normalize_current_functions(mask: int) -> int:
    if mask & FUNCTION_ACCESSORY:
        return FUNCTION_MTP
    if mask == FUNCTION_NCM:
        return FUNCTION_RNDIS
    return mask


def resolve_current_function(mask: int, supported: Optional[Iterable[UsbFunction]] = None) -> UsbFunction:
    """
    Map the platform's current mask onto the supported list.

    Accessory mode reads as MTP and bare NCM reads as RNDIS; anything that
    doesn't match a supported entry (e.g. `mtp,adb`) falls back to NONE.
    """
    normalized = normalize_current_functions(mask)
    if supported is None:
        found = function_by_mask(normalized)
        return NONE_FUNCTION if found is None else found
    for f in supported:
        if f.mask == normalized:
            return f
    return NONE_FUNCTION


def describe_mask(mask: int) -> str:
    return f"{mask} ({functions_to_string(mask)})"

"""USB gadget function table (single source of truth).

Bit values match the platform's gadget function ABI and must not be renumbered:
the query/mutation services exchange raw masks, not names.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

FUNCTION_NONE = 0
FUNCTION_ADB = 1 << 0
FUNCTION_ACCESSORY = 1 << 1
FUNCTION_MTP = 1 << 2
FUNCTION_MIDI = 1 << 3
FUNCTION_PTP = 1 << 4
FUNCTION_RNDIS = 1 << 5
FUNCTION_AUDIO_SOURCE = 1 << 6
FUNCTION_UVC = 1 << 7
FUNCTION_NCM = 1 << 10

MASK_LIMIT = 1 << 64

# Platform names, in bit order (used for mask <-> string conversion).
FUNCTION_NAMES: Dict[int, str] = {
    FUNCTION_ADB: "adb",
    FUNCTION_ACCESSORY: "accessory",
    FUNCTION_MTP: "mtp",
    FUNCTION_MIDI: "midi",
    FUNCTION_PTP: "ptp",
    FUNCTION_RNDIS: "rndis",
    FUNCTION_AUDIO_SOURCE: "audio_source",
    FUNCTION_UVC: "uvc",
    FUNCTION_NCM: "ncm",
}

FILE_TRANSFER_FUNCTIONS = FUNCTION_MTP | FUNCTION_PTP
TETHERING_FUNCTIONS = FUNCTION_RNDIS


class UnknownFunctionError(ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unknown usb function: {name!r}")
        self.name = name


class UsbFunction(BaseModel):
    """One selectable USB mode (a single gadget function bit, or none)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mask: int
    name: str
    description: str

    @field_validator("mask")
    @classmethod
    def _single_bit(cls, v: int) -> int:
        if v < 0 or v >= MASK_LIMIT:
            raise ValueError(f"mask out of unsigned 64-bit range: {v}")
        if v & (v - 1):
            raise ValueError(f"a usb function has at most one bit set: {v:#x}")
        return v

    def __str__(self) -> str:
        return self.name or "none"


NONE_FUNCTION = UsbFunction(mask=FUNCTION_NONE, name="", description="No data transfer")
MTP_FUNCTION = UsbFunction(mask=FUNCTION_MTP, name="mtp", description="File transfer")
RNDIS_FUNCTION = UsbFunction(mask=FUNCTION_RNDIS, name="rndis", description="USB tethering")
MIDI_FUNCTION = UsbFunction(mask=FUNCTION_MIDI, name="midi", description="MIDI")
PTP_FUNCTION = UsbFunction(mask=FUNCTION_PTP, name="ptp", description="PTP")
UVC_FUNCTION = UsbFunction(mask=FUNCTION_UVC, name="uvc", description="Webcam")

# Display order. NONE (charging only) is always last.
ALL_FUNCTIONS: List[UsbFunction] = [
    MTP_FUNCTION,
    RNDIS_FUNCTION,
    MIDI_FUNCTION,
    PTP_FUNCTION,
    UVC_FUNCTION,
    NONE_FUNCTION,
]


def function_by_name(name: str) -> UsbFunction:
    """Look up a table function by platform name (`none`/empty means charging only)."""
    key = (name or "").strip().lower()
    if key in ("", "none"):
        return NONE_FUNCTION
    for f in ALL_FUNCTIONS:
        if f.name == key:
            return f
    raise UnknownFunctionError(name)


def function_by_mask(mask: int) -> Optional[UsbFunction]:
    for f in ALL_FUNCTIONS:
        if f.mask == mask:
            return f
    return None


def functions_to_string(mask: int) -> str:
    """Render a mask as the platform's comma separated name list (`none` when empty)."""
    names = [n for bit, n in FUNCTION_NAMES.items() if mask & bit]
    return ",".join(names) if names else "none"


def functions_from_string(raw: str) -> int:
    """Parse `mtp,adb` style strings into a mask. Raises UnknownFunctionError."""
    by_name = {n: bit for bit, n in FUNCTION_NAMES.items()}
    mask = FUNCTION_NONE
    for part in (raw or "").split(","):
        token = part.strip().lower()
        if not token or token == "none":
            continue
        if token not in by_name:
            raise UnknownFunctionError(token)
        mask |= by_name[token]
    return mask

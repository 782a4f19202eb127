from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, List, Optional

from usbmodes.core.capabilities import Restriction, parse_restrictions
from usbmodes.core.functions import FUNCTION_NONE, UnknownFunctionError, functions_from_string

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "y", "on")


def _env_optional_int(name: str) -> Optional[int]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return None


def _split_csv(raw: str) -> List[str]:
    return [x.strip() for x in (raw or "").split(",") if x.strip()]


@dataclass(frozen=True)
class UsbModesConfig:
    # Logging
    log_level: str
    debug: bool

    # Simulated device profile (in-memory backend)
    tethering_supported: bool
    midi_supported: bool
    uvc_enabled: bool
    admin_user: bool
    current_functions: int
    user_restrictions: FrozenSet[Restriction]
    base_restrictions: FrozenSet[Restriction]
    tethering_fail_error: Optional[int]

    @property
    def effective_log_level(self) -> int:
        if self.debug:
            return logging.DEBUG
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def load_config_uncached() -> UsbModesConfig:
    """
    Load configuration from environment variables.

    Recommended vars:
    - USBMODES_LOG_LEVEL=INFO
    - USBMODES_DEBUG=0|1
    - USB_TETHERING_SUPPORTED=1
    - USB_MIDI_SUPPORTED=1
    - USB_UVC_ENABLED=0
    - USB_ADMIN_USER=1
    - USB_CURRENT_FUNCTIONS=mtp,adb
    - USB_USER_RESTRICTIONS=no_usb_file_transfer
    - USB_BASE_RESTRICTIONS=no_config_tethering
    - USB_TETHERING_FAIL_ERROR=5
    """
    raw_current = os.getenv("USB_CURRENT_FUNCTIONS", "")
    try:
        current = functions_from_string(raw_current)
    except UnknownFunctionError as e:
        logger.warning("Ignoring USB_CURRENT_FUNCTIONS=%r: %s", raw_current, e)
        current = FUNCTION_NONE

    return UsbModesConfig(
        log_level=(os.getenv("USBMODES_LOG_LEVEL", "") or "INFO").strip(),
        debug=_env_bool("USBMODES_DEBUG", False),
        tethering_supported=_env_bool("USB_TETHERING_SUPPORTED", True),
        midi_supported=_env_bool("USB_MIDI_SUPPORTED", True),
        uvc_enabled=_env_bool("USB_UVC_ENABLED", False),
        admin_user=_env_bool("USB_ADMIN_USER", True),
        current_functions=current,
        user_restrictions=parse_restrictions(_split_csv(os.getenv("USB_USER_RESTRICTIONS", ""))),
        base_restrictions=parse_restrictions(_split_csv(os.getenv("USB_BASE_RESTRICTIONS", ""))),
        tethering_fail_error=_env_optional_int("USB_TETHERING_FAIL_ERROR"),
    )


@lru_cache(maxsize=1)
def load_config() -> UsbModesConfig:
    return load_config_uncached()

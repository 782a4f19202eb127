"""Capability snapshot: everything the availability policy needs, read once."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, FrozenSet, Iterable, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from usbmodes.core.functions import FUNCTION_NONE, MASK_LIMIT

if TYPE_CHECKING:
    from usbmodes.services.base import UsbQueryService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Restriction(str, Enum):
    DISALLOW_USB_FILE_TRANSFER = "no_usb_file_transfer"
    DISALLOW_CONFIG_TETHERING = "no_config_tethering"


class RestrictionTier(str, Enum):
    USER = "user"
    # System / device-owner tier; the profile owner cannot lift these.
    BASE = "base"


def parse_restrictions(names: Iterable[str]) -> FrozenSet[Restriction]:
    """
    Accept either the platform key (`no_config_tethering`) or the constant name
    (`DISALLOW_CONFIG_TETHERING`). Unknown names are dropped with a warning.
    """
    out: List[Restriction] = []
    for raw in names:
        token = (raw or "").strip()
        if not token:
            continue
        try:
            out.append(Restriction(token.lower()))
            continue
        except ValueError:
            pass
        member = Restriction.__members__.get(token.upper())
        if member is None:
            logger.warning("Ignoring unknown restriction %r", token)
            continue
        out.append(member)
    return frozenset(out)


class CapabilitySnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    tethering_supported: bool = False
    midi_supported: bool = False
    uvc_enabled: bool = False
    is_admin_user: bool = False
    current_functions: int = FUNCTION_NONE
    user_restrictions: FrozenSet[Restriction] = Field(default_factory=frozenset)
    base_restrictions: FrozenSet[Restriction] = Field(default_factory=frozenset)

    @field_validator("current_functions")
    @classmethod
    def _mask_range(cls, v: int) -> int:
        if v < 0 or v >= MASK_LIMIT:
            raise ValueError(f"mask out of unsigned 64-bit range: {v}")
        return v

    def has_restriction(self, restriction: Restriction, tier: RestrictionTier) -> bool:
        if tier is RestrictionTier.USER:
            return restriction in self.user_restrictions
        return restriction in self.base_restrictions


def _read(label: str, fn: Callable[[], T], fallback: T) -> T:
    try:
        return fn()
    except Exception as e:
        logger.warning("Capability query %s failed, using %r: %s", label, fallback, e)
        return fallback


def read_current_functions(query: UsbQueryService) -> int:
    return _read("current_functions", lambda: int(query.get_current_functions()), FUNCTION_NONE)


def read_capabilities(query: UsbQueryService) -> CapabilitySnapshot:
    """
    Build a snapshot from a UsbQueryService.

    Each query is independent: a failing read falls back to "capability false",
    "restriction absent" or an empty function mask, and the rest still apply.
    """
    user: List[Restriction] = []
    base: List[Restriction] = []
    for r in Restriction:
        if _read(f"user:{r.value}", lambda r=r: bool(query.has_user_restriction(r)), False):
            user.append(r)
        if _read(f"base:{r.value}", lambda r=r: bool(query.has_base_user_restriction(r)), False):
            base.append(r)

    return CapabilitySnapshot(
        tethering_supported=_read("tethering_supported", lambda: bool(query.is_tethering_supported()), False),
        midi_supported=_read("midi_supported", lambda: bool(query.is_midi_supported()), False),
        uvc_enabled=_read("uvc_enabled", lambda: bool(query.is_uvc_enabled()), False),
        is_admin_user=_read("is_admin_user", lambda: bool(query.is_admin_user()), False),
        current_functions=read_current_functions(query),
        user_restrictions=frozenset(user),
        base_restrictions=frozenset(base),
    )

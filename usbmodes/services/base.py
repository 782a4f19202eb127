from __future__ import annotations

from typing import Callable, Optional, Protocol

from usbmodes.core.capabilities import Restriction

# Mode identifier passed to start_tethering for USB tethering.
TETHERING_USB = 1

# Invoked with an error code on failure. There is no success callback: success
# shows up as a USB state change.
TetheringCallback = Callable[[Optional[int]], None]


class UsbQueryService(Protocol):
    """
    Read side of the USB/user subsystems. Reads are synchronous and cheap.
    """

    def get_current_functions(self) -> int: ...

    def is_midi_supported(self) -> bool: ...

    def is_tethering_supported(self) -> bool: ...

    def is_uvc_enabled(self) -> bool: ...

    def is_admin_user(self) -> bool: ...

    def has_user_restriction(self, restriction: Restriction) -> bool: ...

    def has_base_user_restriction(self, restriction: Restriction) -> bool: ...


class UsbMutationService(Protocol):
    def set_current_functions(self, mask: int) -> None:
        """Fire-and-forget; returns once the request is accepted."""

    def start_tethering(self, mode: int, callback: TetheringCallback) -> None:
        """
        Start tethering asynchronously.

        `callback` may run later and on another thread; it is only invoked on failure.
        """

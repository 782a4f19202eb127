"""
USB function selection session.

The headless counterpart of the "Use USB for" picker: open it when a USB
connection shows up, offer `functions`, apply one selection, done. Rendering is
left to the caller.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from usbmodes.core.capabilities import CapabilitySnapshot, read_capabilities, read_current_functions
from usbmodes.core.functions import TETHERING_FUNCTIONS, UsbFunction
from usbmodes.errors import FunctionNotSupported, InvalidSelectionError, TetheringStartFailed
from usbmodes.policy.availability import (
    describe_mask,
    evaluate,
    is_click_ignored,
    resolve_current_function,
    supported_functions,
)
from usbmodes.services.base import TETHERING_USB, UsbMutationService, UsbQueryService

logger = logging.getLogger(__name__)


class UsbFunctionSession:
    def __init__(self, query: UsbQueryService, mutation: UsbMutationService) -> None:
        self._query = query
        self._mutation = mutation
        self._caps: Optional[CapabilitySnapshot] = None
        self._functions: List[UsbFunction] = []
        self._checked_index = -1
        self._open = False
        self._abandoned = False
        # Rollback target for a failed tethering start. Captured before the async call.
        self._previous_functions: Optional[int] = None
        # Token of the tethering request a failure may still roll back; None once moot.
        self._tethering_request = 0
        self._pending_request: Optional[int] = None

    def open(self) -> "UsbFunctionSession":
        caps = read_capabilities(self._query)
        functions = supported_functions(caps)
        current = resolve_current_function(caps.current_functions, functions)
        logger.debug("current usb functions: %s", describe_mask(caps.current_functions))

        self._caps = caps
        self._functions = functions
        self._checked_index = functions.index(current)
        self._open = True
        self._abandoned = False
        logger.debug("checked item=%s (%s)", self._checked_index, current)
        return self

    @property
    def functions(self) -> List[UsbFunction]:
        return list(self._functions)

    @property
    def checked_index(self) -> int:
        return self._checked_index

    @property
    def current_function(self) -> Optional[UsbFunction]:
        if 0 <= self._checked_index < len(self._functions):
            return self._functions[self._checked_index]
        return None

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def abandoned(self) -> bool:
        return self._abandoned

    @property
    def previous_functions(self) -> Optional[int]:
        return self._previous_functions

    def select(self, choice: Union[int, UsbFunction]) -> bool:
        """
        Apply a selection and close the session.

        Returns False when nothing was applied: the session is closed, or the
        click is ignored (MTP while in accessory mode; the session stays open).
        """
        if not self._open or self._caps is None:
            logger.debug("select ignored: session closed")
            return False

        function = self._resolve_choice(choice)
        if function not in self._functions:
            raise FunctionNotSupported(function, evaluate(function, self._caps).reason)

        live = self._caps.model_copy(update={"current_functions": read_current_functions(self._query)})
        if is_click_ignored(function, live):
            logger.debug("select ignored for %s: accessory session active", function)
            return False

        logger.debug("select: %s", function)
        self._apply(function, live.current_functions)
        # The list is not refreshed: a selection ends the session.
        self._open = False
        return True

    def _resolve_choice(self, choice: Union[int, UsbFunction]) -> UsbFunction:
        if isinstance(choice, UsbFunction):
            return choice
        if isinstance(choice, bool) or not isinstance(choice, int):
            raise InvalidSelectionError(choice, len(self._functions))
        if not 0 <= choice < len(self._functions):
            raise InvalidSelectionError(choice, len(self._functions))
        return self._functions[choice]

    def _apply(self, function: UsbFunction, current: int) -> None:
        if function.mask & TETHERING_FUNCTIONS:
            self._tethering_request += 1
            request = self._tethering_request
            self._pending_request = request
            self._previous_functions = current
            self._mutation.start_tethering(
                TETHERING_USB,
                lambda error: self._on_tethering_result(request, error),
            )
        else:
            self._mutation.set_current_functions(function.mask)

    def _on_tethering_result(self, request: int, error: Optional[int]) -> None:
        if error is None:
            logger.debug("tethering started")
            return

        failure = TetheringStartFailed(error)
        logger.warning("%s", failure)
        if request != self._pending_request:
            logger.info("Tethering request %s is no longer pending (disconnected or superseded); skipping rollback", request)
            return

        self._pending_request = None
        previous, self._previous_functions = self._previous_functions, None
        if previous is None:
            return
        logger.info("Restoring usb functions %s", describe_mask(previous))
        self._mutation.set_current_functions(previous)

    def done(self) -> None:
        self._open = False

    def on_usb_state(self, connected: bool) -> None:
        if connected:
            return
        logger.debug("usb disconnected, goodbye")
        self._abandoned = True
        self._pending_request = None
        self._open = False

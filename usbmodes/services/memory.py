"""
In-memory USB backend (simulated device).

Implements both UsbQueryService and UsbMutationService. Used by the CLI and the
tests; it is not a model of real gadget timing.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from typing import Iterable, List, Optional, Set

from usbmodes.core.capabilities import Restriction, RestrictionTier
from usbmodes.core.functions import FUNCTION_NONE, FUNCTION_RNDIS, functions_to_string
from usbmodes.services.base import TETHERING_USB, TetheringCallback

logger = logging.getLogger(__name__)


def _log_callback_error(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.warning("Tethering callback raised on executor: %s", exc, exc_info=exc)


class InMemoryUsbBackend:
    def __init__(
        self,
        *,
        tethering_supported: bool = True,
        midi_supported: bool = True,
        uvc_enabled: bool = False,
        admin_user: bool = True,
        current_functions: int = FUNCTION_NONE,
        user_restrictions: Iterable[Restriction] = (),
        base_restrictions: Iterable[Restriction] = (),
        tethering_error: Optional[int] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self.tethering_supported = tethering_supported
        self.midi_supported = midi_supported
        self.uvc_enabled = uvc_enabled
        self.admin_user = admin_user
        self.current_functions = current_functions
        self.user_restrictions: Set[Restriction] = set(user_restrictions)
        self.base_restrictions: Set[Restriction] = set(base_restrictions)
        self.tethering_error = tethering_error
        self.executor = executor

        # Recorded mutations, in call order.
        self.set_calls: List[int] = []
        self.tethering_calls: List[int] = []

    @classmethod
    def from_config(cls, cfg, *, executor: Optional[Executor] = None) -> "InMemoryUsbBackend":  # type: ignore[no-untyped-def]
        return cls(
            tethering_supported=cfg.tethering_supported,
            midi_supported=cfg.midi_supported,
            uvc_enabled=cfg.uvc_enabled,
            admin_user=cfg.admin_user,
            current_functions=cfg.current_functions,
            user_restrictions=cfg.user_restrictions,
            base_restrictions=cfg.base_restrictions,
            tethering_error=cfg.tethering_fail_error,
            executor=executor,
        )

    # --- query side ---

    def get_current_functions(self) -> int:
        return self.current_functions

    def is_midi_supported(self) -> bool:
        return self.midi_supported

    def is_tethering_supported(self) -> bool:
        return self.tethering_supported

    def is_uvc_enabled(self) -> bool:
        return self.uvc_enabled

    def is_admin_user(self) -> bool:
        return self.admin_user

    def has_user_restriction(self, restriction: Restriction) -> bool:
        return restriction in self.user_restrictions

    def has_base_user_restriction(self, restriction: Restriction) -> bool:
        return restriction in self.base_restrictions

    def restrict(self, restriction: Restriction, tier: RestrictionTier = RestrictionTier.USER) -> None:
        if tier is RestrictionTier.USER:
            self.user_restrictions.add(restriction)
        else:
            self.base_restrictions.add(restriction)

    # --- mutation side ---

    def set_current_functions(self, mask: int) -> None:
        logger.debug("set_current_functions: %s (%s)", mask, functions_to_string(mask))
        self.set_calls.append(mask)
        self.current_functions = mask

    def start_tethering(self, mode: int, callback: TetheringCallback) -> None:
        if mode != TETHERING_USB:
            raise ValueError(f"unsupported tethering mode: {mode}")
        self.tethering_calls.append(mode)

        if self.tethering_error is None:
            self.current_functions = FUNCTION_RNDIS
            return

        error = self.tethering_error
        if self.executor is not None:
            future = self.executor.submit(callback, error)
            future.add_done_callback(_log_callback_error)
        else:
            callback(error)

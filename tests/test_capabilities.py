from __future__ import annotations

import logging

from usbmodes.core.capabilities import Restriction, RestrictionTier, parse_restrictions, read_capabilities
from usbmodes.core.functions import FUNCTION_ADB, FUNCTION_MTP


class _BrokenQuery:
    """Every read raises, as if the platform service were unavailable."""

    def get_current_functions(self) -> int:
        raise RuntimeError("usb service down")

    def is_midi_supported(self) -> bool:
        raise RuntimeError("package manager down")

    def is_tethering_supported(self) -> bool:
        raise RuntimeError("tethering service down")

    def is_uvc_enabled(self) -> bool:
        raise RuntimeError("sysprop unreadable")

    def is_admin_user(self) -> bool:
        raise RuntimeError("user service down")

    def has_user_restriction(self, restriction: Restriction) -> bool:
        raise RuntimeError("user service down")

    def has_base_user_restriction(self, restriction: Restriction) -> bool:
        raise RuntimeError("user service down")


def test_read_capabilities_from_backend(backend) -> None:
    backend.current_functions = FUNCTION_MTP | FUNCTION_ADB
    backend.admin_user = False
    backend.restrict(Restriction.DISALLOW_USB_FILE_TRANSFER, RestrictionTier.USER)
    backend.restrict(Restriction.DISALLOW_CONFIG_TETHERING, RestrictionTier.BASE)

    caps = read_capabilities(backend)

    assert caps.current_functions == FUNCTION_MTP | FUNCTION_ADB
    assert caps.is_admin_user is False
    assert caps.tethering_supported is True
    assert caps.midi_supported is True
    assert caps.uvc_enabled is True
    assert caps.user_restrictions == frozenset({Restriction.DISALLOW_USB_FILE_TRANSFER})
    assert caps.base_restrictions == frozenset({Restriction.DISALLOW_CONFIG_TETHERING})
    assert caps.has_restriction(Restriction.DISALLOW_CONFIG_TETHERING, RestrictionTier.BASE) is True
    assert caps.has_restriction(Restriction.DISALLOW_CONFIG_TETHERING, RestrictionTier.USER) is False


def test_query_failures_fall_back_to_absent_and_false(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="usbmodes.core.capabilities")

    caps = read_capabilities(_BrokenQuery())

    assert caps.current_functions == 0
    assert caps.tethering_supported is False
    assert caps.midi_supported is False
    assert caps.uvc_enabled is False
    assert caps.is_admin_user is False
    assert caps.user_restrictions == frozenset()
    assert caps.base_restrictions == frozenset()
    assert any("is_admin_user" in r.getMessage() for r in caplog.records)


def test_single_failing_query_does_not_poison_the_rest(backend) -> None:
    def _boom() -> bool:
        raise OSError("flaky")

    backend.is_uvc_enabled = _boom  # type: ignore[method-assign]
    backend.restrict(Restriction.DISALLOW_USB_FILE_TRANSFER)

    caps = read_capabilities(backend)
    assert caps.uvc_enabled is False
    assert caps.midi_supported is True
    assert Restriction.DISALLOW_USB_FILE_TRANSFER in caps.user_restrictions


def test_parse_restrictions_accepts_keys_and_constant_names(caplog) -> None:
    caplog.set_level(logging.WARNING)
    parsed = parse_restrictions(["no_usb_file_transfer", "DISALLOW_CONFIG_TETHERING", " ", "no_such_thing"])
    assert parsed == frozenset({Restriction.DISALLOW_USB_FILE_TRANSFER, Restriction.DISALLOW_CONFIG_TETHERING})
    assert any("no_such_thing" in r.getMessage() for r in caplog.records)


def test_readers_take_a_query_service() -> None:
    import typing

    from usbmodes.core.capabilities import read_current_functions
    from usbmodes.services.base import UsbQueryService

    ns = {"UsbQueryService": UsbQueryService}
    assert typing.get_type_hints(read_capabilities, localns=ns)["query"] is UsbQueryService
    assert typing.get_type_hints(read_current_functions, localns=ns)["query"] is UsbQueryService

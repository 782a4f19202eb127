from __future__ import annotations

import pytest


def test_function_table_order_and_none_last() -> None:
    from usbmodes.core.functions import ALL_FUNCTIONS, NONE_FUNCTION

    assert [f.name for f in ALL_FUNCTIONS] == ["mtp", "rndis", "midi", "ptp", "uvc", ""]
    assert ALL_FUNCTIONS[-1] == NONE_FUNCTION
    assert NONE_FUNCTION.mask == 0
    assert str(NONE_FUNCTION) == "none"


def test_bit_values_match_platform_abi() -> None:
    from usbmodes.core import functions as fn

    assert fn.FUNCTION_ADB == 1
    assert fn.FUNCTION_ACCESSORY == 2
    assert fn.FUNCTION_MTP == 4
    assert fn.FUNCTION_MIDI == 8
    assert fn.FUNCTION_PTP == 16
    assert fn.FUNCTION_RNDIS == 32
    assert fn.FUNCTION_AUDIO_SOURCE == 64
    assert fn.FUNCTION_UVC == 128
    assert fn.FUNCTION_NCM == 1024


def test_usb_function_rejects_multi_bit_mask() -> None:
    from pydantic import ValidationError

    from usbmodes.core.functions import UsbFunction

    with pytest.raises(ValidationError):
        UsbFunction(mask=0b110, name="mtp+midi", description="x")


def test_usb_function_rejects_mask_outside_u64() -> None:
    from pydantic import ValidationError

    from usbmodes.core.functions import UsbFunction

    with pytest.raises(ValidationError):
        UsbFunction(mask=1 << 64, name="big", description="x")
    with pytest.raises(ValidationError):
        UsbFunction(mask=-1, name="neg", description="x")


def test_usb_function_is_immutable() -> None:
    from pydantic import ValidationError

    from usbmodes.core.functions import MTP_FUNCTION

    with pytest.raises(ValidationError):
        MTP_FUNCTION.mask = 8  # type: ignore[misc]


def test_functions_to_string() -> None:
    from usbmodes.core.functions import FUNCTION_ADB, FUNCTION_MTP, functions_to_string

    assert functions_to_string(0) == "none"
    assert functions_to_string(FUNCTION_MTP | FUNCTION_ADB) == "adb,mtp"


def test_functions_from_string() -> None:
    from usbmodes.core.functions import FUNCTION_ADB, FUNCTION_MTP, FUNCTION_NCM, functions_from_string

    assert functions_from_string("mtp, adb") == FUNCTION_MTP | FUNCTION_ADB
    assert functions_from_string("NCM") == FUNCTION_NCM
    assert functions_from_string("") == 0
    assert functions_from_string("none") == 0


def test_functions_from_string_unknown_name() -> None:
    from usbmodes.core.functions import UnknownFunctionError, functions_from_string

    with pytest.raises(UnknownFunctionError) as ei:
        functions_from_string("mtp,floppy")
    assert ei.value.name == "floppy"


def test_function_by_name() -> None:
    from usbmodes.core.functions import NONE_FUNCTION, RNDIS_FUNCTION, UnknownFunctionError, function_by_name

    assert function_by_name("rndis") == RNDIS_FUNCTION
    assert function_by_name(" RNDIS ") == RNDIS_FUNCTION
    assert function_by_name("none") == NONE_FUNCTION
    assert function_by_name("") == NONE_FUNCTION
    with pytest.raises(UnknownFunctionError):
        # adb is a real gadget bit but not a selectable mode
        function_by_name("adb")


def test_function_by_mask() -> None:
    from usbmodes.core.functions import (
        FUNCTION_ADB,
        FUNCTION_MTP,
        FUNCTION_UVC,
        MTP_FUNCTION,
        NONE_FUNCTION,
        UVC_FUNCTION,
        function_by_mask,
    )

    assert function_by_mask(FUNCTION_MTP) == MTP_FUNCTION
    assert function_by_mask(FUNCTION_UVC) == UVC_FUNCTION
    assert function_by_mask(0) == NONE_FUNCTION
    # Gadget bits outside the selectable table and combined masks have no entry.
    assert function_by_mask(FUNCTION_ADB) is None
    assert function_by_mask(FUNCTION_MTP | FUNCTION_ADB) is None

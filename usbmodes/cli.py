"""
usbmodes CLI.

Runs the availability policy and a selection session against the simulated
device described by USB_* environment variables (see usbmodes.config).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from usbmodes.config import load_config
from usbmodes.core.capabilities import read_capabilities
from usbmodes.core.functions import ALL_FUNCTIONS, UnknownFunctionError, function_by_name, functions_to_string
from usbmodes.dump import availability_to_json_dict, function_to_dict
from usbmodes.errors import FunctionNotSupported
from usbmodes.policy.availability import evaluate, resolve_current_function, supported_functions
from usbmodes.services.memory import InMemoryUsbBackend
from usbmodes.session import UsbFunctionSession

EXIT_OK = 0
EXIT_BAD_FUNCTION = 2


def _configure_logging() -> None:
    cfg = load_config()
    logging.basicConfig(
        level=cfg.effective_log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def list_functions(backend: InMemoryUsbBackend, *, as_json: bool = False) -> int:
    caps = read_capabilities(backend)
    if as_json:
        print(json.dumps(availability_to_json_dict(caps), indent=2, sort_keys=False))
        return EXIT_OK

    print(f"Current usb functions: {caps.current_functions} ({functions_to_string(caps.current_functions)})\n")
    for f in ALL_FUNCTIONS:
        d = evaluate(f, caps)
        mark = "+" if d.allowed else "-"
        line = f"  [{mark}] {str(f):<6} {f.description}"
        if not d.allowed:
            line += f"  ({d.gate}: {d.reason})"
        print(line)
    return EXIT_OK


def show_current(backend: InMemoryUsbBackend, *, as_json: bool = False) -> int:
    caps = read_capabilities(backend)
    current = resolve_current_function(caps.current_functions, supported_functions(caps))
    if as_json:
        print(json.dumps(function_to_dict(current), indent=2))
    else:
        print(f"{current} - {current.description}")
    return EXIT_OK


def select_function(backend: InMemoryUsbBackend, name: str, *, as_json: bool = False) -> int:
    try:
        function = function_by_name(name)
    except UnknownFunctionError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_BAD_FUNCTION

    session = UsbFunctionSession(backend, backend).open()
    try:
        applied = session.select(function)
    except FunctionNotSupported as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_BAD_FUNCTION

    result = {
        "function": str(function),
        "applied": applied,
        "current_functions": backend.get_current_functions(),
        "current_functions_str": functions_to_string(backend.get_current_functions()),
    }
    if as_json:
        print(json.dumps(result, indent=2))
    elif applied:
        print(f"Selected {function}: usb functions now {result['current_functions_str']}")
    else:
        print(f"Selection of {function} ignored (accessory session active)")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="usbmodes",
        description="Show and apply USB connection modes under the current policy restrictions.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--list", action="store_true", help="List every USB function and whether it is allowed (default)")
    mode.add_argument("--current", action="store_true", help="Show the resolved current USB function")
    mode.add_argument("--select", metavar="NAME", help="Select a USB function (mtp, rndis, midi, ptp, uvc, none)")
    parser.add_argument("--json", action="store_true", help="Emit only JSON on stdout")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging()

    backend = InMemoryUsbBackend.from_config(load_config())
    if args.select is not None:
        return select_function(backend, args.select, as_json=args.json)
    if args.current:
        return show_current(backend, as_json=args.json)
    return list_functions(backend, as_json=args.json)

"""JSON dump helpers (CLI-friendly, testable).

We keep CLI printing logic out of core modules; this returns plain dicts.
"""

from __future__ import annotations

from typing import Any, Dict, List

from usbmodes.core.capabilities import CapabilitySnapshot
from usbmodes.core.functions import ALL_FUNCTIONS, UsbFunction, functions_to_string
from usbmodes.policy.availability import Decision, evaluate, resolve_current_function, supported_functions


def _clean(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v not in (None, "", [], {})}


def function_to_dict(function: UsbFunction) -> Dict[str, Any]:
    return {"name": str(function), "mask": function.mask, "description": function.description}


def decision_to_dict(function: UsbFunction, decision: Decision) -> Dict[str, Any]:
    out = function_to_dict(function)
    out["allowed"] = decision.allowed
    out.update(_clean({"gate": decision.gate, "reason": decision.reason}))
    return out


def capabilities_to_dict(caps: CapabilitySnapshot) -> Dict[str, Any]:
    d = caps.model_dump(mode="json")
    d["user_restrictions"] = sorted(d["user_restrictions"])
    d["base_restrictions"] = sorted(d["base_restrictions"])
    d["current_functions_str"] = functions_to_string(caps.current_functions)
    return d


def availability_to_json_dict(caps: CapabilitySnapshot) -> Dict[str, Any]:
    functions: List[Dict[str, Any]] = [decision_to_dict(f, evaluate(f, caps)) for f in ALL_FUNCTIONS]
    current = resolve_current_function(caps.current_functions, supported_functions(caps))
    return {
        "capabilities": capabilities_to_dict(caps),
        "current": function_to_dict(current),
        "functions": functions,
    }

"""
Pytest config.

Tests import the local `usbmodes/` package. When invoked through a global `pytest`
entrypoint without an editable install, the repo root isn't reliably on sys.path
during collection, so we pin it here.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()


@pytest.fixture(autouse=True)
def _fresh_config_cache() -> Any:
    """`load_config()` is lru_cached; tests that set env vars must not see a stale config."""
    from usbmodes.config import load_config

    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture
def make_caps() -> Callable[..., Any]:
    """
    Build a permissive snapshot (everything supported, admin, no restrictions)
    and override only what a test cares about.
    """
    from usbmodes.core.capabilities import CapabilitySnapshot

    def _make(**overrides: Any) -> CapabilitySnapshot:
        base = dict(
            tethering_supported=True,
            midi_supported=True,
            uvc_enabled=True,
            is_admin_user=True,
            current_functions=0,
        )
        base.update(overrides)
        return CapabilitySnapshot(**base)

    return _make


@pytest.fixture
def backend() -> Any:
    from usbmodes.services.memory import InMemoryUsbBackend

    return InMemoryUsbBackend(uvc_enabled=True)

"""
External collaborators of the policy (USB manager, user manager, tethering).

Protocols only, plus a simulated in-memory device for the CLI and tests.
"""

from usbmodes.services.base import TETHERING_USB, TetheringCallback, UsbMutationService, UsbQueryService

__all__ = ["TETHERING_USB", "TetheringCallback", "UsbMutationService", "UsbQueryService"]

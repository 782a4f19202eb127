#!/usr/bin/env python3
"""
USB mode picker - policy check and selection against a simulated device.

    python main.py --list
    USB_CURRENT_FUNCTIONS=accessory python main.py --current
    USB_TETHERING_FAIL_ERROR=5 python main.py --select rndis
"""

import sys

from usbmodes.cli import main

if __name__ == "__main__":
    sys.exit(main())

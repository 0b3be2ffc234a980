"""
CLI entry point for prismprobe.

Usage:
    python -m prismprobe
    python -m prismprobe com.example.driver.Device
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .backends import HostQueryError, PropertyStore, get_backend
from .config import DEFAULT_DEVICE_UID, ProbeConfig
from .inspector import PropertyInspector
from .locator import DeviceLocator
from .report import Reporter

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None, store: Optional[PropertyStore] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        0 once the device was found (whatever the individual checks report),
        1 if the device could not be found or the host could not be queried
    """
    parser = argparse.ArgumentParser(
        prog="prism-probe",
        description="Inspect the properties a Prism virtual audio device exposes to Core Audio",
    )
    parser.add_argument(
        'device_uid',
        nargs='?',
        default=DEFAULT_DEVICE_UID,
        help=f"UID of the device to inspect (default: {DEFAULT_DEVICE_UID})"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING,
        format='[%(levelname)s] %(message)s',
        stream=sys.stderr  # keep stdout for the report
    )

    config = ProbeConfig(device_uid=args.device_uid)
    reporter = Reporter()

    if store is None:
        try:
            store = get_backend()
        except (NotImplementedError, RuntimeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    reporter.banner()

    try:
        device_id = DeviceLocator(store).locate(config.device_uid)
    except HostQueryError as e:
        logger.error(f"Cannot enumerate audio devices: {e}")
        reporter.device_not_found(config.device_uid)
        return 1

    if device_id is None:
        reporter.device_not_found(config.device_uid)
        return 1

    reporter.device_found(config.device_uid, device_id)

    inspector = PropertyInspector(store, device_id, config)
    for result in inspector.run():
        reporter.report(result)

    return 0


if __name__ == "__main__":
    sys.exit(main())

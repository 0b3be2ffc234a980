"""
Locate an audio device by its UID.
"""

from __future__ import annotations

import logging
from typing import Optional

from .backends.base import HostQueryError, PropertyStore
from .properties import DEVICE_UID, HARDWARE_DEVICES, SYSTEM_OBJECT, PropertyAddress

logger = logging.getLogger(__name__)


class DeviceLocator:
    """
    Find Core Audio devices by their ``kAudioDevicePropertyDeviceUID``.

    A device whose UID cannot be read is skipped: one broken device must not
    hide the one being looked for.
    """

    def __init__(self, store: PropertyStore) -> None:
        self._store = store

    def device_ids(self) -> list[int]:
        """
        Return every device the host currently knows about.

        Raises:
            HostQueryError: If the device list itself cannot be read
        """
        return self._store.get_object_list(
            SYSTEM_OBJECT, PropertyAddress.global_(HARDWARE_DEVICES)
        )

    def device_uid(self, device_id: int) -> Optional[str]:
        """Return the device's UID, or None if it cannot be read."""
        try:
            return self._store.get_string(device_id, PropertyAddress.global_(DEVICE_UID))
        except (HostQueryError, ValueError) as e:
            logger.debug(f"Skipping device {device_id}: {e}")
            return None

    def locate(self, uid: str) -> Optional[int]:
        """
        Find the device whose UID equals ``uid`` exactly.

        Args:
            uid: Target device UID

        Returns:
            The first matching device ID in host enumeration order,
            or None if no device matches

        Raises:
            HostQueryError: If the device list cannot be read
        """
        device_ids = self.device_ids()
        logger.debug(f"Scanning {len(device_ids)} devices for UID {uid!r}")

        for device_id in device_ids:
            if self.device_uid(device_id) == uid:
                logger.debug(f"Found {uid!r} as device {device_id}")
                return device_id

        logger.debug(f"No device with UID {uid!r}")
        return None


__all__ = ['DeviceLocator']

"""
Probe configuration.

The defaults describe the Prism virtual device. A ProbeConfig is built once
by the CLI and never modified afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_DEVICE_UID = "com.petitstrawberry.driver.Prism.Device"

# The HAL may publish the device before the driver has filled its
# custom property list.
DEFAULT_SYNC_DELAY = 0.1  # seconds


@dataclass(frozen=True)
class ProbeConfig:
    device_uid: str = DEFAULT_DEVICE_UID
    sync_delay: float = DEFAULT_SYNC_DELAY
    inspect_clients: bool = True


__all__ = ['DEFAULT_DEVICE_UID', 'DEFAULT_SYNC_DELAY', 'ProbeConfig']

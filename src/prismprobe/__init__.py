from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("prism-probe")
except PackageNotFoundError:
    # editable install before metadata is generated
    __version__ = "0.0.0"

from .backends import HostQueryError, PropertyStore, get_backend
from .config import DEFAULT_DEVICE_UID, ProbeConfig
from .fourcc import FourCC, decode_selector, fourcc
from .inspector import PropertyInspector
from .locator import DeviceLocator

__all__ = [
    "DeviceLocator",
    "PropertyInspector",
    "PropertyStore",
    "HostQueryError",
    "get_backend",
    "ProbeConfig",
    "DEFAULT_DEVICE_UID",
    "FourCC",
    "decode_selector",
    "fourcc",
    "__version__",
]

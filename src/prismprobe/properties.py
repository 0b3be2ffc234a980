"""
Property addresses, selector constants and record layouts for Prism devices.

All selectors are defined from their four-character text so this module
does not depend on PyObjC and can be used (and tested) on any platform.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from .fourcc import fourcc

logger = logging.getLogger(__name__)

# Audio objects
SYSTEM_OBJECT = 1     # kAudioObjectSystemObject
UNKNOWN_OBJECT = 0    # kAudioObjectUnknown

# Scope / element
SCOPE_GLOBAL = fourcc('glob')
ELEMENT_MAIN = 0

# Standard selectors
HARDWARE_DEVICES = fourcc('dev#')       # kAudioHardwarePropertyDevices
DEVICE_UID = fourcc('uid ')             # kAudioDevicePropertyDeviceUID
OBJECT_NAME = fourcc('lnam')            # kAudioObjectPropertyName
TRANSPORT_TYPE = fourcc('tran')         # kAudioDevicePropertyTransportType
DEVICE_IS_RUNNING = fourcc('goin')      # kAudioDevicePropertyDeviceIsRunning
CUSTOM_PROPERTY_INFO_LIST = fourcc('cust')

# Prism vendor selectors
PRISM_ROUTING_TABLE = fourcc('rout')
PRISM_CLIENT_LIST = fourcc('clnt')

# AudioServerPlugInCustomPropertyInfo: three UInt32 selectors, host byte order
_CUSTOM_PROPERTY_RECORD = struct.Struct('=3I')
RECORD_SIZE = _CUSTOM_PROPERTY_RECORD.size


@dataclass(frozen=True)
class PropertyAddress:
    """(selector, scope, element) triple naming a property on an audio object."""

    selector: int
    scope: int = SCOPE_GLOBAL
    element: int = ELEMENT_MAIN

    @classmethod
    def global_(cls, selector: int) -> "PropertyAddress":
        """Address of ``selector`` in the global scope, main element."""
        return cls(selector=selector, scope=SCOPE_GLOBAL, element=ELEMENT_MAIN)


@dataclass(frozen=True)
class CustomPropertyInfo:
    selector: int
    property_data_type: int
    qualifier_data_type: int


def parse_custom_property_list(data: bytes) -> list[CustomPropertyInfo]:
    """
    Decode a ``'cust'`` buffer into its descriptor records.

    A trailing partial record (size not a multiple of RECORD_SIZE) is
    dropped with a warning.

    Args:
        data: Raw property data as returned by the host

    Returns:
        One CustomPropertyInfo per complete 12-byte record, in buffer order
    """
    count, remainder = divmod(len(data), RECORD_SIZE)
    if remainder:
        logger.warning(
            f"Custom property list is {len(data)} bytes, not a multiple of "
            f"{RECORD_SIZE}; ignoring {remainder} trailing bytes"
        )

    return [
        CustomPropertyInfo(*fields)
        for fields in _CUSTOM_PROPERTY_RECORD.iter_unpack(data[:count * RECORD_SIZE])
    ]


__all__ = [
    'SYSTEM_OBJECT',
    'UNKNOWN_OBJECT',
    'SCOPE_GLOBAL',
    'ELEMENT_MAIN',
    'HARDWARE_DEVICES',
    'DEVICE_UID',
    'OBJECT_NAME',
    'TRANSPORT_TYPE',
    'DEVICE_IS_RUNNING',
    'CUSTOM_PROPERTY_INFO_LIST',
    'PRISM_ROUTING_TABLE',
    'PRISM_CLIENT_LIST',
    'RECORD_SIZE',
    'PropertyAddress',
    'CustomPropertyInfo',
    'parse_custom_property_list',
]

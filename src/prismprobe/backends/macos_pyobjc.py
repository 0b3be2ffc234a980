"""
macOS property store using PyObjC and the Core Audio HAL.

Plain-old-data queries (sizes, raw buffers, existence, mutability) go through
the PyObjC CoreAudio bindings. Properties whose value is a Core Foundation
object (CFString, CFData) follow the Copy rule: the caller owns the returned
reference. PyObjC hands those back as opaque bytes, so they are fetched via
ctypes directly against the CoreAudio framework and released with CFRelease
once decoded.

Requirements:
- macOS
- PyObjC: pip install pyobjc-core pyobjc-framework-CoreAudio
"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
from typing import Optional

from ..properties import PropertyAddress
from .base import HostQueryError, PropertyStore, owned_ref

logger = logging.getLogger(__name__)

# Check if PyObjC is available
PYOBJC_AVAILABLE = False

try:
    from CoreAudio import (
        AudioObjectPropertyAddress,
        AudioObjectGetPropertyData,
        AudioObjectGetPropertyDataSize,
        AudioObjectHasProperty,
        AudioObjectIsPropertySettable,
    )

    PYOBJC_AVAILABLE = True
    logger.debug("PyObjC CoreAudio framework loaded successfully")

except ImportError as e:
    logger.debug(f"PyObjC not available: {e}")


kCFStringEncodingUTF8 = 0x08000100

# Core Audio types
AudioObjectID = ctypes.c_uint32
OSStatus = ctypes.c_int32
CFTypeRef = ctypes.c_void_p
CFIndex = ctypes.c_long


class _PropertyAddressStruct(ctypes.Structure):
    """AudioObjectPropertyAddress for ctypes calls."""
    _fields_ = [
        ('mSelector', ctypes.c_uint32),
        ('mScope', ctypes.c_uint32),
        ('mElement', ctypes.c_uint32),
    ]


_core_audio = None
_core_foundation = None


def _load_frameworks():
    """Load CoreAudio and CoreFoundation and declare the functions used here."""
    global _core_audio, _core_foundation

    if _core_audio is None:
        framework_path = ctypes.util.find_library('CoreAudio')
        if not framework_path:
            raise RuntimeError("CoreAudio framework not found")
        ca = ctypes.CDLL(framework_path)
        ca.AudioObjectGetPropertyData.argtypes = [
            AudioObjectID,
            ctypes.POINTER(_PropertyAddressStruct),
            ctypes.c_uint32,
            ctypes.c_void_p,
            ctypes.POINTER(ctypes.c_uint32),
            ctypes.c_void_p,
        ]
        ca.AudioObjectGetPropertyData.restype = OSStatus
        _core_audio = ca
        logger.debug(f"Loaded CoreAudio framework: {framework_path}")

    if _core_foundation is None:
        cf_path = ctypes.util.find_library('CoreFoundation')
        if not cf_path:
            raise RuntimeError("CoreFoundation framework not found")
        cf = ctypes.CDLL(cf_path)
        cf.CFRelease.argtypes = [CFTypeRef]
        cf.CFRelease.restype = None
        cf.CFStringGetLength.argtypes = [CFTypeRef]
        cf.CFStringGetLength.restype = CFIndex
        cf.CFStringGetMaximumSizeForEncoding.argtypes = [CFIndex, ctypes.c_uint32]
        cf.CFStringGetMaximumSizeForEncoding.restype = CFIndex
        cf.CFStringGetCString.argtypes = [CFTypeRef, ctypes.c_char_p, CFIndex, ctypes.c_uint32]
        cf.CFStringGetCString.restype = ctypes.c_bool
        cf.CFDataGetLength.argtypes = [CFTypeRef]
        cf.CFDataGetLength.restype = CFIndex
        cf.CFDataGetBytePtr.argtypes = [CFTypeRef]
        cf.CFDataGetBytePtr.restype = ctypes.c_void_p
        _core_foundation = cf
        logger.debug(f"Loaded CoreFoundation framework: {cf_path}")

    return _core_audio, _core_foundation


def is_available() -> bool:
    """
    Check if PyObjC Core Audio bindings are available.

    Returns:
        True if PyObjC is installed and Core Audio can be accessed
    """
    return PYOBJC_AVAILABLE


class CoreAudioPropertyStore(PropertyStore):
    """PropertyStore backed by the Core Audio HAL."""

    def __init__(self) -> None:
        """
        Raises:
            RuntimeError: If PyObjC or the Core Audio frameworks are unavailable
        """
        if not is_available():
            raise RuntimeError(
                "Core Audio framework not available via PyObjC. "
                "Install with: pip install pyobjc-core pyobjc-framework-CoreAudio"
            )
        self._ca, self._cf = _load_frameworks()

    @staticmethod
    def _address(address: PropertyAddress):
        return AudioObjectPropertyAddress(
            mSelector=address.selector,
            mScope=address.scope,
            mElement=address.element,
        )

    def get_data_size(self, object_id: int, address: PropertyAddress) -> int:
        status, data_size = AudioObjectGetPropertyDataSize(
            object_id, self._address(address), 0, None, None
        )
        logger.debug(
            f"GetPropertyDataSize(obj={object_id}, sel=0x{address.selector:X}): "
            f"status={status}, size={data_size}"
        )
        if status != 0:
            raise HostQueryError(status, address.selector, "GetPropertyDataSize")
        return int(data_size)

    def get_data(self, object_id: int, address: PropertyAddress, size: int) -> bytes:
        # PyObjC returns tuple: (status, data_size, result_bytes)
        status, data_size, data = AudioObjectGetPropertyData(
            object_id, self._address(address), 0, None, size, None
        )
        logger.debug(
            f"GetPropertyData(obj={object_id}, sel=0x{address.selector:X}): "
            f"status={status}, size={data_size}"
        )
        if status != 0:
            raise HostQueryError(status, address.selector, "GetPropertyData")
        if not data:
            return b''
        return bytes(data)[:data_size]

    def _copy_ref(self, object_id: int, address: PropertyAddress) -> Optional[int]:
        """Fetch a CF object reference owned by the caller."""
        c_address = _PropertyAddressStruct(address.selector, address.scope, address.element)
        ref = CFTypeRef()
        io_size = ctypes.c_uint32(ctypes.sizeof(CFTypeRef))

        status = self._ca.AudioObjectGetPropertyData(
            object_id,
            ctypes.byref(c_address),
            0,
            None,
            ctypes.byref(io_size),
            ctypes.byref(ref),
        )
        if status != 0:
            # A ref may still have been written; do not leak it
            if ref.value:
                self._cf.CFRelease(ref.value)
            raise HostQueryError(status, address.selector, "GetPropertyData")
        return ref.value

    def get_string(self, object_id: int, address: PropertyAddress) -> str:
        with owned_ref(self._copy_ref(object_id, address), self._cf.CFRelease) as ref:
            if not ref:
                return ''
            length = self._cf.CFStringGetLength(ref)
            buf_size = self._cf.CFStringGetMaximumSizeForEncoding(length, kCFStringEncodingUTF8) + 1
            buf = ctypes.create_string_buffer(buf_size)
            if not self._cf.CFStringGetCString(ref, buf, buf_size, kCFStringEncodingUTF8):
                raise ValueError(
                    f"CFStringGetCString failed for selector 0x{address.selector:X}"
                )
            return buf.value.decode('utf-8')

    def get_data_object(self, object_id: int, address: PropertyAddress) -> bytes:
        with owned_ref(self._copy_ref(object_id, address), self._cf.CFRelease) as ref:
            if not ref:
                return b''
            length = self._cf.CFDataGetLength(ref)
            if length <= 0:
                return b''
            return ctypes.string_at(self._cf.CFDataGetBytePtr(ref), length)

    def has_property(self, object_id: int, address: PropertyAddress) -> bool:
        return bool(AudioObjectHasProperty(object_id, self._address(address)))

    def is_settable(self, object_id: int, address: PropertyAddress) -> tuple[bool, int]:
        status, settable = AudioObjectIsPropertySettable(
            object_id, self._address(address), None
        )
        return bool(settable), int(status)


__all__ = ['CoreAudioPropertyStore', 'is_available']

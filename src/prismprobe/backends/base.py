"""
Abstract property store.

A PropertyStore answers Core Audio style property queries for audio objects.
The macOS implementation talks to the HAL; tests substitute an in-memory
fake. Every query that the host answers with a non-zero OSStatus raises
HostQueryError.
"""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from ..fourcc import format_selector
from ..properties import PropertyAddress

_UINT32 = struct.Struct('=I')

RefT = TypeVar('RefT')


class HostQueryError(RuntimeError):
    """A host property query returned a non-zero status."""

    def __init__(self, status: int, selector: int, operation: str = "query") -> None:
        self.status = status
        self.selector = selector
        self.operation = operation
        super().__init__(
            f"{operation} {format_selector(selector)} failed with status {status}"
        )


@contextmanager
def owned_ref(ref: Optional[RefT], release: Callable[[RefT], None]) -> Iterator[Optional[RefT]]:
    """
    Hold a host-owned reference for the duration of a block.

    ``release`` runs on every exit path, including exceptions and early
    ``break``/``return`` out of the block. A null reference is never released.
    """
    try:
        yield ref
    finally:
        if ref:
            release(ref)


class PropertyStore(ABC):
    """
    Query interface to the host audio subsystem.

    Implementations must raise HostQueryError for any non-zero host status.
    """

    @abstractmethod
    def get_data_size(self, object_id: int, address: PropertyAddress) -> int:
        """Return the byte size of the property's current value."""

    @abstractmethod
    def get_data(self, object_id: int, address: PropertyAddress, size: int) -> bytes:
        """Fetch up to ``size`` bytes of the property's value."""

    @abstractmethod
    def get_string(self, object_id: int, address: PropertyAddress) -> str:
        """Fetch a CFString-valued property, releasing the host string."""

    @abstractmethod
    def get_data_object(self, object_id: int, address: PropertyAddress) -> bytes:
        """Fetch a CFData-valued property, releasing the host data object."""

    @abstractmethod
    def has_property(self, object_id: int, address: PropertyAddress) -> bool:
        """Return True if the object exposes the property."""

    @abstractmethod
    def is_settable(self, object_id: int, address: PropertyAddress) -> tuple[bool, int]:
        """
        Ask whether the property can be written.

        Returns:
            Tuple of (settable, status). The status is returned rather than
            raised so callers can report it next to the flag.
        """

    def get_uint32(self, object_id: int, address: PropertyAddress) -> int:
        """Fetch a UInt32-valued property."""
        data = self.get_data(object_id, address, _UINT32.size)
        if len(data) < _UINT32.size:
            raise ValueError(
                f"Expected {_UINT32.size} bytes for {format_selector(address.selector)}, "
                f"got {len(data)}"
            )
        return _UINT32.unpack_from(data)[0]

    def get_object_list(self, object_id: int, address: PropertyAddress) -> list[int]:
        """
        Fetch an AudioObjectID array using the size-then-fetch sequence.

        An empty property yields an empty list without a fetch.
        """
        size = self.get_data_size(object_id, address)
        count = size // _UINT32.size
        if count == 0:
            return []

        data = self.get_data(object_id, address, count * _UINT32.size)
        count = len(data) // _UINT32.size
        return list(struct.unpack(f'={count}I', data[:count * _UINT32.size]))


__all__ = ['HostQueryError', 'PropertyStore', 'owned_ref']

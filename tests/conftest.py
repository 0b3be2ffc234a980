"""Shared fixtures: an in-memory stand-in for the Core Audio HAL."""

from __future__ import annotations

import struct
import time
from typing import Optional

import pytest

from prismprobe.backends.base import HostQueryError, PropertyStore
from prismprobe.config import DEFAULT_DEVICE_UID
from prismprobe.fourcc import fourcc
from prismprobe.properties import (
    DEVICE_IS_RUNNING,
    DEVICE_UID,
    HARDWARE_DEVICES,
    OBJECT_NAME,
    PRISM_ROUTING_TABLE,
    SYSTEM_OBJECT,
    TRANSPORT_TYPE,
    PropertyAddress,
)

# kAudioHardwareUnknownPropertyError
UNKNOWN_PROPERTY = fourcc('who?')

PRISM_DEVICE_ID = 42


class FakePropertyStore(PropertyStore):
    """
    PropertyStore backed by dictionaries keyed by (object_id, selector).

    ``failures`` maps (object_id, selector, operation) to a host status,
    where operation is one of 'size', 'data', 'string', 'object'.
    Every call is recorded in ``calls`` as (operation, object_id, selector).
    """

    def __init__(self) -> None:
        self.data: dict[tuple[int, int], bytes] = {}
        self.strings: dict[tuple[int, int], str] = {}
        self.data_objects: dict[tuple[int, int], bytes] = {}
        self.existing: set[tuple[int, int]] = set()
        self.settable: dict[tuple[int, int], tuple[bool, int]] = {}
        self.failures: dict[tuple[int, int, str], int] = {}
        self.calls: list[tuple[str, int, int]] = []

    def _check(self, operation: str, object_id: int, address: PropertyAddress) -> None:
        self.calls.append((operation, object_id, address.selector))
        status = self.failures.get((object_id, address.selector, operation))
        if status is not None:
            raise HostQueryError(status, address.selector, operation)

    def _lookup(self, table: dict, object_id: int, address: PropertyAddress, operation: str):
        try:
            return table[(object_id, address.selector)]
        except KeyError:
            raise HostQueryError(UNKNOWN_PROPERTY, address.selector, operation) from None

    def get_data_size(self, object_id, address):
        self._check('size', object_id, address)
        return len(self._lookup(self.data, object_id, address, 'size'))

    def get_data(self, object_id, address, size):
        self._check('data', object_id, address)
        return self._lookup(self.data, object_id, address, 'data')[:size]

    def get_string(self, object_id, address):
        self._check('string', object_id, address)
        return self._lookup(self.strings, object_id, address, 'string')

    def get_data_object(self, object_id, address):
        self._check('object', object_id, address)
        return self._lookup(self.data_objects, object_id, address, 'object')

    def has_property(self, object_id, address):
        self.calls.append(('has', object_id, address.selector))
        return (object_id, address.selector) in self.existing

    def is_settable(self, object_id, address):
        self.calls.append(('settable', object_id, address.selector))
        return self.settable.get((object_id, address.selector), (False, UNKNOWN_PROPERTY))

    # --- helpers for building host state ---

    def add_devices(self, devices: dict[int, Optional[str]]) -> None:
        """Register devices in enumeration order; a None UID fails to read."""
        ids = list(devices)
        self.data[(SYSTEM_OBJECT, HARDWARE_DEVICES)] = struct.pack(f'={len(ids)}I', *ids)
        for device_id, uid in devices.items():
            if uid is None:
                self.failures[(device_id, DEVICE_UID, 'string')] = UNKNOWN_PROPERTY
            else:
                self.strings[(device_id, DEVICE_UID)] = uid

    def set_uint32(self, object_id: int, selector: int, value: int) -> None:
        self.data[(object_id, selector)] = struct.pack('=I', value)

    def calls_for(self, selector: int) -> list[str]:
        return [operation for operation, _, sel in self.calls if sel == selector]


@pytest.fixture(autouse=True)
def no_sync_delay(monkeypatch):
    """Record sync delays instead of sleeping."""
    delays: list[float] = []
    monkeypatch.setattr(time, 'sleep', delays.append)
    return delays


@pytest.fixture
def store() -> FakePropertyStore:
    return FakePropertyStore()


@pytest.fixture
def prism_store(store: FakePropertyStore) -> FakePropertyStore:
    """A host with two ordinary devices and a healthy Prism device."""
    store.add_devices({
        73: "BuiltInSpeakerDevice",
        81: "BuiltInMicrophoneDevice",
        PRISM_DEVICE_ID: DEFAULT_DEVICE_UID,
    })
    store.existing.add((PRISM_DEVICE_ID, PRISM_ROUTING_TABLE))
    store.settable[(PRISM_DEVICE_ID, PRISM_ROUTING_TABLE)] = (True, 0)
    store.strings[(PRISM_DEVICE_ID, OBJECT_NAME)] = "Prism"
    store.set_uint32(PRISM_DEVICE_ID, TRANSPORT_TYPE, fourcc('virt'))
    store.set_uint32(PRISM_DEVICE_ID, DEVICE_IS_RUNNING, 1)
    return store

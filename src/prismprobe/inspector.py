"""
Property inspection for a located Prism device.

Each check is independent: a host error in one is captured in its result and
never prevents the next check from running.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Iterator, Optional, Union

from .backends.base import HostQueryError, PropertyStore
from .clients import ClientEntry, parse_client_list, resolve_process_names
from .config import ProbeConfig
from .fourcc import FourCC, decode_selector
from .properties import (
    CUSTOM_PROPERTY_INFO_LIST,
    DEVICE_IS_RUNNING,
    OBJECT_NAME,
    PRISM_CLIENT_LIST,
    PRISM_ROUTING_TABLE,
    RECORD_SIZE,
    TRANSPORT_TYPE,
    UNKNOWN_OBJECT,
    CustomPropertyInfo,
    PropertyAddress,
    parse_custom_property_list,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomPropertyListResult:
    section: ClassVar[str] = "Inspecting 'cust' Property"

    size: int = 0
    entries: list[CustomPropertyInfo] = field(default_factory=list)
    status: Optional[int] = None
    # Which query failed: 'size' or 'fetch'
    operation: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is None

    @property
    def count(self) -> int:
        return self.size // RECORD_SIZE

    @property
    def empty(self) -> bool:
        return self.ok and self.count == 0


@dataclass(frozen=True)
class RoutingTableResult:
    section: ClassVar[str] = "Checking 'rout'"

    exists: bool
    # None when the property does not exist and mutability was not queried
    settable: Optional[bool] = None
    status: Optional[int] = None


@dataclass(frozen=True)
class PropertyValueResult:
    section: ClassVar[str] = "Checking Standard Properties"

    label: str
    selector: int
    value: Union[str, FourCC, bool, None] = None
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is None and self.error is None


@dataclass(frozen=True)
class ClientListResult:
    section: ClassVar[str] = "Checking 'clnt'"

    entries: list[ClientEntry] = field(default_factory=list)
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is None and self.error is None


InspectionResult = Union[
    CustomPropertyListResult, RoutingTableResult, PropertyValueResult, ClientListResult
]


class PropertyInspector:
    """
    Run the fixed sequence of property checks against one device.

    Args:
        store: Host property store
        device_id: Device located beforehand; must not be the unknown object
        config: Probe settings (sync delay, optional checks)
        sleep: Blocking sleep for the HAL synchronization delay (default: time.sleep)

    Raises:
        ValueError: If device_id is unresolved
    """

    def __init__(
        self,
        store: PropertyStore,
        device_id: Optional[int],
        config: Optional[ProbeConfig] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        if device_id is None or device_id == UNKNOWN_OBJECT:
            raise ValueError("Cannot inspect an unresolved device")

        self._store = store
        self._device_id = device_id
        self._config = config or ProbeConfig()
        self._sleep = sleep or time.sleep

    @property
    def device_id(self) -> int:
        return self._device_id

    def inspect_custom_properties(self) -> CustomPropertyListResult:
        """Read and decode the device's custom property list."""
        address = PropertyAddress.global_(CUSTOM_PROPERTY_INFO_LIST)

        if self._config.sync_delay > 0:
            logger.info("Waiting for HAL synchronization...")
            self._sleep(self._config.sync_delay)

        try:
            size = self._store.get_data_size(self._device_id, address)
        except HostQueryError as e:
            return CustomPropertyListResult(status=e.status, operation='size')

        if size // RECORD_SIZE == 0:
            return CustomPropertyListResult(size=size)

        try:
            data = self._store.get_data(self._device_id, address, size)
        except HostQueryError as e:
            return CustomPropertyListResult(size=size, status=e.status, operation='fetch')

        return CustomPropertyListResult(size=size, entries=parse_custom_property_list(data))

    def check_routing_table(self) -> RoutingTableResult:
        """Check presence and, if present, mutability of ``'rout'``."""
        address = PropertyAddress.global_(PRISM_ROUTING_TABLE)

        if not self._store.has_property(self._device_id, address):
            return RoutingTableResult(exists=False)

        settable, status = self._store.is_settable(self._device_id, address)
        return RoutingTableResult(exists=True, settable=settable, status=status)

    def _read_value(
        self,
        label: str,
        selector: int,
        read: Callable[[PropertyAddress], Union[str, FourCC, bool]],
    ) -> PropertyValueResult:
        try:
            value = read(PropertyAddress.global_(selector))
        except HostQueryError as e:
            return PropertyValueResult(label=label, selector=selector, status=e.status)
        except ValueError as e:
            return PropertyValueResult(label=label, selector=selector, error=str(e))
        return PropertyValueResult(label=label, selector=selector, value=value)

    def read_name(self) -> PropertyValueResult:
        return self._read_value(
            "Name", OBJECT_NAME,
            lambda address: self._store.get_string(self._device_id, address),
        )

    def read_transport_type(self) -> PropertyValueResult:
        return self._read_value(
            "Transport", TRANSPORT_TYPE,
            lambda address: decode_selector(self._store.get_uint32(self._device_id, address)),
        )

    def read_is_running(self) -> PropertyValueResult:
        return self._read_value(
            "IsRunning", DEVICE_IS_RUNNING,
            lambda address: self._store.get_uint32(self._device_id, address) != 0,
        )

    def read_client_list(self) -> ClientListResult:
        """Read the driver's client list and resolve client process names."""
        address = PropertyAddress.global_(PRISM_CLIENT_LIST)
        try:
            data = self._store.get_data_object(self._device_id, address)
            entries = parse_client_list(data)
        except HostQueryError as e:
            return ClientListResult(status=e.status)
        except ValueError as e:
            return ClientListResult(error=str(e))
        return ClientListResult(entries=resolve_process_names(entries))

    def run(self) -> Iterator[InspectionResult]:
        """Yield each check's result as soon as it completes."""
        yield self.inspect_custom_properties()
        yield self.check_routing_table()
        yield self.read_name()
        yield self.read_transport_type()
        yield self.read_is_running()
        if self._config.inspect_clients:
            yield self.read_client_list()


__all__ = [
    'PropertyInspector',
    'InspectionResult',
    'CustomPropertyListResult',
    'RoutingTableResult',
    'PropertyValueResult',
    'ClientListResult',
]

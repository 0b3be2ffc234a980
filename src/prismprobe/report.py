"""
Human-readable rendering of inspection results.

Output is meant for people reading a terminal; its exact layout is not a
stable interface.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .fourcc import decode_selector, format_selector
from .inspector import (
    ClientListResult,
    CustomPropertyListResult,
    InspectionResult,
    PropertyValueResult,
    RoutingTableResult,
)
from .properties import CUSTOM_PROPERTY_INFO_LIST, PRISM_CLIENT_LIST, PRISM_ROUTING_TABLE

OK = "✅"
FAIL = "❌"
WARN = "⚠️ "


def _tag(selector: int) -> str:
    return f"'{decode_selector(selector).text}'"


def _failure(status: Optional[int], error: Optional[str]) -> str:
    if status is not None:
        return f"{FAIL} FAILED (Error: {status})"
    return f"{FAIL} FAILED ({error})"


def _format_custom_properties(result: CustomPropertyListResult) -> list[str]:
    tag = _tag(CUSTOM_PROPERTY_INFO_LIST)
    if not result.ok:
        if result.operation == 'size':
            return [f"{FAIL} Failed to get size of {tag} list. Error: {result.status}"]
        return [f"{FAIL} Failed to read {tag} list. Error: {result.status}"]

    lines = [f"Size: {result.size} bytes ({result.count} properties)"]
    if result.empty:
        lines.append(f"{WARN} List is EMPTY. Driver returned no properties.")
        return lines

    for index, info in enumerate(result.entries):
        lines.append(
            f"  [{index}] Selector: {format_selector(info.selector)}, "
            f"Type: {format_selector(info.property_data_type)}, "
            f"Qualifier: {format_selector(info.qualifier_data_type)}"
        )
    return lines


def _format_routing_table(result: RoutingTableResult) -> list[str]:
    tag = _tag(PRISM_ROUTING_TABLE)
    lines = [f"HasProperty({tag}): {f'{OK} TRUE' if result.exists else f'{FAIL} FALSE'}"]
    if result.exists:
        flag = f"{OK} YES" if result.settable else f"{FAIL} NO"
        lines.append(f"IsPropertySettable({tag}): {flag} (Err: {result.status})")
    return lines


def _format_value(result: PropertyValueResult) -> list[str]:
    prefix = f"{result.label} ({_tag(result.selector)}):"
    if not result.ok:
        return [f"{prefix} {_failure(result.status, result.error)}"]

    value = result.value
    if isinstance(value, bool):
        text = "TRUE" if value else "FALSE"
    elif isinstance(value, str):
        text = f"'{value}'"
    else:
        text = str(value)
    return [f"{prefix} {OK} {text}"]


def _format_clients(result: ClientListResult) -> list[str]:
    prefix = f"Clients ({_tag(PRISM_CLIENT_LIST)}):"
    if not result.ok:
        return [f"{prefix} {_failure(result.status, result.error)}"]

    count = len(result.entries)
    lines = [f"{prefix} {OK} {count} client{'' if count == 1 else 's'}"]
    for entry in result.entries:
        name = f" ({entry.process_name})" if entry.process_name else ""
        lines.append(
            f"  PID {entry.pid}{name}: client {entry.client_id}, "
            f"channel offset {entry.channel_offset}"
        )
    return lines


def format_result(result: InspectionResult) -> list[str]:
    """Render one inspection result as output lines."""
    if isinstance(result, CustomPropertyListResult):
        return _format_custom_properties(result)
    if isinstance(result, RoutingTableResult):
        return _format_routing_table(result)
    if isinstance(result, PropertyValueResult):
        return _format_value(result)
    if isinstance(result, ClientListResult):
        return _format_clients(result)
    raise TypeError(f"Unsupported result type: {type(result).__name__}")


class Reporter:
    """Print results to a text stream, with a heading per section."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self._section: Optional[str] = None

    def _print(self, line: str = "") -> None:
        print(line, file=self._stream or sys.stdout)

    def banner(self) -> None:
        self._print("--- Prism Probe ---")

    def device_found(self, uid: str, device_id: int) -> None:
        self._print(f"Scanning for UID: {uid} ... {OK} Found ID: {device_id}")

    def device_not_found(self, uid: str) -> None:
        self._print(f"Scanning for UID: {uid} ...")
        self._print(f"{FAIL} Not Found. (Device UID mismatch?)")

    def report(self, result: InspectionResult) -> None:
        if result.section != self._section:
            self._section = result.section
            self._print()
            self._print(f"[{result.section}]")
        for line in format_result(result):
            self._print(line)


__all__ = ['Reporter', 'format_result']

"""
Decoding of the Prism client list (``'clnt'``).

The driver publishes its connected clients as a CFData wrapping a property
list: an array of dictionaries with ``pid``, ``client_id`` and
``channel_offset`` integer keys.
"""

from __future__ import annotations

import logging
import plistlib
from dataclasses import dataclass, replace
from typing import Optional
from xml.parsers.expat import ExpatError

import psutil

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientEntry:
    pid: int
    client_id: int
    channel_offset: int
    process_name: Optional[str] = None


def _int_field(item: dict, key: str) -> int:
    value = item.get(key, 0)
    # bool is an int subclass; plist <true/> is not a valid id
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def parse_client_list(data: bytes) -> list[ClientEntry]:
    """
    Parse the ``'clnt'`` payload.

    Missing or non-integer keys read as 0, non-dictionary items are skipped,
    and a payload that is not an array yields an empty list.

    Raises:
        ValueError: If data is not a property list
    """
    if not data:
        return []

    try:
        value = plistlib.loads(data)
    except (ValueError, ExpatError) as e:
        raise ValueError(f"Client list is not a property list: {e}") from e

    if not isinstance(value, list):
        logger.warning(f"Client list is a {type(value).__name__}, expected array")
        return []

    return [
        ClientEntry(
            pid=_int_field(item, 'pid'),
            client_id=_int_field(item, 'client_id'),
            channel_offset=_int_field(item, 'channel_offset'),
        )
        for item in value
        if isinstance(item, dict)
    ]


def resolve_process_names(entries: list[ClientEntry]) -> list[ClientEntry]:
    """Attach the process name of each client's PID where it can be read."""
    resolved = []
    for entry in entries:
        name = None
        if entry.pid > 0:
            try:
                name = psutil.Process(entry.pid).name()
            except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
                logger.debug(f"Cannot resolve PID {entry.pid}: {e}")
        resolved.append(replace(entry, process_name=name))
    return resolved


__all__ = ['ClientEntry', 'parse_client_list', 'resolve_process_names']

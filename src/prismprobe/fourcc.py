"""
Four-character-code helpers.

Core Audio selectors, scopes and type codes are 32-bit integers that read as
four ASCII characters when their bytes are laid out big-endian. The host
hands them over in native byte order, so display always goes through
``decode_selector``.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

_MAX_UINT32 = 0xFFFFFFFF


@dataclass(frozen=True)
class FourCC:
    """A decoded selector: its four-character text and raw numeric value."""

    text: str
    value: int

    def __str__(self) -> str:
        return f"'{self.text}' (0x{self.value:X})"


def fourcc(text: str) -> int:
    """
    Build a selector from its four-character text.

    Args:
        text: Exactly four characters, e.g. ``'rout'``

    Returns:
        The 32-bit selector value (``'rout'`` -> ``0x726F7574``)

    Raises:
        ValueError: If text does not encode to exactly four bytes
    """
    raw = text.encode('latin-1')
    if len(raw) != 4:
        raise ValueError(f"Four-character code must be 4 bytes, got {text!r}")
    return struct.unpack('>I', raw)[0]


def decode_selector(value: int) -> FourCC:
    """
    Decode a 32-bit selector into its display form.

    Bytes are taken in big-endian order and passed through unescaped, so an
    unexpected selector shows up as garbage text rather than an error.

    Raises:
        ValueError: If value does not fit in 32 bits
    """
    if not 0 <= value <= _MAX_UINT32:
        raise ValueError(f"Selector out of 32-bit range: {value}")
    text = struct.pack('>I', value).decode('latin-1')
    return FourCC(text=text, value=value)


def format_selector(value: int) -> str:
    """Render a selector as ``'text' (0xHEX)``."""
    return str(decode_selector(value))


__all__ = ['FourCC', 'fourcc', 'decode_selector', 'format_selector']

"""
Cartridge Checksum Calculations
===============================

This module provides the checksum arithmetic for the cartridge header.

Header Checksum (Complement)
----------------------------
Byte 0x14D holds a one-byte checksum over the title through the mask
ROM version (0x134-0x14C):

    complement = 0xE7 - sum(bytes 0x134..0x14C)    (mod 256)

This is the value the boot ROM verifies; a wrong complement locks up
real hardware.

Global Checksum
---------------
Bytes 0x14E-0x14F hold a 16-bit big-endian sum of every byte in the
image except the complement and the two checksum bytes themselves. The
complement is then added back in, so the checksum has to be computed
after the complement has been settled:

    checksum = sum(all bytes except 0x14D-0x14F) + complement   (mod 65536)

The boot ROM never checks the global checksum, but emulators and flash
tools report a mismatch.

All sums use unsigned byte values.
"""

from typing import Optional

from gbfix.rom.layout import (
    CHECKSUM_EXCLUDED_OFFSETS,
    COMPLEMENT_BASE,
    MIN_IMAGE_SIZE,
    HeaderOffset,
)


def _require_header(data: bytes) -> None:
    if len(data) < MIN_IMAGE_SIZE:
        raise ValueError(
            f"Image too short: need at least {MIN_IMAGE_SIZE} bytes, got {len(data)}"
        )


def calculate_header_complement(data: bytes) -> int:
    """
    Calculate the header complement byte.

    Args:
        data: ROM image bytes (at least 0x150 bytes)

    Returns:
        Complement value (0x00 - 0xFF)

    Example:
        >>> calculate_header_complement(bytes(0x150))
        231
    """
    _require_header(data)
    region = data[HeaderOffset.TITLE:HeaderOffset.VERSION + 1]
    return (COMPLEMENT_BASE - sum(region)) & 0xFF


def calculate_global_checksum(data: bytes, complement: Optional[int] = None) -> int:
    """
    Calculate the 16-bit global checksum.

    Args:
        data: ROM image bytes (at least 0x150 bytes)
        complement: Complement value to fold in; defaults to the freshly
            calculated complement rather than the stored byte

    Returns:
        16-bit checksum value (0x0000 - 0xFFFF)
    """
    _require_header(data)
    if complement is None:
        complement = calculate_header_complement(data)

    total = sum(data)
    for offset in CHECKSUM_EXCLUDED_OFFSETS:
        total -= data[offset]
    return (total + complement) & 0xFFFF


def read_global_checksum(data: bytes) -> int:
    """Read the stored big-endian global checksum."""
    _require_header(data)
    return (data[HeaderOffset.GLOBAL_CHECKSUM_HIGH] << 8) | data[HeaderOffset.GLOBAL_CHECKSUM_LOW]


def split_checksum(checksum: int) -> tuple[int, int]:
    """
    Split a 16-bit checksum into (high, low) bytes.

    Example:
        >>> split_checksum(0x1234)
        (18, 52)
    """
    return (checksum >> 8) & 0xFF, checksum & 0xFF

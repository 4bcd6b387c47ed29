"""
Cartridge Header Layout
=======================

This module defines the fixed layout of the Game Boy cartridge header
and the constants the header operations are checked against.

Header Structure
----------------
The header occupies 0x100-0x14F of every ROM image:

    0x100-0x103  Entry point (usually NOP; JP $0150)
    0x104-0x133  Nintendo logo (48 bytes, checked by the boot ROM)
    0x134-0x143  Title (upper-case ASCII, NUL padded)
    0x143        CGB flag (0x80 = CGB compatible, 0xC0 = CGB only)
    0x144-0x145  New licensee code
    0x146        SGB flag
    0x147        Cartridge type (memory bank controller)
    0x148        ROM size (32KB << n)
    0x149        RAM size
    0x14A        Destination code
    0x14B        Old licensee code
    0x14C        Mask ROM version
    0x14D        Header checksum (complement)
    0x14E-0x14F  Global checksum (big-endian)

On CGB titles the last title byte doubles as the CGB flag, which is why
the title area and the CGB flag overlap at 0x143.

Reference
---------
- Pan Docs, The Cartridge Header: https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

from enum import IntEnum
from typing import Optional

from gbfix.errors import HeaderFieldError


# =============================================================================
# Size Constants
# =============================================================================

# Smallest image that can hold a complete header
MIN_IMAGE_SIZE = 0x150

ROM_BANK_SIZE = 0x4000

# Smallest real ROM (two 16KB banks); base of the ROM-size byte encoding
MIN_ROM_SIZE = 2 * ROM_BANK_SIZE

# Largest ROM-size byte in use (8MB)
MAX_ROM_SIZE_CODE = 8

# Truncation searches downward from 8MB
MAX_TRUNCATE_SIZE = 256 * 32768

LOGO_LENGTH = 48
TITLE_MAX_LENGTH = 16

# Header complement is 0xE7 minus the byte sum of 0x134-0x14C
COMPLEMENT_BASE = 0xE7


# =============================================================================
# Header Offsets
# =============================================================================

class HeaderOffset(IntEnum):
    """Byte offsets of the cartridge header fields within a ROM image."""
    ENTRY_POINT = 0x100
    LOGO = 0x104
    TITLE = 0x134
    CGB_FLAG = 0x143
    NEW_LICENSEE_CODE = 0x144
    SGB_FLAG = 0x146
    CARTRIDGE_TYPE = 0x147
    ROM_SIZE = 0x148
    RAM_SIZE = 0x149
    DESTINATION_CODE = 0x14A
    OLD_LICENSEE_CODE = 0x14B
    VERSION = 0x14C
    HEADER_CHECKSUM = 0x14D
    GLOBAL_CHECKSUM_HIGH = 0x14E
    GLOBAL_CHECKSUM_LOW = 0x14F


# Offsets left out of the global checksum sum
CHECKSUM_EXCLUDED_OFFSETS = (
    HeaderOffset.HEADER_CHECKSUM,
    HeaderOffset.GLOBAL_CHECKSUM_HIGH,
    HeaderOffset.GLOBAL_CHECKSUM_LOW,
)


# =============================================================================
# Nintendo Logo
# =============================================================================

NINTENDO_LOGO = bytes([
    0xCE, 0xED, 0x66, 0x66, 0xCC, 0x0D, 0x00, 0x0B,
    0x03, 0x73, 0x00, 0x83, 0x00, 0x0C, 0x00, 0x0D,
    0x00, 0x08, 0x11, 0x1F, 0x88, 0x89, 0x00, 0x0E,
    0xDC, 0xCC, 0x6E, 0xE6, 0xDD, 0xDD, 0xD9, 0x99,
    0xBB, 0xBB, 0x67, 0x63, 0x6E, 0x0E, 0xEC, 0xCC,
    0xDD, 0xDC, 0x99, 0x9F, 0xBB, 0xB9, 0x33, 0x3E,
])


# =============================================================================
# Enumeration Types
# =============================================================================

class CGBMode(IntEnum):
    """Values of the CGB flag byte at 0x143."""
    COMPATIBLE = 0x80       # Runs on DMG and CGB
    ONLY = 0xC0             # CGB only

    def get_description(self) -> str:
        """Get a human-readable description of the mode."""
        descriptions = {
            CGBMode.COMPATIBLE: "Colour Game Boy compatible",
            CGBMode.ONLY: "Colour Game Boy only",
        }
        return descriptions[self]


class CartridgeType(IntEnum):
    """
    Cartridge type byte (0x147) values.

    The byte identifies the memory bank controller and any extra
    hardware on the cartridge. Only the "0x00 is invalid above 32KB"
    rule is enforced; everything else is descriptive.
    """
    ROM_ONLY = 0x00
    MBC1 = 0x01
    MBC1_RAM = 0x02
    MBC1_RAM_BATTERY = 0x03
    MBC2 = 0x05
    MBC2_BATTERY = 0x06
    ROM_RAM = 0x08
    ROM_RAM_BATTERY = 0x09
    MMM01 = 0x0B
    MMM01_RAM = 0x0C
    MMM01_RAM_BATTERY = 0x0D
    MBC3_TIMER_BATTERY = 0x0F
    MBC3_TIMER_RAM_BATTERY = 0x10
    MBC3 = 0x11
    MBC3_RAM = 0x12
    MBC3_RAM_BATTERY = 0x13
    MBC4 = 0x15
    MBC4_RAM = 0x16
    MBC4_RAM_BATTERY = 0x17
    MBC5 = 0x19
    MBC5_RAM = 0x1A
    MBC5_RAM_BATTERY = 0x1B
    MBC5_RUMBLE = 0x1C
    MBC5_RAM_RUMBLE = 0x1D
    MBC5_RAM_BATTERY_RUMBLE = 0x1E
    POCKET_CAMERA = 0xFC
    BANDAI_TAMA5 = 0xFD
    HUC3 = 0xFE
    HUC1_RAM_BATTERY = 0xFF

    def get_description(self) -> str:
        """Get a human-readable description of the cartridge type."""
        return _CARTRIDGE_DESCRIPTIONS[self]


_CARTRIDGE_DESCRIPTIONS = {
    CartridgeType.ROM_ONLY: "No MBC -- ROM only",
    CartridgeType.MBC1: "MBC1 -- ROM only",
    CartridgeType.MBC1_RAM: "MBC1 -- ROM & RAM",
    CartridgeType.MBC1_RAM_BATTERY: "MBC1 -- ROM & RAM & Battery",
    CartridgeType.MBC2: "MBC2 -- ROM only",
    CartridgeType.MBC2_BATTERY: "MBC2 -- ROM & Battery",
    CartridgeType.ROM_RAM: "ROM & RAM",
    CartridgeType.ROM_RAM_BATTERY: "ROM & RAM & Battery",
    CartridgeType.MMM01: "MMM01 -- ROM only",
    CartridgeType.MMM01_RAM: "MMM01 -- ROM & RAM",
    CartridgeType.MMM01_RAM_BATTERY: "MMM01 -- ROM & RAM & Battery",
    CartridgeType.MBC3_TIMER_BATTERY: "MBC3 -- ROM & Timer & Battery",
    CartridgeType.MBC3_TIMER_RAM_BATTERY: "MBC3 -- ROM & RAM & Timer & Battery",
    CartridgeType.MBC3: "MBC3 -- ROM only",
    CartridgeType.MBC3_RAM: "MBC3 -- ROM & RAM",
    CartridgeType.MBC3_RAM_BATTERY: "MBC3 -- ROM & RAM & Battery",
    CartridgeType.MBC4: "MBC4 -- ROM only",
    CartridgeType.MBC4_RAM: "MBC4 -- ROM & RAM",
    CartridgeType.MBC4_RAM_BATTERY: "MBC4 -- ROM & RAM & Battery",
    CartridgeType.MBC5: "MBC5 -- ROM only",
    CartridgeType.MBC5_RAM: "MBC5 -- ROM & RAM",
    CartridgeType.MBC5_RAM_BATTERY: "MBC5 -- ROM & RAM & Battery",
    CartridgeType.MBC5_RUMBLE: "MBC5 -- ROM & Rumble",
    CartridgeType.MBC5_RAM_RUMBLE: "MBC5 -- ROM & RAM & Rumble",
    CartridgeType.MBC5_RAM_BATTERY_RUMBLE: "MBC5 -- ROM & RAM & Battery & Rumble",
    CartridgeType.POCKET_CAMERA: "Pocket Camera",
    CartridgeType.BANDAI_TAMA5: "Bandai TAMA5",
    CartridgeType.HUC3: "HuC3",
    CartridgeType.HUC1_RAM_BATTERY: "HuC1 -- ROM & RAM & Battery",
}


def describe_cartridge_type(value: int) -> str:
    """
    Get the label for a cartridge type byte.

    Args:
        value: Cartridge type byte (0-255)

    Returns:
        Human-readable label, or "Unknown" for unmapped values

    Example:
        >>> describe_cartridge_type(0x1B)
        'MBC5 -- ROM & RAM & Battery'
        >>> describe_cartridge_type(0x42)
        'Unknown'
    """
    try:
        return CartridgeType(value).get_description()
    except ValueError:
        return "Unknown"


def rom_size_kb(size_code: int) -> Optional[int]:
    """
    Get the ROM size in KB encoded by a ROM-size byte (32KB << code).

    Returns None for codes above MAX_ROM_SIZE_CODE.
    """
    if not 0 <= size_code <= MAX_ROM_SIZE_CODE:
        return None
    return (MIN_ROM_SIZE << size_code) // 1024


def describe_rom_size(size_code: int) -> str:
    """
    Get a display label for a ROM-size byte.

    Example:
        >>> describe_rom_size(0x05)
        '1024KB'
        >>> describe_rom_size(0xFF)
        'invalid'
    """
    size_kb = rom_size_kb(size_code)
    return "invalid" if size_kb is None else f"{size_kb}KB"


def check_byte(value: int, name: str = "value") -> int:
    """
    Check that a value fits in a single byte.

    Args:
        value: Value to check
        name: Field name used in the error message

    Returns:
        The value unchanged

    Raises:
        HeaderFieldError: If the value is outside 0-255
    """
    if not 0 <= value <= 0xFF:
        raise HeaderFieldError(f"{name} must be a byte (0-255), got {value}")
    return value

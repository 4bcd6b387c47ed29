"""
Cartridge Header Decoding
=========================

Read-only view of a ROM image header, used by `gbfix info` to show
what is stored and whether the checked fields are valid, without
modifying the image.

Usage
-----
    >>> from gbfix.rom import ImageBuffer, read_header
    >>> info = read_header(ImageBuffer.from_file("game.gb"))
    >>> print(info.title, info.cartridge_description)
    >>> info.is_valid
    True
"""

from dataclasses import dataclass
from typing import Any, Optional

from gbfix.rom.checksum import (
    calculate_global_checksum,
    calculate_header_complement,
    read_global_checksum,
)
from gbfix.rom.image import ImageBuffer
from gbfix.rom.layout import (
    LOGO_LENGTH,
    MIN_ROM_SIZE,
    NINTENDO_LOGO,
    TITLE_MAX_LENGTH,
    CartridgeType,
    CGBMode,
    HeaderOffset,
    describe_cartridge_type,
    describe_rom_size,
    rom_size_kb,
)
from gbfix.rom.validator import rom_size_code


@dataclass(frozen=True)
class HeaderInfo:
    """
    Decoded cartridge header.

    Attributes:
        entry_point: Entry point instructions (0x100-0x103)
        title: Printable title text (stops at the first NUL)
        cgb_flag: Raw CGB flag byte (0x143)
        new_licensee_code: Two-character licensee code (0x144-0x145)
        sgb_flag: SGB flag byte (0x146)
        cartridge_type: Cartridge type byte (0x147)
        rom_size: ROM-size byte (0x148)
        ram_size: RAM-size byte (0x149)
        destination_code: Destination code (0x14A)
        old_licensee_code: Old licensee code (0x14B)
        version: Mask ROM version (0x14C)
        header_checksum: Stored complement (0x14D)
        global_checksum: Stored global checksum (0x14E-0x14F)
        image_size: Actual size of the image in bytes
        logo_valid: Logo matches the canonical bytes
        expected_rom_size: ROM-size byte the image size calls for
        expected_header_checksum: Calculated complement
        expected_global_checksum: Calculated global checksum
    """
    entry_point: bytes
    title: str
    cgb_flag: int
    new_licensee_code: str
    sgb_flag: int
    cartridge_type: int
    rom_size: int
    ram_size: int
    destination_code: int
    old_licensee_code: int
    version: int
    header_checksum: int
    global_checksum: int
    image_size: int
    logo_valid: bool
    expected_rom_size: int
    expected_header_checksum: int
    expected_global_checksum: int

    @property
    def cartridge_description(self) -> str:
        return describe_cartridge_type(self.cartridge_type)

    @property
    def cgb_mode(self) -> Optional[CGBMode]:
        """CGB mode, or None for a DMG-only cartridge."""
        try:
            return CGBMode(self.cgb_flag)
        except ValueError:
            return None

    @property
    def rom_size_kb(self) -> Optional[int]:
        """ROM size in KB claimed by the ROM-size byte, or None if out of range."""
        return rom_size_kb(self.rom_size)

    @property
    def rom_size_valid(self) -> bool:
        return self.rom_size == self.expected_rom_size

    @property
    def cartridge_type_valid(self) -> bool:
        return not (
            self.image_size > MIN_ROM_SIZE
            and self.cartridge_type == CartridgeType.ROM_ONLY
        )

    @property
    def header_checksum_valid(self) -> bool:
        return self.header_checksum == self.expected_header_checksum

    @property
    def global_checksum_valid(self) -> bool:
        return self.global_checksum == self.expected_global_checksum

    @property
    def is_valid(self) -> bool:
        """True if every checked field already holds its canonical value."""
        return (
            self.logo_valid
            and self.rom_size_valid
            and self.cartridge_type_valid
            and self.header_checksum_valid
            and self.global_checksum_valid
        )

    def to_dict(self) -> dict[str, Any]:
        """Get the header as a dictionary (for display)."""
        return {
            "entry_point": self.entry_point.hex(" ").upper(),
            "title": self.title,
            "cgb_flag": f"0x{self.cgb_flag:02X}",
            "cartridge_type": f"0x{self.cartridge_type:02X}",
            "cartridge_description": self.cartridge_description,
            "rom_size": f"0x{self.rom_size:02X} ({describe_rom_size(self.rom_size)})",
            "ram_size": f"0x{self.ram_size:02X}",
            "version": self.version,
            "header_checksum": f"0x{self.header_checksum:02X}",
            "global_checksum": f"0x{self.global_checksum:04X}",
            "image_size": self.image_size,
        }


def decode_title(raw: bytes) -> str:
    """
    Convert raw title bytes to display text.

    Stops at the first NUL; non-printable bytes are shown as '.'.
    """
    raw = raw.split(b"\x00", 1)[0]
    return "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in raw)


def read_header(image: ImageBuffer) -> HeaderInfo:
    """
    Decode the header of a ROM image without modifying it.

    Args:
        image: The ROM image

    Returns:
        HeaderInfo for the image

    Raises:
        ImageTooSmallError: If the image cannot hold a header
    """
    image.require_header()
    data = image.to_bytes()

    cgb_flag = data[HeaderOffset.CGB_FLAG]
    # On CGB cartridges the last title byte is the CGB flag
    title_length = TITLE_MAX_LENGTH - 1 if cgb_flag & 0x80 else TITLE_MAX_LENGTH
    title_raw = data[HeaderOffset.TITLE:HeaderOffset.TITLE + title_length]
    licensee_raw = data[HeaderOffset.NEW_LICENSEE_CODE:HeaderOffset.NEW_LICENSEE_CODE + 2]
    logo = data[HeaderOffset.LOGO:HeaderOffset.LOGO + LOGO_LENGTH]

    return HeaderInfo(
        entry_point=data[HeaderOffset.ENTRY_POINT:HeaderOffset.LOGO],
        title=decode_title(title_raw),
        cgb_flag=cgb_flag,
        new_licensee_code=decode_title(licensee_raw),
        sgb_flag=data[HeaderOffset.SGB_FLAG],
        cartridge_type=data[HeaderOffset.CARTRIDGE_TYPE],
        rom_size=data[HeaderOffset.ROM_SIZE],
        ram_size=data[HeaderOffset.RAM_SIZE],
        destination_code=data[HeaderOffset.DESTINATION_CODE],
        old_licensee_code=data[HeaderOffset.OLD_LICENSEE_CODE],
        version=data[HeaderOffset.VERSION],
        header_checksum=data[HeaderOffset.HEADER_CHECKSUM],
        global_checksum=read_global_checksum(data),
        image_size=len(data),
        logo_valid=logo == NINTENDO_LOGO,
        expected_rom_size=rom_size_code(len(data)),
        expected_header_checksum=calculate_header_complement(data),
        expected_global_checksum=calculate_global_checksum(data),
    )

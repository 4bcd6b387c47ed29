"""
Cartridge Header Validator
==========================

This module provides the HeaderValidator class, which repairs the header
fields that must satisfy format invariants. Nothing is ever rejected:
each stage either finds a field correct or rewrites it.

Validation Stages
-----------------
validate() runs four stages in this order:

1. Nintendo logo: the 48 bytes at 0x104 must match the canonical logo.
2. ROM size: byte 0x148 must hold the smallest n with 32KB << n >= size.
3. Cartridge type: type 0x00 (no MBC) is invalid above 32KB and becomes
   0x01 (MBC1).
4. Checksums: the header complement (0x14D), then the global checksum
   (0x14E-0x14F), which includes the new complement.

Each stage is idempotent, so running validate() on a repaired image
reports no changes.

Usage
-----
    >>> from gbfix.rom import ImageBuffer, HeaderValidator
    >>> image = ImageBuffer.from_file("game.gb")
    >>> report = HeaderValidator(image).validate()
    >>> for change in report.changes:
    ...     print(change)
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from gbfix.rom.checksum import (
    calculate_global_checksum,
    calculate_header_complement,
    read_global_checksum,
    split_checksum,
)
from gbfix.rom.image import ImageBuffer
from gbfix.rom.layout import (
    LOGO_LENGTH,
    MIN_ROM_SIZE,
    NINTENDO_LOGO,
    CartridgeType,
    HeaderOffset,
    describe_rom_size,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Result Types
# =============================================================================

@dataclass(frozen=True)
class FieldChange:
    """
    A header field rewritten during validation.

    Attributes:
        field: Name of the field ("rom_size", "cartridge_type",
            "header_checksum", "global_checksum")
        old: Value before the repair
        new: Value after the repair
    """
    field: str
    old: int
    new: int

    def __str__(self) -> str:
        width = 4 if self.field == "global_checksum" else 2
        return f"{self.field}: 0x{self.old:0{width}X} -> 0x{self.new:0{width}X}"


@dataclass
class ValidationReport:
    """
    Outcome of a validate() run.

    Attributes:
        logo_bytes_changed: Number of logo bytes rewritten
        changes: Header fields rewritten, in stage order
    """
    logo_bytes_changed: int = 0
    changes: list[FieldChange] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True if anything in the image was rewritten."""
        return self.logo_bytes_changed > 0 or bool(self.changes)

    def get_change(self, field_name: str) -> Optional[FieldChange]:
        """Get the change recorded for a field, if any."""
        for change in self.changes:
            if change.field == field_name:
                return change
        return None


def rom_size_code(length: int) -> int:
    """
    Get the ROM-size byte for an image of the given length.

    Example:
        >>> rom_size_code(0x8000)
        0
        >>> rom_size_code(0x10000)
        1
        >>> rom_size_code(0x8001)
        1
    """
    code = 0
    while length > (MIN_ROM_SIZE << code):
        code += 1
    return code


# =============================================================================
# Header Validator
# =============================================================================

class HeaderValidator:
    """
    Repairs header fields of a ROM image in place.

    Attributes:
        image: The ImageBuffer being validated
    """

    def __init__(self, image: ImageBuffer):
        self.image = image

    def validate(self) -> ValidationReport:
        """
        Run every validation stage in order.

        Returns:
            ValidationReport listing what was rewritten

        Raises:
            ImageTooSmallError: If the image cannot hold a header
        """
        self.image.require_header()
        logger.info("Validating header:")

        report = ValidationReport()
        report.logo_bytes_changed = self.validate_logo()

        for change in (self.validate_rom_size(), self.validate_cartridge_type()):
            if change is not None:
                report.changes.append(change)

        report.changes.extend(self.validate_checksums())
        return report

    # =========================================================================
    # Stages
    # =========================================================================

    def validate_logo(self) -> int:
        """
        Restore any logo bytes that differ from the canonical logo.

        Returns:
            Number of bytes changed
        """
        self.image.require_header()

        changed = 0
        for i in range(LOGO_LENGTH):
            offset = HeaderOffset.LOGO + i
            if self.image[offset] != NINTENDO_LOGO[i]:
                self.image[offset] = NINTENDO_LOGO[i]
                changed += 1

        if changed:
            logger.info(f"\tChanged {changed} bytes in the Nintendo logo")
        else:
            logger.info("\tNintendo logo is OK")
        return changed

    def validate_rom_size(self) -> Optional[FieldChange]:
        """
        Make the ROM-size byte match the actual image size.

        Returns:
            The change made, or None if the byte was already correct
        """
        self.image.require_header()

        current = self.image[HeaderOffset.ROM_SIZE]
        calculated = rom_size_code(len(self.image))

        if current == calculated:
            logger.info("\tROM size byte is OK")
            return None

        self.image[HeaderOffset.ROM_SIZE] = calculated
        logger.info(
            f"\tChanged ROM size byte from 0x{current:02X} ({describe_rom_size(current)}) "
            f"to 0x{calculated:02X} ({describe_rom_size(calculated)})"
        )
        return FieldChange("rom_size", current, calculated)

    def validate_cartridge_type(self) -> Optional[FieldChange]:
        """
        Replace cartridge type 0x00 with 0x01 on images larger than 32KB.

        Any type is acceptable on a 32KB image.

        Returns:
            The change made, or None if the byte was left alone
        """
        self.image.require_header()

        current = self.image[HeaderOffset.CARTRIDGE_TYPE]
        if len(self.image) > MIN_ROM_SIZE and current == CartridgeType.ROM_ONLY:
            self.image[HeaderOffset.CARTRIDGE_TYPE] = CartridgeType.MBC1
            logger.info("\tCartridge type byte changed to 0x01")
            return FieldChange("cartridge_type", current, int(CartridgeType.MBC1))

        logger.info("\tCartridge type byte is OK")
        return None

    def validate_checksums(self) -> list[FieldChange]:
        """
        Recalculate the global checksum and header complement.

        Both values are calculated from the image as it stands before
        either is written; the checksum already includes the new
        complement.

        Returns:
            Changes made (global checksum first, then complement)
        """
        self.image.require_header()

        data = self.image.to_bytes()
        stored_complement = data[HeaderOffset.HEADER_CHECKSUM]
        stored_checksum = read_global_checksum(data)

        complement = calculate_header_complement(data)
        checksum = calculate_global_checksum(data, complement)
        logger.debug(f"Calculated complement 0x{complement:02X}, checksum 0x{checksum:04X}")

        changes = []

        if checksum != stored_checksum:
            high, low = split_checksum(checksum)
            self.image[HeaderOffset.GLOBAL_CHECKSUM_HIGH] = high
            self.image[HeaderOffset.GLOBAL_CHECKSUM_LOW] = low
            logger.info(
                f"\tChecksum changed from 0x{stored_checksum:04X} to 0x{checksum:04X}"
            )
            changes.append(FieldChange("global_checksum", stored_checksum, checksum))
        else:
            logger.info("\tChecksum is OK")

        if complement != stored_complement:
            self.image[HeaderOffset.HEADER_CHECKSUM] = complement
            logger.info(
                f"\tComplement checksum changed from 0x{stored_complement:02X} "
                f"to 0x{complement:02X}"
            )
            changes.append(FieldChange("header_checksum", stored_complement, complement))
        else:
            logger.info("\tComplement checksum is OK")

        return changes

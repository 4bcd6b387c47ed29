"""
Game Boy ROM Header Handling
============================

This module provides everything needed to patch and validate the
cartridge header of a Game Boy ROM image.

Overview
--------
- **ImageBuffer**: Owns the image bytes, guarantees a complete header
- **HeaderEditor**: Pad, truncate, set title/CGB mode/MBC type/RAM size
- **HeaderValidator**: Repair logo, ROM size, cartridge type, checksums
- **read_header**: Decode the header without modifying the image
- **process_image / fix_file**: Run a set of operations in fixed order

Quick Start
-----------
Fix up a freshly assembled ROM:

    >>> from gbfix.rom import FixOptions, fix_file
    >>> fix_file("game.gb", FixOptions(pad=True, validate=True))

Work on an image in memory:

    >>> from gbfix.rom import ImageBuffer, HeaderEditor, HeaderValidator
    >>> image = ImageBuffer(data)
    >>> HeaderEditor(image).set_title("GAME")
    >>> report = HeaderValidator(image).validate()
    >>> report.changed
    True

Reference
---------
- Pan Docs, The Cartridge Header: https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

from gbfix.rom.layout import (
    MIN_IMAGE_SIZE,
    MIN_ROM_SIZE,
    MAX_TRUNCATE_SIZE,
    MAX_ROM_SIZE_CODE,
    ROM_BANK_SIZE,
    LOGO_LENGTH,
    TITLE_MAX_LENGTH,
    NINTENDO_LOGO,
    HeaderOffset,
    CartridgeType,
    CGBMode,
    describe_cartridge_type,
    describe_rom_size,
    rom_size_kb,
)

from gbfix.rom.image import ImageBuffer

from gbfix.rom.checksum import (
    calculate_header_complement,
    calculate_global_checksum,
    read_global_checksum,
    split_checksum,
)

from gbfix.rom.editor import (
    HeaderEditor,
    padded_size,
    truncated_size,
    encode_title,
)

from gbfix.rom.validator import (
    HeaderValidator,
    ValidationReport,
    FieldChange,
    rom_size_code,
)

from gbfix.rom.header import (
    HeaderInfo,
    read_header,
)

from gbfix.rom.processor import (
    FixOptions,
    ProcessResult,
    process_image,
    fix_file,
)

# =============================================================================
# Module-level __all__ for explicit exports
# =============================================================================

__all__ = [
    # Layout
    "MIN_IMAGE_SIZE",
    "MIN_ROM_SIZE",
    "MAX_TRUNCATE_SIZE",
    "MAX_ROM_SIZE_CODE",
    "ROM_BANK_SIZE",
    "LOGO_LENGTH",
    "TITLE_MAX_LENGTH",
    "NINTENDO_LOGO",
    "HeaderOffset",
    "CartridgeType",
    "CGBMode",
    "describe_cartridge_type",
    "describe_rom_size",
    "rom_size_kb",
    # Image
    "ImageBuffer",
    # Checksums
    "calculate_header_complement",
    "calculate_global_checksum",
    "read_global_checksum",
    "split_checksum",
    # Editor
    "HeaderEditor",
    "padded_size",
    "truncated_size",
    "encode_title",
    # Validator
    "HeaderValidator",
    "ValidationReport",
    "FieldChange",
    "rom_size_code",
    # Header decoding
    "HeaderInfo",
    "read_header",
    # Pipeline
    "FixOptions",
    "ProcessResult",
    "process_image",
    "fix_file",
]

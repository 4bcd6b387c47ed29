"""
ROM Image Processing Pipeline
=============================

This module ties the editor and validator together. A FixOptions record
says which operations to run; process_image() applies them to an
ImageBuffer in a fixed order, no matter how the options were given:

    pad -> truncate -> title -> CGB compatible -> CGB only
        -> MBC type -> RAM size -> validate

Validation runs last so the checksums cover every other edit.

Usage
-----
    >>> from gbfix.rom import FixOptions, fix_file
    >>> options = FixOptions(pad=True, title="HELLO", validate=True)
    >>> result = fix_file("hello.gb", options)
    >>> result.final_size
    32768
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import logging

from gbfix.rom.editor import HeaderEditor, encode_title
from gbfix.rom.image import ImageBuffer
from gbfix.rom.layout import check_byte
from gbfix.rom.validator import HeaderValidator, ValidationReport

# Logger for this module
logger = logging.getLogger(__name__)


@dataclass
class FixOptions:
    """
    Operations requested for one ROM image.

    Attributes:
        pad: Pad the image to a power-of-two size
        pad_value: Fill byte used when padding
        truncate: Truncate the image to a power-of-two size
        title: New cartridge title (None = leave unchanged)
        gbc_compatible: Set the CGB flag to 0x80
        gbc_only: Set the CGB flag to 0xC0
        mbc_type: New cartridge type byte (None = leave unchanged)
        ram_size: New RAM size byte (None = leave unchanged)
        validate: Repair logo, ROM size, cartridge type and checksums
        dry_run: Process the image but don't write it back
    """
    pad: bool = False
    pad_value: int = 0xFF
    truncate: bool = False
    title: Optional[str] = None
    gbc_compatible: bool = False
    gbc_only: bool = False
    mbc_type: Optional[int] = None
    ram_size: Optional[int] = None
    validate: bool = False
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Check byte-valued options and the title before any edit is made."""
        check_byte(self.pad_value, "pad value")
        if self.mbc_type is not None:
            check_byte(self.mbc_type, "MBC type")
        if self.ram_size is not None:
            check_byte(self.ram_size, "RAM size")
        if self.title is not None:
            encode_title(self.title)

    def has_operations(self) -> bool:
        """True if at least one operation is requested."""
        return any((
            self.pad,
            self.truncate,
            self.title is not None,
            self.gbc_compatible,
            self.gbc_only,
            self.mbc_type is not None,
            self.ram_size is not None,
            self.validate,
        ))


@dataclass
class ProcessResult:
    """
    Summary of a processing run.

    Attributes:
        original_size: Image size before processing
        final_size: Image size after processing
        bytes_padded: Bytes added by padding
        bytes_truncated: Bytes removed by truncation
        mbc_description: Label of the new cartridge type, if it was set
        validation: Validation report, if validation ran
        written: True if the image was written back to disk
    """
    original_size: int
    final_size: int = 0
    bytes_padded: int = 0
    bytes_truncated: int = 0
    mbc_description: Optional[str] = None
    validation: Optional[ValidationReport] = None
    written: bool = False


def process_image(image: ImageBuffer, options: FixOptions) -> ProcessResult:
    """
    Apply the requested operations to an image in the fixed order.

    Args:
        image: The image to modify in place
        options: Operations to run

    Returns:
        ProcessResult describing what changed

    Raises:
        ImageTooSmallError: If the image cannot hold a header
    """
    image.require_header()
    result = ProcessResult(original_size=len(image))
    editor = HeaderEditor(image)

    if options.pad:
        result.bytes_padded = editor.pad(options.pad_value)

    if options.truncate:
        result.bytes_truncated = editor.truncate()

    if options.title is not None:
        editor.set_title(options.title)

    if options.gbc_compatible:
        editor.set_gbc_compatible()

    if options.gbc_only:
        editor.set_gbc_only()

    if options.mbc_type is not None:
        result.mbc_description = editor.set_mbc_type(options.mbc_type)

    if options.ram_size is not None:
        editor.set_ram_size(options.ram_size)

    if options.validate:
        result.validation = HeaderValidator(image).validate()

    result.final_size = len(image)
    return result


def fix_file(filepath: Union[str, Path], options: FixOptions) -> ProcessResult:
    """
    Load a ROM image, process it and write it back over the same file.

    Nothing is written if options.dry_run is set or if processing fails.

    Args:
        filepath: Path to the ROM image
        options: Operations to run

    Returns:
        ProcessResult describing what changed

    Raises:
        FileNotFoundError: If the file doesn't exist
        ImageTooSmallError: If the file is shorter than 0x150 bytes
    """
    filepath = Path(filepath)
    image = ImageBuffer.from_file(filepath)

    if options.dry_run:
        logger.info("Dry run: the image will not be written")

    result = process_image(image, options)

    if not options.dry_run:
        image.write_to_file(filepath)
        result.written = True

    return result

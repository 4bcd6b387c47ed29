"""
Cartridge Header Editor
=======================

This module provides the HeaderEditor class, which applies the
operator-requested field changes to a ROM image: resizing (pad and
truncate) and setting the title, CGB mode, cartridge type and RAM size.

Usage
-----
    >>> from gbfix.rom import ImageBuffer, HeaderEditor
    >>> image = ImageBuffer.from_file("game.gb")
    >>> editor = HeaderEditor(image)
    >>> editor.pad(0xFF)
    >>> editor.set_title("TETRIS")
    >>> editor.set_mbc_type(0x1B)
    'MBC5 -- ROM & RAM & Battery'

Resizing
--------
Padding and truncation walk different size sequences, so they are not
inverses of each other:

- pad() starts at 32KB and doubles until the size covers the image.
- truncate() starts at 8MB and halves until the size fits the image.

A 600KB image therefore pads to 1024KB but truncates to 512KB.

Every operation checks the image header precondition first and edits
the buffer in place.
"""

import logging

from gbfix.errors import TitleError
from gbfix.rom.image import ImageBuffer
from gbfix.rom.layout import (
    MAX_TRUNCATE_SIZE,
    MIN_IMAGE_SIZE,
    MIN_ROM_SIZE,
    TITLE_MAX_LENGTH,
    CGBMode,
    HeaderOffset,
    check_byte,
    describe_cartridge_type,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Size Arithmetic
# =============================================================================

def padded_size(length: int) -> int:
    """
    Get the size an image of the given length pads to.

    Example:
        >>> padded_size(0x150)
        32768
        >>> padded_size(600 * 1024)
        1048576
    """
    size = MIN_ROM_SIZE
    while length > size:
        size *= 2
    return size


def truncated_size(length: int) -> int:
    """
    Get the size an image of the given length truncates to.

    Example:
        >>> truncated_size(600 * 1024)
        524288
        >>> truncated_size(16 * 1024 * 1024)
        8388608
    """
    size = MAX_TRUNCATE_SIZE
    while length < size:
        size //= 2
    return size


# =============================================================================
# Header Editor
# =============================================================================

class HeaderEditor:
    """
    Field-level edits on a ROM image.

    Attributes:
        image: The ImageBuffer being edited
    """

    def __init__(self, image: ImageBuffer):
        self.image = image

    # =========================================================================
    # Resizing
    # =========================================================================

    def pad(self, pad_value: int = 0xFF) -> int:
        """
        Grow the image to the next power-of-two size (32KB minimum).

        Original bytes keep their offsets; new bytes are set to pad_value.

        Args:
            pad_value: Fill byte for the added space

        Returns:
            Number of bytes added (0 if already a valid size)

        Raises:
            ValueError: If pad_value is not a byte
        """
        self.image.require_header()
        check_byte(pad_value, "pad value")

        current = len(self.image)
        target = padded_size(current)

        if target == current:
            logger.info("\tNo padding needed")
            return 0

        added = target - current
        logger.info(f"Padding to {target // 1024}KB with pad value 0x{pad_value:02X}")
        self.image.replace(self.image.to_bytes() + bytes([pad_value]) * added)
        logger.info(f"\tAdded {added} bytes")
        return added

    def truncate(self) -> int:
        """
        Shrink the image to the largest valid size not exceeding it (8MB cap).

        Returns:
            Number of bytes removed (0 if already a valid size)
        """
        self.image.require_header()

        current = len(self.image)
        target = truncated_size(current)

        if target == current:
            logger.debug("No truncation needed")
            return 0

        if target < MIN_IMAGE_SIZE:
            logger.warning(
                f"Not truncating: {target} bytes would not hold the cartridge header"
            )
            return 0

        logger.info(f"Truncating to {target // 1024}KB")
        self.image.replace(self.image.read(0, target))
        return current - target

    # =========================================================================
    # Header Fields
    # =========================================================================

    def set_title(self, title: str) -> None:
        """
        Write the cartridge title at 0x134.

        Exactly len(title) bytes are written; the rest of the title area
        is left as it was (no NUL termination or padding).

        Args:
            title: 1-16 ASCII characters

        Raises:
            TitleError: If the title is empty, not ASCII, or too long
        """
        self.image.require_header()
        encoded = encode_title(title)

        logger.info("Setting cartridge title:")
        self.image.write(HeaderOffset.TITLE, encoded)
        logger.info(f"\tTitle set to {title}")

    def set_gbc_compatible(self) -> None:
        """Mark the cartridge as Colour Game Boy compatible (0x80 at 0x143)."""
        self._set_cgb_mode(CGBMode.COMPATIBLE)

    def set_gbc_only(self) -> None:
        """Mark the cartridge as Colour Game Boy only (0xC0 at 0x143)."""
        self._set_cgb_mode(CGBMode.ONLY)

    def _set_cgb_mode(self, mode: CGBMode) -> None:
        self.image.require_header()
        logger.info(f"Setting {mode.get_description()} mode")
        self.image[HeaderOffset.CGB_FLAG] = mode
        logger.info(f"\t{mode.get_description()} mode set")

    def set_mbc_type(self, mbc_type: int) -> str:
        """
        Set the cartridge type byte at 0x147.

        Args:
            mbc_type: Cartridge type byte

        Returns:
            Label for the new type ("Unknown" if not in the catalog)
        """
        self.image.require_header()
        check_byte(mbc_type, "MBC type")

        logger.info("Setting MBC type")
        self.image[HeaderOffset.CARTRIDGE_TYPE] = mbc_type
        description = describe_cartridge_type(mbc_type)
        logger.info(f"\tMBC type set to 0x{mbc_type:02X}")
        logger.info(f"\t\t{description}")
        return description

    def set_ram_size(self, ram_size: int) -> None:
        """Set the RAM size byte at 0x149."""
        self.image.require_header()
        check_byte(ram_size, "RAM size")

        logger.info("Setting RAM size")
        self.image[HeaderOffset.RAM_SIZE] = ram_size
        logger.info(f"\tRAM size set to 0x{ram_size:02X}")


def encode_title(title: str) -> bytes:
    """
    Encode a cartridge title for the header.

    Args:
        title: Title text

    Returns:
        ASCII bytes of the title

    Raises:
        TitleError: If the title is empty, not ASCII, or longer than 16 bytes
    """
    if not title:
        raise TitleError("Cartridge title must not be empty")

    try:
        encoded = title.encode("ascii")
    except UnicodeEncodeError:
        raise TitleError(f"Cartridge title must be ASCII: {title!r}") from None

    if len(encoded) > TITLE_MAX_LENGTH:
        raise TitleError(
            f"Cartridge title '{title}' is {len(encoded)} characters; "
            f"the title area holds at most {TITLE_MAX_LENGTH}"
        )
    return encoded

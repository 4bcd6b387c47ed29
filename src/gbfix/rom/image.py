"""
ROM Image Buffer
================

This module provides the ImageBuffer class, the in-memory model of a
ROM image file. The buffer owns the raw bytes and guarantees that they
always cover the full cartridge header (at least 0x150 bytes).

Usage
-----
    >>> from gbfix.rom import ImageBuffer
    >>> image = ImageBuffer.from_file("game.gb")
    >>> image[0x147]
    1
    >>> image[0x149] = 0x02
    >>> image.write_to_file("game.gb")

Header operations call require_header() before touching the buffer.
Since the constructor and replace() already refuse short data, the
check only fails if the invariant has been bypassed, but it gives the
caller a typed error instead of an out-of-range write.
"""

from pathlib import Path
from typing import Union
import logging

from gbfix.errors import ImageFormatError, ImageTooSmallError
from gbfix.rom.layout import MIN_IMAGE_SIZE, check_byte

# Logger for this module
logger = logging.getLogger(__name__)


class ImageBuffer:
    """
    Mutable, owned byte buffer holding an entire ROM image.

    Indexing reads and writes single bytes and is restricted to offsets
    within the current length; negative offsets are not accepted.

    Attributes:
        data: The underlying bytearray (read-only view via to_bytes())
    """

    def __init__(self, data: Union[bytes, bytearray]):
        """
        Initialize the buffer with a copy of the given bytes.

        Args:
            data: Raw image bytes (at least 0x150 bytes)

        Raises:
            ImageFormatError: If data is not a byte sequence
            ImageTooSmallError: If data is shorter than 0x150 bytes
        """
        self._data = self._coerce(data)

    # =========================================================================
    # Loading and Saving
    # =========================================================================

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "ImageBuffer":
        """
        Load a ROM image from disk.

        Args:
            filepath: Path to the ROM image

        Returns:
            A new ImageBuffer holding the file contents

        Raises:
            FileNotFoundError: If the file doesn't exist
            ImageTooSmallError: If the file is shorter than 0x150 bytes
        """
        filepath = Path(filepath)
        data = filepath.read_bytes()
        logger.debug(f"Read {len(data)} bytes from {filepath}")
        return cls(data)

    def write_to_file(self, filepath: Union[str, Path]) -> int:
        """
        Write the whole image to disk, replacing the file.

        Args:
            filepath: Output file path

        Returns:
            Number of bytes written
        """
        filepath = Path(filepath)
        filepath.write_bytes(bytes(self._data))
        logger.debug(f"Wrote {len(self._data)} bytes to {filepath}")
        return len(self._data)

    # =========================================================================
    # Byte Access
    # =========================================================================

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, offset: int) -> int:
        return self._data[self._check_offset(offset)]

    def __setitem__(self, offset: int, value: int) -> None:
        self._data[self._check_offset(offset)] = check_byte(value)

    def read(self, offset: int, length: int) -> bytes:
        """
        Read a run of bytes.

        Args:
            offset: Start offset
            length: Number of bytes

        Returns:
            The requested bytes

        Raises:
            IndexError: If the range is not inside the image
        """
        self._check_range(offset, length)
        return bytes(self._data[offset:offset + length])

    def write(self, offset: int, data: bytes) -> None:
        """
        Overwrite a run of bytes in place.

        Args:
            offset: Start offset
            data: Bytes to write

        Raises:
            IndexError: If the range is not inside the image
        """
        self._check_range(offset, len(data))
        self._data[offset:offset + len(data)] = data

    def replace(self, data: Union[bytes, bytearray]) -> None:
        """
        Replace the whole buffer contents (used when resizing).

        Raises:
            ImageTooSmallError: If data is shorter than 0x150 bytes
        """
        self._data = self._coerce(data)

    def to_bytes(self) -> bytes:
        """Get an immutable copy of the image."""
        return bytes(self._data)

    # =========================================================================
    # Invariant Checks
    # =========================================================================

    def require_header(self) -> None:
        """
        Check that the image covers the full cartridge header.

        Raises:
            ImageTooSmallError: If the image is shorter than 0x150 bytes
        """
        if len(self._data) < MIN_IMAGE_SIZE:
            raise ImageTooSmallError(len(self._data), MIN_IMAGE_SIZE)

    @staticmethod
    def _coerce(data: Union[bytes, bytearray]) -> bytearray:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ImageFormatError(
                f"ROM image data must be bytes, got {type(data).__name__}"
            )
        if len(data) < MIN_IMAGE_SIZE:
            raise ImageTooSmallError(len(data), MIN_IMAGE_SIZE)
        return bytearray(data)

    def _check_offset(self, offset: int) -> int:
        if not isinstance(offset, int):
            raise TypeError(f"Image offsets must be integers, got {type(offset).__name__}")
        if not 0 <= offset < len(self._data):
            raise IndexError(
                f"Offset 0x{offset:X} outside image of {len(self._data)} bytes"
            )
        return offset

    def _check_range(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > len(self._data):
            raise IndexError(
                f"Range 0x{offset:X}+{length} outside image of {len(self._data)} bytes"
            )

    def __repr__(self) -> str:
        return f"ImageBuffer(size={len(self._data)})"

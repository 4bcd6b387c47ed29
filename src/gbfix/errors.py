"""
gbfix Error Hierarchy
=====================

This module defines the exception hierarchy for gbfix. All exceptions
inherit from GBFixError, allowing callers to catch every tool-related
error with a single except clause.

Exception Hierarchy
-------------------
GBFixError (base)
├── ImageError (ROM image handling)
│   ├── ImageTooSmallError - image shorter than the cartridge header
│   └── ImageFormatError - image content cannot be interpreted
└── HeaderFieldError (invalid value for a header field, also a ValueError)
    └── TitleError - cartridge title cannot be written

Design Philosophy
-----------------
Header repairs never fail: every validation stage either finds a field
already correct or rewrites it. The errors here cover the boundaries
instead, where an image is handed to the header operations or where an
operator-supplied value does not fit its field.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class GBFixError(Exception):
    """
    Base exception for all gbfix errors.

        try:
            fix_file("game.gb", options)
        except GBFixError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Image Exceptions
# =============================================================================

class ImageError(GBFixError):
    """Base exception for ROM image handling errors."""
    pass


class ImageTooSmallError(ImageError):
    """
    ROM image is too small to contain a cartridge header.

    Raised when an image shorter than 0x150 bytes is loaded, or when a
    header operation is handed such an image.

    Attributes:
        size: Actual size of the image in bytes
        minimum: Minimum size required
    """

    def __init__(self, size: int, minimum: int, message: Optional[str] = None):
        self.size = size
        self.minimum = minimum
        if message is None:
            message = (
                f"ROM image is {size} bytes, smaller than the "
                f"{minimum} (0x{minimum:X}) bytes needed for a cartridge header"
            )
        super().__init__(message)


class ImageFormatError(ImageError):
    """
    ROM image content is invalid.

    Raised when data handed to the image layer is not a byte sequence.
    """
    pass


# =============================================================================
# Header Field Exceptions
# =============================================================================

class HeaderFieldError(GBFixError, ValueError):
    """
    Base exception for values that cannot be stored in a header field.

    Also a ValueError, so out-of-range byte arguments can be caught
    either way.
    """
    pass


class TitleError(HeaderFieldError):
    """
    Invalid cartridge title.

    Titles must be 1-16 ASCII characters; the title area runs from
    0x134 to 0x143 inclusive.
    """
    pass

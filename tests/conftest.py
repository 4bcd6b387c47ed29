"""
gbfix Test Configuration
========================

Shared fixtures for building ROM images in tests.
"""

from pathlib import Path
from typing import Callable

import pytest

from gbfix.rom import (
    MIN_IMAGE_SIZE,
    MIN_ROM_SIZE,
    NINTENDO_LOGO,
    HeaderOffset,
    ImageBuffer,
)


@pytest.fixture
def make_image() -> Callable[..., ImageBuffer]:
    """
    Fixture: factory for ImageBuffers of a given size and fill byte.

        image = make_image(0x8000, fill=0xFF)
    """
    def _make(size: int = MIN_IMAGE_SIZE, fill: int = 0x00) -> ImageBuffer:
        return ImageBuffer(bytes([fill]) * size)
    return _make


@pytest.fixture
def blank_image(make_image) -> ImageBuffer:
    """Fixture: smallest legal image, all zero bytes (0x150 bytes)."""
    return make_image(MIN_IMAGE_SIZE)


@pytest.fixture
def rom_32k_data() -> bytes:
    """
    Fixture: 32KB image with the logo and a title but stale checksums.

    Layout:
    - 0x104-0x133: Nintendo logo
    - 0x134: "HELLO"
    - 0x147: cartridge type 0x00 (ROM only)
    - everything else zero
    """
    data = bytearray(MIN_ROM_SIZE)
    data[HeaderOffset.LOGO:HeaderOffset.LOGO + len(NINTENDO_LOGO)] = NINTENDO_LOGO
    data[HeaderOffset.TITLE:HeaderOffset.TITLE + 5] = b"HELLO"
    return bytes(data)


@pytest.fixture
def rom_file(tmp_path: Path, rom_32k_data: bytes) -> Path:
    """Fixture: the 32KB image written to a temporary file."""
    path = tmp_path / "hello.gb"
    path.write_bytes(rom_32k_data)
    return path

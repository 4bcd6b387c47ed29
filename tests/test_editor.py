"""
HeaderEditor Unit Tests
=======================

Tests for resizing (pad/truncate) and the header field setters.
"""

import pytest

from gbfix.errors import ImageTooSmallError, TitleError
from gbfix.rom import (
    MIN_IMAGE_SIZE,
    MIN_ROM_SIZE,
    HeaderEditor,
    HeaderOffset,
    padded_size,
    truncated_size,
)

KB = 1024
MB = 1024 * 1024


# =============================================================================
# Size Arithmetic
# =============================================================================

class TestSizeArithmetic:
    """Tests for the pad and truncate size sequences."""

    def test_padded_size_minimum(self):
        """Anything up to 32KB pads to 32KB."""
        assert padded_size(MIN_IMAGE_SIZE) == MIN_ROM_SIZE
        assert padded_size(MIN_ROM_SIZE) == MIN_ROM_SIZE

    def test_padded_size_doubles(self):
        """Sizes above 32KB pad to the next power of two."""
        assert padded_size(MIN_ROM_SIZE + 1) == 64 * KB
        assert padded_size(600 * KB) == 1024 * KB

    def test_padded_size_beyond_8mb(self):
        """Padding is not capped at 8MB."""
        assert padded_size(8 * MB + 1) == 16 * MB

    def test_truncated_size_halves(self):
        """Truncation picks the largest size not exceeding the length."""
        assert truncated_size(600 * KB) == 512 * KB
        assert truncated_size(64 * KB) == 64 * KB
        assert truncated_size(0x5000) == 0x4000

    def test_truncated_size_cap(self):
        """Truncation never exceeds 8MB."""
        assert truncated_size(16 * MB) == 8 * MB

    def test_sequences_differ(self):
        """Pad and truncate are not inverses of each other."""
        length = 600 * KB
        assert padded_size(length) != truncated_size(length)


# =============================================================================
# Padding
# =============================================================================

class TestPad:
    """Tests for HeaderEditor.pad()."""

    def test_pad_minimum_image(self, blank_image):
        """A 0x150-byte image pads to 32KB filled with the pad value."""
        added = HeaderEditor(blank_image).pad(0xFF)

        assert added == MIN_ROM_SIZE - MIN_IMAGE_SIZE
        assert len(blank_image) == MIN_ROM_SIZE
        data = blank_image.to_bytes()
        assert data[:MIN_IMAGE_SIZE] == bytes(MIN_IMAGE_SIZE)
        assert data[MIN_IMAGE_SIZE:] == bytes([0xFF]) * added

    def test_pad_preserves_prefix(self, make_image):
        """Original bytes keep their offsets."""
        image = make_image(40 * KB, fill=0x11)
        HeaderEditor(image).pad(0x00)

        data = image.to_bytes()
        assert len(data) == 64 * KB
        assert data[:40 * KB] == bytes([0x11]) * (40 * KB)
        assert data[40 * KB:] == bytes(24 * KB)

    def test_pad_is_idempotent(self, blank_image):
        """A second pad is a no-op."""
        editor = HeaderEditor(blank_image)
        editor.pad(0xFF)
        before = blank_image.to_bytes()

        assert editor.pad(0xFF) == 0
        assert blank_image.to_bytes() == before

    def test_pad_exact_size_noop(self, make_image):
        """A 32KB image needs no padding."""
        image = make_image(MIN_ROM_SIZE)
        assert HeaderEditor(image).pad() == 0
        assert len(image) == MIN_ROM_SIZE

    def test_pad_600k(self, make_image):
        """A 600KB image pads to 1024KB."""
        image = make_image(600 * KB)
        HeaderEditor(image).pad()
        assert len(image) == 1024 * KB

    def test_pad_default_value(self, blank_image):
        """The default pad value is 0xFF."""
        HeaderEditor(blank_image).pad()
        assert blank_image[MIN_ROM_SIZE - 1] == 0xFF

    def test_pad_value_must_be_byte(self, blank_image):
        """Pad values outside 0-255 are rejected before resizing."""
        with pytest.raises(ValueError):
            HeaderEditor(blank_image).pad(0x100)
        assert len(blank_image) == MIN_IMAGE_SIZE


# =============================================================================
# Truncation
# =============================================================================

class TestTruncate:
    """Tests for HeaderEditor.truncate()."""

    def test_truncate_600k(self, make_image):
        """A 600KB image truncates to 512KB."""
        image = make_image(600 * KB)
        removed = HeaderEditor(image).truncate()
        assert removed == 88 * KB
        assert len(image) == 512 * KB

    def test_truncate_keeps_leading_bytes(self, make_image):
        """Only the leading bytes survive."""
        image = make_image(48 * KB, fill=0x22)
        image[0x100] = 0x00
        HeaderEditor(image).truncate()

        assert len(image) == MIN_ROM_SIZE
        assert image[0x100] == 0x00
        assert image[MIN_ROM_SIZE - 1] == 0x22

    def test_truncate_over_8mb(self, make_image):
        """Images larger than 8MB are cut to 8MB."""
        image = make_image(9 * MB)
        HeaderEditor(image).truncate()
        assert len(image) == 8 * MB

    def test_truncate_exact_size_noop(self, make_image):
        """A power-of-two image is left unchanged."""
        image = make_image(64 * KB)
        assert HeaderEditor(image).truncate() == 0
        assert len(image) == 64 * KB

    def test_truncate_below_header_size_refused(self, blank_image):
        """Images of 336-511 bytes are not cut below the header."""
        assert HeaderEditor(blank_image).truncate() == 0
        assert len(blank_image) == MIN_IMAGE_SIZE

    def test_truncate_below_32k(self, make_image):
        """Small images truncate to smaller powers of two."""
        image = make_image(0x5000)
        HeaderEditor(image).truncate()
        assert len(image) == 0x4000


# =============================================================================
# Header Fields
# =============================================================================

class TestSetTitle:
    """Tests for HeaderEditor.set_title()."""

    def test_title_written(self, blank_image):
        """Title bytes are written at 0x134."""
        HeaderEditor(blank_image).set_title("TETRIS")
        assert blank_image.read(HeaderOffset.TITLE, 6) == b"TETRIS"

    def test_title_not_padded(self, make_image):
        """Bytes after the title are left as they were."""
        image = make_image(MIN_IMAGE_SIZE, fill=0xFF)
        HeaderEditor(image).set_title("HELLO")
        assert image[HeaderOffset.TITLE + 5] == 0xFF

    def test_full_width_title(self, blank_image):
        """A 16-character title fills 0x134-0x143."""
        HeaderEditor(blank_image).set_title("ABCDEFGHIJKLMNOP")
        assert blank_image[HeaderOffset.CGB_FLAG] == ord("P")
        assert blank_image[HeaderOffset.NEW_LICENSEE_CODE] == 0

    def test_title_too_long(self, blank_image):
        """Titles longer than the title area are refused untouched."""
        with pytest.raises(TitleError):
            HeaderEditor(blank_image).set_title("ABCDEFGHIJKLMNOPQ")
        assert blank_image[HeaderOffset.TITLE] == 0

    def test_title_empty(self, blank_image):
        """An empty title is refused."""
        with pytest.raises(TitleError):
            HeaderEditor(blank_image).set_title("")

    def test_title_non_ascii(self, blank_image):
        """Non-ASCII titles are refused."""
        with pytest.raises(TitleError):
            HeaderEditor(blank_image).set_title("POKÉMON")


class TestFieldSetters:
    """Tests for the single-byte field setters."""

    def test_gbc_compatible(self, blank_image):
        HeaderEditor(blank_image).set_gbc_compatible()
        assert blank_image[HeaderOffset.CGB_FLAG] == 0x80

    def test_gbc_only(self, blank_image):
        HeaderEditor(blank_image).set_gbc_only()
        assert blank_image[HeaderOffset.CGB_FLAG] == 0xC0

    def test_mbc_type(self, blank_image):
        """set_mbc_type() writes the byte and returns its label."""
        label = HeaderEditor(blank_image).set_mbc_type(0x1B)
        assert blank_image[HeaderOffset.CARTRIDGE_TYPE] == 0x1B
        assert label == "MBC5 -- ROM & RAM & Battery"

    def test_mbc_type_unknown(self, blank_image):
        """Unmapped types are still written, labelled Unknown."""
        label = HeaderEditor(blank_image).set_mbc_type(0x42)
        assert blank_image[HeaderOffset.CARTRIDGE_TYPE] == 0x42
        assert label == "Unknown"

    def test_mbc_type_must_be_byte(self, blank_image):
        with pytest.raises(ValueError):
            HeaderEditor(blank_image).set_mbc_type(256)

    def test_ram_size(self, blank_image):
        HeaderEditor(blank_image).set_ram_size(0x03)
        assert blank_image[HeaderOffset.RAM_SIZE] == 0x03


class TestPrecondition:
    """Tests for the header-size precondition."""

    def test_operations_refuse_short_image(self, blank_image):
        """Every operation checks the image still holds a header."""
        # Bypass the constructor check to simulate a broken invariant
        blank_image._data = bytearray(0x100)
        editor = HeaderEditor(blank_image)

        for operation in (
            editor.pad,
            editor.truncate,
            editor.set_gbc_compatible,
            editor.set_gbc_only,
            lambda: editor.set_title("X"),
            lambda: editor.set_mbc_type(1),
            lambda: editor.set_ram_size(1),
        ):
            with pytest.raises(ImageTooSmallError):
                operation()

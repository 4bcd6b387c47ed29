"""
gbfix - Game Boy ROM Header Fixer
=================================

This package patches and validates the cartridge header of Game Boy ROM
images. It is meant for the last step of a homebrew build: after the
assembler and linker have produced a raw image, gbfix pads it to a
valid size, fills in the header fields and repairs the checksums so
the image boots on real hardware and emulators.

Main Components
---------------
- **rom**: Image buffer, header editor, header validator and pipeline
- **cli**: The `gbfix` command-line tool
- **config**: Defaults and environment overrides

Quick Start
-----------
    >>> from gbfix import FixOptions, fix_file
    >>> fix_file("game.gb", FixOptions(pad=True, title="GAME", validate=True))

Or use the command-line tool:
    $ gbfix fix game.gb --pad --title GAME --validate
    $ gbfix info game.gb

Reference Documentation
-----------------------
- Pan Docs, The Cartridge Header: https://gbdev.io/pandocs/The_Cartridge_Header.html

Version History
---------------
1.0.0 - Initial release with pad/truncate, header editing and validation
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from gbfix.errors import (
    GBFixError,
    ImageError,
    ImageTooSmallError,
    ImageFormatError,
    HeaderFieldError,
    TitleError,
)

from gbfix.rom import (
    ImageBuffer,
    HeaderEditor,
    HeaderValidator,
    ValidationReport,
    FieldChange,
    HeaderInfo,
    HeaderOffset,
    CartridgeType,
    CGBMode,
    FixOptions,
    ProcessResult,
    process_image,
    fix_file,
    read_header,
)

from gbfix.config import ToolConfig

__all__ = [
    "__version__",
    # Errors
    "GBFixError",
    "ImageError",
    "ImageTooSmallError",
    "ImageFormatError",
    "HeaderFieldError",
    "TitleError",
    # ROM handling
    "ImageBuffer",
    "HeaderEditor",
    "HeaderValidator",
    "ValidationReport",
    "FieldChange",
    "HeaderInfo",
    "HeaderOffset",
    "CartridgeType",
    "CGBMode",
    "FixOptions",
    "ProcessResult",
    "process_image",
    "fix_file",
    "read_header",
    # Configuration
    "ToolConfig",
]

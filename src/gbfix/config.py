"""
gbfix Configuration
===================

Tool defaults and their overrides. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI, always win)

Environment Variables
---------------------
    GBFIX_PAD_VALUE   Default pad byte (decimal, 0x.. or $..; default 0xFF)
    GBFIX_DRY_RUN     Never write images back (1/true/yes/on)
    GBFIX_VERBOSE     Debug logging (1/true/yes/on)
"""

from dataclasses import dataclass
from typing import Mapping, Optional
import logging
import os

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


def parse_byte(text: str) -> int:
    """
    Parse a byte value written as decimal, 0x-prefixed or $-prefixed hex.

    Args:
        text: Value text, e.g. "255", "0xFF", "$ff"

    Returns:
        The byte value

    Raises:
        ValueError: If the text is not a number in the range 0-255

    Example:
        >>> parse_byte("0x1B")
        27
        >>> parse_byte("$FF")
        255
    """
    text = text.strip()
    if text.startswith("$"):
        value = int(text[1:], 16)
    elif text.lower().startswith("0x"):
        value = int(text[2:], 16)
    else:
        value = int(text, 10)

    if not 0 <= value <= 0xFF:
        raise ValueError(f"{text} is not a byte value (0-255)")
    return value


@dataclass
class ToolConfig:
    """
    Configuration for gbfix runs.

    Attributes:
        default_pad_value: Fill byte used by --pad when --pad-value is not given
        dry_run: Process images without writing them back
        verbose: Enable debug logging
    """
    default_pad_value: int = 0xFF
    dry_run: bool = False
    verbose: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ToolConfig":
        """
        Create ToolConfig from environment variables.

        Invalid values are ignored (with a warning) and the default kept.

        Args:
            environ: Mapping to read instead of os.environ (for tests)

        Returns:
            ToolConfig with values from the environment
        """
        if environ is None:
            environ = os.environ
        config = cls()

        if pad_value := environ.get("GBFIX_PAD_VALUE"):
            try:
                config.default_pad_value = parse_byte(pad_value)
            except ValueError:
                logger.warning(f"Ignoring invalid GBFIX_PAD_VALUE: {pad_value!r}")

        if dry_run := environ.get("GBFIX_DRY_RUN"):
            config.dry_run = dry_run.strip().lower() in _TRUE_VALUES

        if verbose := environ.get("GBFIX_VERBOSE"):
            config.verbose = verbose.strip().lower() in _TRUE_VALUES

        return config

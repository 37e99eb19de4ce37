"""
SREC Image Configuration
========================

Settings that change how an image is materialised and patched.
Configuration can come from:
- Default values (defined here)
- Environment variables (ImageConfig.from_env)
- Command-line options (the srecimg CLI builds an ImageConfig)

The defaults are the most permissive settings:
gaps are filled with 0xFF, the upper end of a multi-byte patch is not
checked against the end address, and record checksums are stored but
not verified.
"""

from dataclasses import dataclass
import logging
import os


logger = logging.getLogger(__name__)

# Byte used for addresses never written by any data record
DEFAULT_FILL_BYTE = 0xFF

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class ImageConfig:
    """
    Configuration for image assembly and patching.

    Attributes:
        fill_byte: Value for bytes not covered by any data record
            (default: 0xFF)
        strict_bounds: If True, Image.set_bytes() also rejects writes whose
            last byte lies above end_address. If False (default), only the
            start address is range-checked.
        verify_checksums: If True, SRecFile runs the checksum verification
            pass after parsing (default: False, checksums are stored only)
    """

    fill_byte: int = DEFAULT_FILL_BYTE
    strict_bounds: bool = False
    verify_checksums: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.fill_byte <= 0xFF:
            raise ValueError(f"fill byte must be 0x00-0xFF, got {self.fill_byte!r}")

    @classmethod
    def from_env(cls) -> "ImageConfig":
        """
        Create ImageConfig from environment variables.

        Environment variables (all optional):
            SREC_IMAGE_FILL_BYTE: Fill byte (decimal or 0x-prefixed hex)
            SREC_IMAGE_STRICT_BOUNDS: Enable upper-bound patch checks
            SREC_IMAGE_VERIFY_CHECKSUMS: Verify record checksums on parse

        Invalid values are logged and the default is kept.

        Returns:
            ImageConfig with values from environment variables
        """
        config = cls()

        if fill := os.environ.get("SREC_IMAGE_FILL_BYTE"):
            try:
                value = int(fill, 0)
            except ValueError:
                logger.warning(f"Ignoring invalid SREC_IMAGE_FILL_BYTE: {fill!r}")
            else:
                if 0 <= value <= 0xFF:
                    config.fill_byte = value
                else:
                    logger.warning(f"Ignoring out-of-range SREC_IMAGE_FILL_BYTE: {fill!r}")

        if (strict := _env_flag("SREC_IMAGE_STRICT_BOUNDS")) is not None:
            config.strict_bounds = strict

        if (verify := _env_flag("SREC_IMAGE_VERIFY_CHECKSUMS")) is not None:
            config.verify_checksums = verify

        return config


def _env_flag(name: str) -> bool | None:
    """Read a boolean environment variable, None if unset or invalid."""
    value = os.environ.get(name)
    if not value:
        return None
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning(f"Ignoring invalid {name}: {value!r}")
    return None

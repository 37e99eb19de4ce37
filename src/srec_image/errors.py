"""
SREC Image Error Hierarchy
==========================

This module defines the exception hierarchy for the SREC image toolkit.
All exceptions inherit from SRecError, allowing callers to catch every
decoding or patching failure with a single except clause if desired.

Exception Hierarchy
-------------------
SRecError (base)
├── FormatError - malformed record line (bad tag, bad hex, short line)
│   └── ChecksumError - stored checksum differs (opt-in verification only)
├── OrderingError - data records not ascending, or out-of-range record
├── EmptyInputError - no data records / image has no data
└── RangeError - patch or read address outside the image

Error messages for line-level problems follow this format:
    line 12: error: invalid hex digit in address field
        S1130Z00214601360021470136007EFE09D2190140
    hint: suggestion for fixing (when available)

A failed parse never exposes a partial image: the exception propagates
out of the parse call and nothing is returned.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SRecError(Exception):
    """
    Base exception for all SREC image errors.

    Example:
        try:
            srec = parse_srec_file("firmware.s19")
        except SRecError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Record Format Exceptions
# =============================================================================

class FormatError(SRecError):
    """
    A record line does not follow the S-record layout.

    Raised by the field decoder and record parser for:
        - an unrecognised type tag ("not a valid record type")
        - a non-hex character in a numeric field
        - a line shorter than its declared length implies
        - a declared length too small for the address field and checksum

    Attributes:
        message: The error description
        field: Name of the offending field ("type", "length", "address",
            "data", "checksum"), if known
        line_number: 1-indexed line number in the input, if known
        line: The offending line text, if known
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.field = field
        self.line_number = line_number
        self.line = line
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        text = self.message
        if self.field:
            text = f"{text} ({self.field} field)"

        if self.line_number is not None:
            parts.append(f"line {self.line_number}: error: {text}")
        else:
            parts.append(f"error: {text}")

        if self.line is not None:
            parts.append(f"    {self.line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class ChecksumError(FormatError):
    """
    Stored record checksum does not match the calculated one.

    Only raised by the opt-in verification pass
    (srec_image.srec.checksum.verify_checksums); the core decoder stores
    checksums without checking them.
    """

    def __init__(
        self,
        expected: int,
        actual: int,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"checksum mismatch: stored 0x{actual:02X}, calculated 0x{expected:02X}",
            field="checksum",
            line_number=line_number,
            line=line,
        )


# =============================================================================
# Image Assembly Exceptions
# =============================================================================

class OrderingError(SRecError):
    """
    Data records cannot be laid out as one image.

    Raised when data record addresses are not non-decreasing in file
    order, or when a record falls outside the derived image range during
    assembly.
    """
    pass


class EmptyInputError(SRecError):
    """
    No data to build or patch an image from.

    Raised when the input holds no S1/S2/S3 records, or when patching
    an image that has no bytes.
    """
    pass


class RangeError(SRecError):
    """
    Address outside the image.

    Raised by Image.set_bytes() and Image.read() when the requested
    address does not lie within [start_address, end_address] or the
    access would run past the image buffer.
    """

    def __init__(self, address: int, message: str = ""):
        self.address = address
        if not message:
            message = f"data address 0x{address:08X} is out of srec range"
        super().__init__(message)

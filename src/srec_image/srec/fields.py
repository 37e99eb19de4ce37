"""
Fixed-Width Hex Field Decoding
==============================

FieldDecoder slices one S-record line into its fixed-width fields and
converts each from hex ASCII. All slicing is index based with explicit
bounds checks; every failure raises FormatError naming the field, the
line number and the line text.

Field positions (in characters):

    [0, 2)                  type tag
    [2, 4)                  length (bytes that follow)
    [4, 4 + w)              address, w = 4/6/8 by type
    [4 + w, 2 + 2*length)   data
    [2 + 2*length, +2)      checksum

The checksum is decoded but never verified here.
"""

from typing import Optional

from srec_image.errors import FormatError
from srec_image.srec.records import RecordType

TYPE_FIELD_WIDTH = 2
LENGTH_FIELD_WIDTH = 2
CHECKSUM_FIELD_WIDTH = 2

# Offset of the address field
ADDRESS_OFFSET = TYPE_FIELD_WIDTH + LENGTH_FIELD_WIDTH

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def address_field_width(record_type: RecordType) -> int:
    """
    Width of the address field in hex characters.

    S0/S1/S9 -> 4, S2/S8 -> 6, S3/S7 -> 8.

    Raises:
        FormatError: For S4-S6
    """
    return record_type.address_kind().hex_width


class FieldDecoder:
    """
    Decodes the fields of a single record line.

    Args:
        line: The record text, line terminator already removed
        line_number: 1-indexed position in the input (for error messages)

    Example:
        >>> dec = FieldDecoder("S1130000214601360021470136007EFE09D2190140")
        >>> dec.type_tag()
        <RecordType.S1: 1>
        >>> dec.length(), dec.address(4), dec.checksum()
        (19, 0, 64)
    """

    def __init__(self, line: str, line_number: Optional[int] = None):
        self.line = line
        self.line_number = line_number

    def error(self, message: str, field: str, hint: Optional[str] = None) -> FormatError:
        """Build a FormatError located at this line."""
        return FormatError(
            message, field=field, line_number=self.line_number, line=self.line, hint=hint
        )

    def _hex(self, start: int, end: int, field: str) -> str:
        """Return line[start:end] after checking bounds and hex digits."""
        if end > len(self.line):
            raise self.error(
                f"line too short: need {end} characters, got {len(self.line)}",
                field,
            )
        text = self.line[start:end]
        for pos, char in enumerate(text, start=start):
            if char not in _HEX_DIGITS:
                raise self.error(
                    f"invalid hex digit {char!r} at column {pos + 1}", field
                )
        return text

    # =========================================================================
    # Fields
    # =========================================================================

    def type_tag(self) -> RecordType:
        """Decode characters [0, 2) as a record type."""
        try:
            return RecordType.from_tag(self.line[:TYPE_FIELD_WIDTH])
        except FormatError as e:
            raise self.error(
                e.message, "type", hint="records start with 'S' followed by a digit 0-9"
            ) from None

    def length(self) -> int:
        """Decode the length byte at [2, 4)."""
        return int(self._hex(TYPE_FIELD_WIDTH, ADDRESS_OFFSET, "length"), 16)

    def record_end(self) -> int:
        """
        Character offset just past the checksum, as implied by the length.

        Raises:
            FormatError: If the line is shorter than the length implies
        """
        end = ADDRESS_OFFSET + self.length() * 2
        if end > len(self.line):
            raise self.error(
                f"line too short for declared length: need {end} characters, "
                f"got {len(self.line)}",
                "length",
            )
        return end

    def trailing(self) -> str:
        """Characters after the checksum; the decoder ignores them."""
        return self.line[self.record_end():]

    def address(self, width: int) -> int:
        """Decode the address field of `width` hex characters."""
        return int(self._hex(ADDRESS_OFFSET, ADDRESS_OFFSET + width, "address"), 16)

    def data(self, width: int) -> bytes:
        """
        Decode the data bytes between the address field and the checksum.

        Raises:
            FormatError: If the declared length cannot hold the address
                field and checksum, or a data character is not hex
        """
        start = ADDRESS_OFFSET + width
        end = self.record_end() - CHECKSUM_FIELD_WIDTH
        if end < start:
            raise self.error(
                f"length 0x{self.length():02X} too small for a "
                f"{width // 2}-byte address and checksum",
                "length",
            )
        return bytes.fromhex(self._hex(start, end, "data"))

    def checksum(self) -> int:
        """Decode the 2-character checksum that ends the record."""
        end = self.record_end()
        return int(self._hex(end - CHECKSUM_FIELD_WIDTH, end, "checksum"), 16)

"""
S-Record Type Definitions
=========================

This module defines the data structures for Motorola S-record lines.
Every line of an SREC file decodes to exactly one of these records.

Record Layout
-------------
All records share the same fixed-column, hex-ASCII layout:

    Chars   Field       Description
    -----   -----       -----------
    0-1     Type        'S' followed by a digit 0-9
    2-3     Length      Byte count of address + data + checksum
    4-n     Address     4, 6 or 8 hex chars depending on the type
    n-m     Data        0..252 bytes, 2 hex chars per byte
    last 2  Checksum    Ones' complement of the low byte of the sum of
                        length, address and data bytes

Record Types
------------
- S0: Header (module name, address normally 0000)
- S1: Data, 16-bit address
- S2: Data, 24-bit address
- S3: Data, 32-bit address
- S4: Reserved
- S5: Record count, 16-bit
- S6: Record count, 24-bit
- S7: Start address, 32-bit (terminates S3 blocks)
- S8: Start address, 24-bit (terminates S2 blocks)
- S9: Start address, 16-bit (terminates S1 blocks)

S4-S6 carry nothing the image needs and decode to IgnoredRecord.

Reference
---------
- https://en.wikipedia.org/wiki/SREC_(file_format)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union

from srec_image.errors import FormatError


# =============================================================================
# Enumeration Types
# =============================================================================

class AddressKind(IntEnum):
    """
    Address field width of a data or footer record, in bytes.
    """
    ADDR16 = 2
    ADDR24 = 3
    ADDR32 = 4

    @property
    def width(self) -> int:
        """Address field width in bytes."""
        return int(self)

    @property
    def hex_width(self) -> int:
        """Address field width in hex characters."""
        return int(self) * 2

    def get_description(self) -> str:
        """Get a human-readable description of the address kind."""
        return f"{8 * int(self)}-bit"


class RecordType(IntEnum):
    """
    S-record type identifiers, keyed on the digit after 'S'.
    """
    S0 = 0
    S1 = 1
    S2 = 2
    S3 = 3
    S4 = 4
    S5 = 5
    S6 = 6
    S7 = 7
    S8 = 8
    S9 = 9

    @classmethod
    def from_tag(cls, tag: str) -> "RecordType":
        """
        Convert a 2-character tag such as 'S1' to a RecordType.

        Raises:
            FormatError: If the tag is not 'S' followed by a digit
        """
        if len(tag) != 2 or tag[0] != "S" or tag[1] not in "0123456789":
            raise FormatError(f"{tag!r} is not a valid record type", field="type")
        return cls(int(tag[1]))

    @property
    def tag(self) -> str:
        """The 2-character tag as it appears in the file."""
        return f"S{int(self)}"

    def is_header(self) -> bool:
        return self == RecordType.S0

    def is_data(self) -> bool:
        return self in (RecordType.S1, RecordType.S2, RecordType.S3)

    def is_footer(self) -> bool:
        return self in (RecordType.S7, RecordType.S8, RecordType.S9)

    def is_ignored(self) -> bool:
        return self in (RecordType.S4, RecordType.S5, RecordType.S6)

    def address_kind(self) -> AddressKind:
        """
        Get the address field width for this record type.

        Raises:
            FormatError: For S4-S6, which are never decoded
        """
        try:
            return _ADDRESS_KINDS[self]
        except KeyError:
            raise FormatError(
                f"{self.tag} has no address field to decode", field="type"
            ) from None

    def get_name(self) -> str:
        """Get a human-readable name for this record type."""
        names = {
            RecordType.S0: "Header",
            RecordType.S1: "Data (16-bit)",
            RecordType.S2: "Data (24-bit)",
            RecordType.S3: "Data (32-bit)",
            RecordType.S4: "Reserved",
            RecordType.S5: "Count (16-bit)",
            RecordType.S6: "Count (24-bit)",
            RecordType.S7: "Start Address (32-bit)",
            RecordType.S8: "Start Address (24-bit)",
            RecordType.S9: "Start Address (16-bit)",
        }
        return names[self]


_ADDRESS_KINDS = {
    RecordType.S0: AddressKind.ADDR16,
    RecordType.S1: AddressKind.ADDR16,
    RecordType.S2: AddressKind.ADDR24,
    RecordType.S3: AddressKind.ADDR32,
    RecordType.S7: AddressKind.ADDR32,
    RecordType.S8: AddressKind.ADDR24,
    RecordType.S9: AddressKind.ADDR16,
}


# =============================================================================
# Records
# =============================================================================

def _check_length(
    record_type: RecordType, length: int, data_size: int, line_number: Optional[int]
) -> None:
    """Enforce length == address width + data size + checksum byte."""
    expected = record_type.address_kind().width + data_size + 1
    if length != expected:
        raise FormatError(
            f"length 0x{length:02X} does not match record contents "
            f"(expected 0x{expected:02X})",
            field="length",
            line_number=line_number,
        )


@dataclass(frozen=True)
class HeaderRecord:
    """
    S0 header record.

    Informational only; the data is usually an ASCII module name and is
    not used when assembling the image.
    """
    length: int
    data: bytes
    checksum: int
    address: int = 0
    line_number: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        _check_length(RecordType.S0, self.length, len(self.data), self.line_number)

    @property
    def record_type(self) -> RecordType:
        return RecordType.S0

    @property
    def kind(self) -> AddressKind:
        return AddressKind.ADDR16

    @property
    def name(self) -> str:
        """The header data as text, trailing NULs and spaces removed."""
        return self.data.decode("ascii", errors="replace").rstrip("\x00 ")


@dataclass(frozen=True)
class DataRecord:
    """
    S1/S2/S3 data record: a chunk of payload bytes at an absolute address.

    Invariant: length == kind.width + len(data) + 1
    """
    record_type: RecordType
    length: int
    address: int
    data: bytes
    checksum: int
    line_number: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.record_type.is_data():
            raise FormatError(
                f"{self.record_type.tag} is not a data record", field="type",
                line_number=self.line_number,
            )
        _check_length(self.record_type, self.length, len(self.data), self.line_number)

    @property
    def kind(self) -> AddressKind:
        return self.record_type.address_kind()


@dataclass(frozen=True)
class FooterRecord:
    """
    S7/S8/S9 termination record carrying the execution start address.

    Captured for inspection; not used when assembling the image. Any
    bytes between the address and checksum are kept in `data` (normally
    empty) so the checksum can still be recomputed.
    """
    record_type: RecordType
    length: int
    entry_address: int
    checksum: int
    data: bytes = b""
    line_number: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.record_type.is_footer():
            raise FormatError(
                f"{self.record_type.tag} is not a start address record", field="type",
                line_number=self.line_number,
            )
        _check_length(self.record_type, self.length, len(self.data), self.line_number)

    @property
    def kind(self) -> AddressKind:
        return self.record_type.address_kind()


@dataclass(frozen=True)
class IgnoredRecord:
    """
    S4/S5/S6 record. Recognised, but carries nothing the image needs.
    """
    record_type: RecordType
    line_number: Optional[int] = field(default=None, compare=False)


Record = Union[HeaderRecord, DataRecord, FooterRecord, IgnoredRecord]

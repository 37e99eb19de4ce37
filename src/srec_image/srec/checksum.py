"""
S-Record Checksum Verification
==============================

The core decoder stores each record's checksum without checking it, so
files with stale checksums still load. This module is the
separate, opt-in verification pass for callers that need integrity
checks.

Algorithm
---------
The checksum is the ones' complement of the least significant byte of
the sum of every byte after the type tag and before the checksum:

    checksum = ~(length + address bytes + data bytes) & 0xFF

Example (S111003848656C6C6F20776F726C642E0A0042):
    11 + 00 38 + 48 65 6C ... 0A 00 = 0x4BD, ~0xBD & 0xFF = 0x42

Reference
---------
- https://en.wikipedia.org/wiki/SREC_(file_format)#Checksum_calculation
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from srec_image.errors import ChecksumError
from srec_image.srec.records import DataRecord, FooterRecord, HeaderRecord

ChecksummedRecord = Union[HeaderRecord, DataRecord, FooterRecord]


@dataclass
class ChecksumAnalysis:
    """
    Result of checking one record's checksum.

    Attributes:
        is_valid: True if the stored checksum matches the calculated one
        stored_checksum: The checksum decoded from the record
        calculated_checksum: The checksum computed from the record fields
        line_number: Line the record came from, if known
        message: Human-readable explanation of the analysis
    """
    is_valid: bool
    stored_checksum: int
    calculated_checksum: int
    line_number: Optional[int] = None
    message: str = ""


def _record_address(record: ChecksummedRecord) -> int:
    if isinstance(record, FooterRecord):
        return record.entry_address
    return record.address


def calculate_checksum(record: ChecksummedRecord) -> int:
    """
    Calculate the checksum a record should carry.

    Args:
        record: A decoded header, data or footer record

    Returns:
        The 8-bit checksum value

    Example:
        >>> rec = parse_record("S111003848656C6C6F20776F726C642E0A0042")
        >>> calculate_checksum(rec)
        66
    """
    address_bytes = _record_address(record).to_bytes(record.kind.width, "big")
    total = record.length + sum(address_bytes) + sum(record.data)
    return (total & 0xFF) ^ 0xFF


def analyze_checksum(record: ChecksummedRecord) -> ChecksumAnalysis:
    """Compare a record's stored checksum with the calculated one."""
    calculated = calculate_checksum(record)
    is_valid = calculated == record.checksum
    if is_valid:
        message = f"checksum 0x{calculated:02X} valid"
    else:
        message = (
            f"checksum mismatch: stored 0x{record.checksum:02X}, "
            f"calculated 0x{calculated:02X}"
        )
    return ChecksumAnalysis(
        is_valid=is_valid,
        stored_checksum=record.checksum,
        calculated_checksum=calculated,
        line_number=record.line_number,
        message=message,
    )


def verify_record_checksum(record: ChecksummedRecord) -> bool:
    """Return True if the record's stored checksum is correct."""
    return calculate_checksum(record) == record.checksum


def verify_checksums(records: Iterable[ChecksummedRecord]) -> int:
    """
    Verify every record's checksum, stopping at the first mismatch.

    Args:
        records: Decoded records (IgnoredRecord instances are not accepted;
            filter them out first)

    Returns:
        Number of records checked

    Raises:
        ChecksumError: On the first record whose checksum does not match
    """
    count = 0
    for record in records:
        analysis = analyze_checksum(record)
        if not analysis.is_valid:
            raise ChecksumError(
                expected=analysis.calculated_checksum,
                actual=analysis.stored_checksum,
                line_number=analysis.line_number,
            )
        count += 1
    return count

"""
Flat Image Assembly
===================

This module turns the sparse, address-tagged data records of an SREC
file into one dense byte buffer, and provides the read/patch surface
over that buffer.

Assembly Rules
--------------
Checked after every line has been parsed, first failure wins:

1. At least one data record must exist (EmptyInputError).
2. Record addresses must be non-decreasing in file order (OrderingError).
   Equal consecutive addresses are allowed; records are never re-sorted.

Derived values:
    start_address = address of the first record
    end_address   = address of the last record (by position, not max)
    size          = end_address - start_address + len(last record data)

The buffer is filled with the fill byte (0xFF unless configured) and each
record's data is copied to offset (address - start_address). Gaps keep
the fill byte; overlapping records are not rejected and the later record
wins. The buffer is never resized after allocation.

Usage Examples
--------------
    >>> image = ImageAssembler().assemble(srec.data_records)
    >>> hex(image.start_address), len(image)
    ('0x0', 16)
    >>> image.set_bytes(0x0004, b"\\x00\\x00")
    >>> image.read(0x0004, 2)
    b'\\x00\\x00'
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from srec_image.config import ImageConfig
from srec_image.errors import EmptyInputError, OrderingError, RangeError
from srec_image.srec.records import DataRecord

logger = logging.getLogger(__name__)

MAX_ADDRESS = 0xFFFFFFFF


# =============================================================================
# Image
# =============================================================================

class Image:
    """
    Dense, address-indexed byte buffer built from SREC data records.

    Attributes:
        start_address: Address of the first buffer byte (read-only)
        end_address: Address of the last data record (read-only). The
            buffer extends past it by the last record's data length - 1.

    Upper-bound checking of Image.set_bytes() is controlled by
    ImageConfig.strict_bounds; see that method for details.
    """

    def __init__(
        self,
        start_address: int,
        end_address: int,
        data: Union[bytes, bytearray],
        config: Optional[ImageConfig] = None,
    ):
        self._start_address = start_address
        self._end_address = end_address
        self._data = bytearray(data)
        self._config = config or ImageConfig()

    def __repr__(self) -> str:
        return (
            f"Image(start_address=0x{self._start_address:08X}, "
            f"end_address=0x{self._end_address:08X}, size={len(self._data)})"
        )

    def __len__(self) -> int:
        return len(self._data)

    @property
    def start_address(self) -> int:
        return self._start_address

    @property
    def end_address(self) -> int:
        return self._end_address

    @property
    def last_address(self) -> int:
        """Address of the last byte held by the buffer."""
        return self._start_address + len(self._data) - 1

    @property
    def config(self) -> ImageConfig:
        return self._config

    def contains(self, address: int) -> bool:
        """True if `address` lies within [start_address, end_address]."""
        return self._start_address <= address <= self._end_address

    # =========================================================================
    # Read Surface
    # =========================================================================

    def bytes(self) -> bytes:
        """
        Return the full dense buffer.

        The result is an immutable copy; calling this never changes the
        image, so repeated calls return identical content until the next
        set_bytes().
        """
        return bytes(self._data)

    def read(self, address: int, size: int) -> bytes:
        """
        Read `size` bytes starting at absolute `address`.

        Unlike set_bytes(), reads may cover the whole buffer up to
        last_address.

        Raises:
            RangeError: If any byte of the range is outside the buffer
        """
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        if address < self._start_address or address + size - 1 > self.last_address:
            raise RangeError(
                address,
                f"read of {size} bytes at 0x{address:08X} is outside image "
                f"0x{self._start_address:08X}-0x{self.last_address:08X}",
            )
        offset = address - self._start_address
        return bytes(self._data[offset:offset + size])

    # =========================================================================
    # Patch Surface
    # =========================================================================

    def set_bytes(self, address: int, data: Union[bytes, bytearray, Sequence[int]]) -> None:
        """
        Overwrite len(data) bytes starting at absolute `address`.

        Only the start address is checked against [start_address,
        end_address]. With the default configuration the last written byte
        is NOT checked against end_address, so a write may extend into the
        tail of the last record; set ImageConfig.strict_bounds to reject
        such writes. Either way a write that would run past the buffer is
        rejected before any byte changes, since the buffer is never resized.

        Args:
            address: Absolute unsigned 32-bit address of the first byte
            data: Bytes to write

        Raises:
            EmptyInputError: If the image holds no bytes
            RangeError: If the address is outside the image, or the write
                runs past end_address (strict_bounds) or past the buffer
        """
        if not self._data:
            raise EmptyInputError(
                "byte data is empty; the srec file has no S1-S3 records"
            )
        if not 0 <= address <= MAX_ADDRESS or not self.contains(address):
            raise RangeError(address)

        data = bytes(data)
        last = address + len(data) - 1
        if self._config.strict_bounds and last > self._end_address:
            raise RangeError(
                address,
                f"write of {len(data)} bytes at 0x{address:08X} ends at "
                f"0x{last:08X}, past end address 0x{self._end_address:08X}",
            )
        if last > self.last_address:
            raise RangeError(
                address,
                f"write of {len(data)} bytes at 0x{address:08X} overruns image "
                f"buffer ending at 0x{self.last_address:08X}",
            )

        offset = address - self._start_address
        self._data[offset:offset + len(data)] = data
        logger.debug(f"Patched {len(data)} bytes at 0x{address:08X}")

    def save(self, filepath: Union[str, Path]) -> int:
        """
        Write the flat image to a raw binary file.

        Returns:
            Number of bytes written
        """
        filepath = Path(filepath)
        filepath.write_bytes(self._data)
        return len(self._data)


# =============================================================================
# Assembler
# =============================================================================

class ImageAssembler:
    """
    Validates an ordered list of data records and materialises an Image.

    Args:
        config: Fill byte and patch policy for the produced image
    """

    def __init__(self, config: Optional[ImageConfig] = None):
        self.config = config or ImageConfig()

    def assemble(self, records: Sequence[DataRecord]) -> Image:
        """
        Build an Image from data records in file order.

        Raises:
            EmptyInputError: If `records` is empty
            OrderingError: If addresses are not non-decreasing, or a record
                falls outside the derived range
        """
        if not records:
            raise EmptyInputError("no data records")

        self._check_ascending(records)

        first = records[0]
        last = records[-1]
        start_address = first.address
        end_address = last.address
        size = end_address - start_address + len(last.data)

        logger.debug(
            f"Assembling {len(records)} records: 0x{start_address:08X}-"
            f"0x{end_address:08X}, {size} bytes"
        )

        buffer = bytearray([self.config.fill_byte]) * size
        for record in records:
            if not start_address <= record.address <= end_address:
                raise OrderingError(
                    f"data address 0x{record.address:08X} (line {record.line_number}) "
                    f"is outside image range 0x{start_address:08X}-0x{end_address:08X}"
                )
            offset = record.address - start_address
            if offset + len(record.data) > size:
                raise OrderingError(
                    f"data record at 0x{record.address:08X} (line {record.line_number}) "
                    f"runs past the end of the image"
                )
            buffer[offset:offset + len(record.data)] = record.data

        return Image(start_address, end_address, buffer, self.config)

    @staticmethod
    def _check_ascending(records: Sequence[DataRecord]) -> None:
        previous = records[0]
        for record in records[1:]:
            if record.address < previous.address:
                raise OrderingError(
                    f"addresses not ascending: 0x{record.address:08X} "
                    f"(line {record.line_number}) follows 0x{previous.address:08X} "
                    f"(line {previous.line_number})"
                )
            previous = record


def assemble_image(
    records: Sequence[DataRecord], config: Optional[ImageConfig] = None
) -> Image:
    """Convenience wrapper around ImageAssembler.assemble()."""
    return ImageAssembler(config).assemble(records)

"""
S-Record Parser
===============

This module reads Motorola S-record text and produces the decoded
records and the flat image built from them.

RecordParser
------------
A stateless, line-at-a-time classifier. Each line maps to exactly one
variant:

    S0          -> HeaderRecord
    S1, S2, S3  -> DataRecord
    S7, S8, S9  -> FooterRecord
    S4, S5, S6  -> IgnoredRecord
    other       -> FormatError ("not a valid record type")

SRecFile
--------
The result of one parse pass over an input: the optional header and
footer, the data records in file order and the assembled Image. The
first error anywhere aborts the whole parse; no partial SRecFile is
ever returned.

Usage Examples
--------------
Reading a file:
    >>> from srec_image.srec import SRecFile
    >>> srec = SRecFile.from_file("firmware.s19")
    >>> print(f"Image: 0x{srec.image.start_address:08X}, {len(srec.image)} bytes")

Patching and saving a flat binary:
    >>> srec.image.set_bytes(0x8000, b"\\x01\\x02")
    >>> srec.image.save("firmware.bin")

Decoding a single line:
    >>> from srec_image.srec import parse_record
    >>> parse_record("S9030000FC")
    FooterRecord(record_type=<RecordType.S9: 9>, length=3, entry_address=0, checksum=252, data=b'', line_number=None)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union
import logging

from srec_image.config import ImageConfig
from srec_image.errors import SRecError
from srec_image.srec.checksum import verify_checksums
from srec_image.srec.fields import FieldDecoder, address_field_width
from srec_image.srec.image import Image, ImageAssembler
from srec_image.srec.records import (
    DataRecord,
    FooterRecord,
    HeaderRecord,
    IgnoredRecord,
    Record,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Record Parser
# =============================================================================

class RecordParser:
    """
    Classifies and decodes S-record lines.

    The parser holds no state between lines; parse_line() can be called
    on any line in isolation.
    """

    def parse_line(self, line: str, line_number: Optional[int] = None) -> Record:
        """
        Decode one record line.

        Args:
            line: The record text without its line terminator
            line_number: 1-indexed position in the input (for errors)

        Returns:
            A HeaderRecord, DataRecord, FooterRecord or IgnoredRecord

        Raises:
            FormatError: If the line is not a valid record
        """
        decoder = FieldDecoder(line, line_number)
        record_type = decoder.type_tag()

        if record_type.is_ignored():
            logger.debug(f"Line {line_number}: skipping {record_type.get_name()} record")
            return IgnoredRecord(record_type=record_type, line_number=line_number)

        width = address_field_width(record_type)
        length = decoder.length()
        address = decoder.address(width)
        data = decoder.data(width)
        checksum = decoder.checksum()

        if trailing := decoder.trailing():
            logger.warning(
                f"Line {line_number}: ignoring {len(trailing)} characters after checksum"
            )

        if record_type.is_header():
            return HeaderRecord(
                length=length,
                address=address,
                data=data,
                checksum=checksum,
                line_number=line_number,
            )

        if record_type.is_data():
            return DataRecord(
                record_type=record_type,
                length=length,
                address=address,
                data=data,
                checksum=checksum,
                line_number=line_number,
            )

        # S7/S8/S9 normally carry no data; extra bytes are kept, not used
        if data:
            logger.warning(
                f"Line {line_number}: {len(data)} unexpected data bytes in "
                f"{record_type.get_name()} record"
            )
        return FooterRecord(
            record_type=record_type,
            length=length,
            entry_address=address,
            checksum=checksum,
            data=data,
            line_number=line_number,
        )

    def iter_records(self, lines: Iterable[str]) -> Iterator[Record]:
        """
        Decode lines in order, yielding one record per non-empty line.

        Only the line terminator is removed from each line. Empty lines are
        skipped.

        Raises:
            FormatError: On the first invalid line
        """
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            if not line:
                continue
            yield self.parse_line(line, line_number)


def parse_record(line: str, line_number: Optional[int] = None) -> Record:
    """Decode a single record line. See RecordParser.parse_line()."""
    return RecordParser().parse_line(line, line_number)


# =============================================================================
# Parsed File
# =============================================================================

@dataclass
class SRecFile:
    """
    Decoded contents of one SREC input.

    Attributes:
        image: The flat image assembled from the data records
        data_records: Data records in file order
        header: The first S0 record, if any
        footer: The first S7/S8/S9 record, if any
        ignored_count: Number of S4/S5/S6 records skipped

    Example:
        >>> srec = SRecFile.from_file("firmware.s19")
        >>> print(srec.header.name if srec.header else "(no header)")
        >>> data = srec.image.bytes()
    """
    image: Image
    data_records: list[DataRecord] = field(default_factory=list)
    header: Optional[HeaderRecord] = None
    footer: Optional[FooterRecord] = None
    ignored_count: int = 0

    @classmethod
    def from_lines(
        cls, lines: Iterable[str], config: Optional[ImageConfig] = None
    ) -> "SRecFile":
        """
        Parse SREC lines and assemble the image.

        The iterable is consumed exactly once, in order.

        Args:
            lines: Record lines, with or without line terminators
            config: Image settings (default: ImageConfig())

        Returns:
            An SRecFile with decoded records and the assembled image

        Raises:
            FormatError: On the first malformed line
            EmptyInputError: If there are no S1/S2/S3 records
            OrderingError: If data record addresses are not ascending
            ChecksumError: Only when config.verify_checksums is set
        """
        config = config or ImageConfig()
        header: Optional[HeaderRecord] = None
        footer: Optional[FooterRecord] = None
        data_records: list[DataRecord] = []
        ignored_count = 0

        try:
            for record in RecordParser().iter_records(lines):
                if isinstance(record, DataRecord):
                    data_records.append(record)
                elif isinstance(record, HeaderRecord):
                    if header is None:
                        header = record
                    else:
                        logger.warning(
                            f"Line {record.line_number}: extra header record ignored"
                        )
                elif isinstance(record, FooterRecord):
                    if footer is None:
                        footer = record
                    else:
                        logger.warning(
                            f"Line {record.line_number}: extra start address record ignored"
                        )
                else:
                    ignored_count += 1

            image = ImageAssembler(config).assemble(data_records)
        except SRecError as e:
            logger.error(f"Failed to parse SREC: {e}")
            raise

        srec = cls(
            image=image,
            data_records=data_records,
            header=header,
            footer=footer,
            ignored_count=ignored_count,
        )

        if config.verify_checksums:
            checked = srec.verify_checksums()
            logger.debug(f"Verified {checked} record checksums")

        logger.debug(
            f"Parsed {len(data_records)} data records, {ignored_count} ignored"
        )
        return srec

    @classmethod
    def from_string(cls, text: str, config: Optional[ImageConfig] = None) -> "SRecFile":
        """Parse SREC text held in memory."""
        return cls.from_lines(text.splitlines(), config)

    @classmethod
    def from_file(
        cls, filepath: Union[str, Path], config: Optional[ImageConfig] = None
    ) -> "SRecFile":
        """
        Parse an SREC file from disk.

        Raises:
            FileNotFoundError: If the file doesn't exist
            SRecError: If the file cannot be decoded
        """
        filepath = Path(filepath)
        with filepath.open("r", encoding="ascii", errors="replace", newline="") as f:
            return cls.from_lines(f, config)

    # =========================================================================
    # Public Query Methods
    # =========================================================================

    def get_bytes(self, size: int) -> bytes:
        """
        Concatenate data record payloads in file order, ignoring addresses.

        Args:
            size: Maximum number of bytes to return

        Returns:
            Up to `size` payload bytes (fewer if the records hold less)
        """
        result = bytearray()
        for record in self.data_records:
            result.extend(record.data)
            if len(result) >= size:
                break
        return bytes(result[:size])

    def verify_checksums(self) -> int:
        """
        Run the opt-in checksum pass over header, data and footer records.

        Returns:
            Number of records checked

        Raises:
            ChecksumError: On the first mismatch
        """
        records: list[Union[HeaderRecord, DataRecord, FooterRecord]] = []
        if self.header is not None:
            records.append(self.header)
        records.extend(self.data_records)
        if self.footer is not None:
            records.append(self.footer)
        # Verify in file order
        records.sort(key=lambda r: r.line_number or 0)
        return verify_checksums(records)

    def get_info(self) -> dict:
        """
        Get summary information about the file.

        Returns:
            Dictionary with header, record and image information
        """
        kinds = sorted({r.record_type.tag for r in self.data_records})
        return {
            "header": self.header.name if self.header else None,
            "data_records": len(self.data_records),
            "record_types": kinds,
            "ignored_records": self.ignored_count,
            "start_address": f"0x{self.image.start_address:08X}",
            "end_address": f"0x{self.image.end_address:08X}",
            "image_size": len(self.image),
            "payload_bytes": sum(len(r.data) for r in self.data_records),
            "entry_address": (
                f"0x{self.footer.entry_address:08X}" if self.footer else None
            ),
        }


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_srec(lines: Iterable[str], config: Optional[ImageConfig] = None) -> SRecFile:
    """Parse SREC lines. See SRecFile.from_lines()."""
    return SRecFile.from_lines(lines, config)


def parse_srec_string(text: str, config: Optional[ImageConfig] = None) -> SRecFile:
    """Parse SREC text held in memory."""
    return SRecFile.from_string(text, config)


def parse_srec_file(
    filepath: Union[str, Path], config: Optional[ImageConfig] = None
) -> SRecFile:
    """
    Parse an SREC file from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        SRecError: If the file cannot be decoded
    """
    return SRecFile.from_file(filepath, config)

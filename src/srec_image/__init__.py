"""
SREC Image - Motorola S-Record Decoder and Image Patcher
========================================================

This package decodes Motorola S-record (SREC) firmware files into a
single flat byte image addressable by absolute memory address, and
supports patching that image before writing it out as a raw binary.

Main Components
---------------
- **srec**: Record decoding, image assembly and checksum verification
- **config**: Fill byte and patch bounds settings (ImageConfig)
- **errors**: Exception hierarchy rooted at SRecError
- **cli**: The srecimg command-line tool

Quick Start
-----------
Load and inspect a file:
    >>> from srec_image import SRecFile
    >>> srec = SRecFile.from_file("firmware.s19")
    >>> print(f"0x{srec.image.start_address:08X}-0x{srec.image.end_address:08X}")

Patch and export:
    >>> srec.image.set_bytes(0x8010, b"\\x00\\x00")
    >>> srec.image.save("firmware.bin")

Or use the command-line tool:
    $ srecimg info firmware.s19
    $ srecimg patch firmware.s19 0x8010 0000 -o firmware.bin

Scope
-----
Decoding and in-memory patching only; images are never re-encoded to
SREC text.

Version History
---------------
1.0.0 - Initial release with decoder, image patching and srecimg CLI
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from srec_image.config import ImageConfig
from srec_image.errors import (
    SRecError,
    FormatError,
    ChecksumError,
    OrderingError,
    EmptyInputError,
    RangeError,
)
from srec_image.srec import (
    AddressKind,
    RecordType,
    HeaderRecord,
    DataRecord,
    FooterRecord,
    IgnoredRecord,
    FieldDecoder,
    RecordParser,
    Image,
    ImageAssembler,
    SRecFile,
    parse_record,
    parse_srec,
    parse_srec_string,
    parse_srec_file,
    verify_checksums,
)

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "ImageConfig",
    # Exception hierarchy
    "SRecError",
    "FormatError",
    "ChecksumError",
    "OrderingError",
    "EmptyInputError",
    "RangeError",
    # Records
    "AddressKind",
    "RecordType",
    "HeaderRecord",
    "DataRecord",
    "FooterRecord",
    "IgnoredRecord",
    # Decoding and assembly
    "FieldDecoder",
    "RecordParser",
    "Image",
    "ImageAssembler",
    "SRecFile",
    "parse_record",
    "parse_srec",
    "parse_srec_string",
    "parse_srec_file",
    "verify_checksums",
]

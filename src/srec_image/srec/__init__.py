"""
Motorola S-Record Decoding
==========================

This module decodes Motorola S-record (SREC) files into a flat byte
image addressable by absolute memory address, and lets callers patch
that image in place.

This module provides:
- **FieldDecoder**: Fixed-width hex field slicing for one record line
- **RecordParser**: Line classifier producing header/data/footer records
- **ImageAssembler**: Ordering checks and dense buffer materialisation
- **Image**: The flat, patchable byte buffer
- **SRecFile**: Records and image from one parse pass
- **Checksum utilities**: Opt-in record checksum verification

Quick Start
-----------
    >>> from srec_image.srec import SRecFile
    >>> srec = SRecFile.from_file("firmware.s19")
    >>> image = srec.image
    >>> image.set_bytes(image.start_address, b"\\xEA")
    >>> image.save("firmware.bin")

Checksums
---------
Checksums are decoded and stored but not verified while parsing. Call
SRecFile.verify_checksums() (or set ImageConfig.verify_checksums) to
check them.
"""

# =============================================================================
# Public API Exports
# =============================================================================

from srec_image.srec.records import (
    AddressKind,
    RecordType,
    HeaderRecord,
    DataRecord,
    FooterRecord,
    IgnoredRecord,
    Record,
)

from srec_image.srec.fields import (
    FieldDecoder,
    address_field_width,
)

from srec_image.srec.checksum import (
    ChecksumAnalysis,
    calculate_checksum,
    analyze_checksum,
    verify_record_checksum,
    verify_checksums,
)

from srec_image.srec.image import (
    Image,
    ImageAssembler,
    assemble_image,
)

from srec_image.srec.parser import (
    RecordParser,
    SRecFile,
    parse_record,
    parse_srec,
    parse_srec_string,
    parse_srec_file,
)

__all__ = [
    # Records
    "AddressKind",
    "RecordType",
    "HeaderRecord",
    "DataRecord",
    "FooterRecord",
    "IgnoredRecord",
    "Record",
    # Field decoding
    "FieldDecoder",
    "address_field_width",
    # Checksum
    "ChecksumAnalysis",
    "calculate_checksum",
    "analyze_checksum",
    "verify_record_checksum",
    "verify_checksums",
    # Image
    "Image",
    "ImageAssembler",
    "assemble_image",
    # Parser
    "RecordParser",
    "SRecFile",
    "parse_record",
    "parse_srec",
    "parse_srec_string",
    "parse_srec_file",
]

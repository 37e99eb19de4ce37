"""
Shared fixtures for the SREC image tests.
"""

from pathlib import Path
from typing import Callable

import pytest


# Address field width in bytes for each record type that has one
ADDRESS_WIDTHS = {
    "S0": 2, "S1": 2, "S2": 3, "S3": 4,
    "S5": 2, "S6": 3,
    "S7": 4, "S8": 3, "S9": 2,
}

# Example file from the SREC format description: header "hello",
# three contiguous S1 records at 0x0000, 0x001C, 0x0038, an S5 count
# record and an S9 start address record. All checksums are valid.
SAMPLE_SREC = """\
S00F000068656C6C6F202020202000003C
S11F00007C0802A6900100049421FFF07C6C1B787C8C23783C6000003863000026
S11F001C4BFFFFE5398000007D83637880010014382100107C0803A64E800020E9
S111003848656C6C6F20776F726C642E0A0042
S5030003F9
S9030000FC
"""


def make_srec_line(record_type: str, address: int, data: bytes = b"") -> str:
    """
    Build a record line with a correct length and checksum.

    Example:
        >>> make_srec_line("S9", 0)
        'S9030000FC'
    """
    width = ADDRESS_WIDTHS[record_type]
    body = bytes([width + len(data) + 1]) + address.to_bytes(width, "big") + data
    checksum = (sum(body) & 0xFF) ^ 0xFF
    return f"{record_type}{body.hex().upper()}{checksum:02X}"


@pytest.fixture
def srec_line() -> Callable[..., str]:
    """Factory for valid record lines."""
    return make_srec_line


@pytest.fixture
def sample_text() -> str:
    """The sample SREC file as text."""
    return SAMPLE_SREC


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """The sample SREC file written to disk."""
    path = tmp_path / "hello.s19"
    path.write_text(SAMPLE_SREC)
    return path


@pytest.fixture
def sample_payload() -> bytes:
    """The bytes of all data records in the sample file, in order."""
    return bytes.fromhex(
        "7C0802A6900100049421FFF07C6C1B787C8C23783C60000038630000"
        "4BFFFFE5398000007D83637880010014382100107C0803A64E800020"
        "48656C6C6F20776F726C642E0A00"
    )

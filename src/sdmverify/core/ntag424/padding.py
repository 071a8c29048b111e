"""Block padding helpers for SDM (zero padding and file-data filler)."""

from __future__ import annotations

BLOCK_SIZE = 16

# NDEF templates reserve the SDMENCFileData region with ASCII 'x'
FILLER = 0x78


def pad_zero(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Append 0x00 bytes up to the next *block_size* boundary.

    Data that is already block-aligned (including empty data) is returned
    unchanged.
    """
    return data + b"\x00" * (-len(data) % block_size)


def strip_filler(data: bytes, filler: int = FILLER) -> bytes:
    """Remove the trailing run of *filler* bytes.

    Only the tail of the decrypted region is treated as placeholder: the
    provisioner writes the payload from the start of the region and leaves
    the rest as template filler. Filler bytes followed by any other byte
    are payload and are kept.
    """
    end = len(data)
    while end > 0 and data[end - 1] == filler:
        end -= 1
    return data[:end]

"""PICCData decryption and flag parsing (encrypted UID/counter mirror)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sdmverify.core.base.logging import TRACE
from sdmverify.core.ntag424.aes import aes_cbc_decrypt
from sdmverify.core.ntag424.messages import ErrorKind, SdmError
from sdmverify.core.ntag424.padding import BLOCK_SIZE

lg = logging.getLogger(__name__)

# PICCDataTag bits
UID_MIRROR = 0x80
CTR_MIRROR = 0x40
UID_LENGTH_MASK = 0x0F

UID_SIZE = 7
CTR_SIZE = 3
CTR_MAX = (1 << 24) - 1

_ZERO_IV = b"\x00" * BLOCK_SIZE


@dataclass(frozen=True)
class TagFlags:
    """Decoded PICCDataTag byte."""

    uid_mirrored: bool
    counter_mirrored: bool
    uid_length: int

    @classmethod
    def from_byte(cls, tag: int) -> TagFlags:
        return cls(
            uid_mirrored=bool(tag & UID_MIRROR),
            counter_mirrored=bool(tag & CTR_MIRROR),
            uid_length=tag & UID_LENGTH_MASK,
        )


@dataclass
class PiccData:
    """Decrypted PICCData: flags, UID and raw read counter bytes."""

    flags: TagFlags
    uid: bytes
    counter_bytes: bytes | None = None


def decode_counter(counter_bytes: bytes) -> int:
    """SDMReadCtr is transmitted as 3 bytes, least significant first."""
    return int.from_bytes(counter_bytes, "little")


def encode_counter(counter: int) -> bytes:
    if not 0 <= counter <= CTR_MAX:
        raise SdmError(ErrorKind.MALFORMED_INPUT)
    return counter.to_bytes(CTR_SIZE, "little")


def parse_picc_plaintext(plain: bytes, require_counter: bool = True) -> PiccData:
    """Parse a decrypted PICCData block.

    Raises SdmError for a UID length other than 7, a cleared UID mirror
    bit, or a cleared counter mirror bit when *require_counter* is set.
    """
    flags = TagFlags.from_byte(plain[0])
    lg.log(TRACE, "PICCDataTag %02X", plain[0])

    if flags.uid_length != UID_SIZE:
        raise SdmError(ErrorKind.UNSUPPORTED_UID_LENGTH)
    if not flags.uid_mirrored:
        raise SdmError(ErrorKind.MISSING_UID_MIRROR)

    offset = 1 + flags.uid_length
    uid = plain[1:offset]

    counter_bytes = None
    if flags.counter_mirrored:
        counter_bytes = plain[offset : offset + CTR_SIZE]
    elif require_counter:
        raise SdmError(ErrorKind.MISSING_COUNTER_MIRROR)

    return PiccData(flags=flags, uid=uid, counter_bytes=counter_bytes)


def decrypt_picc_data(
    meta_key: bytes, picc_data: bytes, require_counter: bool = True
) -> PiccData:
    """Decrypt the 16-byte PICCData block (AES-CBC, zero IV) and parse it."""
    if len(picc_data) != BLOCK_SIZE:
        raise SdmError(ErrorKind.MALFORMED_INPUT)
    plain = aes_cbc_decrypt(meta_key, _ZERO_IV, picc_data)
    return parse_picc_plaintext(plain, require_counter)

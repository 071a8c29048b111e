"""Tag-side SUN message construction, used to produce valid test inputs."""

from dataclasses import dataclass

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.cmac import CMAC

ZERO_KEY = bytes(16)
META_KEY = bytes.fromhex("8A1D3F7C2B9E4D6051A7C3E8F0B2D4A6")
FILE_KEY = bytes.fromhex("5ACE7E50AB65D5D51FD5BF5A16B8205B")
UID = bytes.fromhex("04958CAA5C5E80")

# AN12196 example: all-zero keys
VECTOR_PICC_DATA = bytes.fromhex("EF963FF7828658A599F3041510671E88")
VECTOR_MAC = bytes.fromhex("94EED9EE65337086")
VECTOR_UID = bytes.fromhex("04DE5F1EACC040")
VECTOR_COUNTER = 61


def _pad(data: bytes) -> bytes:
    return data + b"\x00" * (-len(data) % 16)


def _cmac(key: bytes, data: bytes) -> bytes:
    c = CMAC(algorithms.AES(key))
    c.update(data)
    return c.finalize()


def _encrypt(key: bytes, mode, data: bytes) -> bytes:
    enc = Cipher(algorithms.AES(key), mode).encryptor()
    return enc.update(data) + enc.finalize()


@dataclass
class TagOutput:
    picc_data: bytes
    mac: bytes
    enc_file_data: bytes


def build_sun(
    meta_key: bytes = META_KEY,
    file_key: bytes = FILE_KEY,
    uid: bytes = UID,
    counter: int = 1,
    file_data: bytes = b"",
    tag: int = 0xC7,
    mac_param: str = "sdmmac",
) -> TagOutput:
    """Build what the tag would mirror into the URL for the given state."""
    ctr = counter.to_bytes(3, "little")
    block = bytes([tag]) + uid + ctr
    block += bytes.fromhex("A55A3CC3E1") + b"\x00" * (16 - len(block) - 5)
    picc_data = _encrypt(meta_key, modes.CBC(bytes(16)), block[:16])

    mirrored = uid + (ctr if tag & 0x40 else b"")
    enc_file_data = b""
    if file_data:
        ses_enc = _cmac(file_key, _pad(bytes.fromhex("C33C00010080") + mirrored))
        iv = _encrypt(ses_enc, modes.ECB(), (ctr if tag & 0x40 else b"").ljust(16, b"\x00"))
        enc_file_data = _encrypt(ses_enc, modes.CBC(iv), file_data)

    ses_mac = _cmac(file_key, _pad(bytes.fromhex("3CC300010080") + mirrored))
    trailing = b""
    if enc_file_data:
        trailing = (enc_file_data.hex().upper() + f"&{mac_param}=").encode()
    mac = _cmac(ses_mac, trailing)[1::2]
    return TagOutput(picc_data, mac, enc_file_data)


@pytest.fixture
def make_sun():
    return build_sun

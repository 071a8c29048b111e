"""SDMMAC computation (NTAG 424 DNA, AN12196 section 3.3)."""

from __future__ import annotations

import enum
import logging

from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.cmac import CMAC

from sdmverify.core.base.logging import TRACE
from sdmverify.core.ntag424.padding import pad_zero

lg = logging.getLogger(__name__)

KEY_SIZE = 16
MAC_SIZE = 8
DEFAULT_MAC_PARAM = "sdmmac"

# Session vector prefixes: SV2 feeds the MAC, SV1 the file encryption key
SV2 = bytes.fromhex("3CC300010080")
SV1 = bytes.fromhex("C33C00010080")


class Mode(enum.Enum):
    """Which parts of the SUN message the MAC authenticates."""

    IDENTITY_ONLY = "identity"
    IDENTITY_PLUS_FILE = "identity+file"


class HeaderUse(enum.Enum):
    MAC = "mac"
    SESSION_KEY = "session-key"


def header(use: HeaderUse) -> bytes:
    """Return the 6-byte session vector header for *use*."""
    return SV2 if use is HeaderUse.MAC else SV1


def check_key(key: bytes, name: str = "key") -> None:
    if len(key) != KEY_SIZE:
        raise ValueError(f"{name} must be {KEY_SIZE} bytes, got {len(key)}")


def aes_cmac(key: bytes, data: bytes = b"") -> bytes:
    """Compute 16-byte AES-CMAC."""
    c = CMAC(algorithms.AES(key))
    c.update(data)
    return c.finalize()


def trailing_data(
    mode: Mode,
    enc_file_data: bytes = b"",
    mac_param: str = DEFAULT_MAC_PARAM,
) -> bytes:
    """Build the ASCII bytes the second CMAC pass runs over.

    Empty for IDENTITY_ONLY. For IDENTITY_PLUS_FILE the tag MACs the URL
    text from the start of the encrypted file data up to the MAC value:
    ``HEX(enc_file_data) || "&" || mac_param || "="``.
    """
    if mode is Mode.IDENTITY_ONLY:
        return b""
    return (enc_file_data.hex().upper() + f"&{mac_param}=").encode("ascii")


def truncated_cmac(key: bytes, associated_data: bytes, trailing: bytes = b"") -> bytes:
    """Two-pass AES-CMAC truncated to 8 bytes.

    pass1 = CMAC(key, pad_zero(SV2 || associated_data)) is the MAC session
    key; pass2 = CMAC(pass1, trailing). The SDMMAC is the odd-indexed bytes
    (1, 3, ..., 15) of pass2.
    """
    check_key(key, "file key")
    session_mac_key = aes_cmac(key, pad_zero(header(HeaderUse.MAC) + associated_data))
    full = aes_cmac(session_mac_key, trailing)
    return full[1::2]


def compute_sdm_mac(
    file_key: bytes,
    identity_payload: bytes,
    enc_file_data: bytes = b"",
    mac_param: str = DEFAULT_MAC_PARAM,
) -> bytes:
    """Compute the SDMMAC for a UID (and counter) payload.

    *identity_payload* is ``uid`` or ``uid || counter (3 bytes LE)``.
    When *enc_file_data* is non-empty the MAC also covers the encrypted
    file data as it appears in the URL.
    """
    mode = Mode.IDENTITY_PLUS_FILE if enc_file_data else Mode.IDENTITY_ONLY
    lg.log(TRACE, "SDMMAC mode=%s payload=%d bytes", mode.value, len(identity_payload))
    return truncated_cmac(
        file_key,
        identity_payload,
        trailing_data(mode, enc_file_data, mac_param),
    )

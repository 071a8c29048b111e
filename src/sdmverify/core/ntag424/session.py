"""SDMENCFileData decryption (session key and IV derivation)."""

from __future__ import annotations

from sdmverify.core.ntag424.aes import aes_cbc_decrypt, aes_ecb_encrypt
from sdmverify.core.ntag424.cmac import HeaderUse, aes_cmac, header
from sdmverify.core.ntag424.messages import ErrorKind, SdmError
from sdmverify.core.ntag424.padding import BLOCK_SIZE, pad_zero


def derive_enc_session_key(file_key: bytes, uid: bytes, counter_bytes: bytes) -> bytes:
    """KSesSDMFileReadENC = CMAC(file_key, pad_zero(SV1 || uid || counter)).

    Single pass and untruncated, unlike the SDMMAC.
    """
    sv1 = pad_zero(header(HeaderUse.SESSION_KEY) + uid + counter_bytes)
    return aes_cmac(file_key, sv1)


def derive_enc_iv(session_key: bytes, counter_bytes: bytes) -> bytes:
    """IV = AES-ECB(session_key, counter || 00*13)."""
    return aes_ecb_encrypt(session_key, counter_bytes.ljust(BLOCK_SIZE, b"\x00"))


def decrypt_file_data(
    file_key: bytes,
    uid: bytes,
    counter_bytes: bytes,
    enc_file_data: bytes,
) -> bytes:
    """Decrypt SDMENCFileData. Returns the raw, block-aligned plaintext."""
    if not enc_file_data or len(enc_file_data) % BLOCK_SIZE:
        raise SdmError(ErrorKind.MALFORMED_INPUT)
    session_key = derive_enc_session_key(file_key, uid, counter_bytes)
    iv = derive_enc_iv(session_key, counter_bytes)
    return aes_cbc_decrypt(session_key, iv, enc_file_data)

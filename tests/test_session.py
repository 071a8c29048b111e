"""Tests for file data session key and IV derivation."""

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from sdmverify.core.ntag424 import session
from sdmverify.core.ntag424.aes import aes_cbc_decrypt, aes_ecb_encrypt
from sdmverify.core.ntag424.cmac import aes_cmac
from sdmverify.core.ntag424.messages import SdmError

RFC4493_KEY = bytes.fromhex("2B7E151628AED2A6ABF7158809CF4F3C")
UID = bytes.fromhex("04958CAA5C5E80")
CTR = bytes.fromhex("010000")


class TestPrimitives:
    def test_cmac_empty_message(self):
        """RFC 4493 example 1."""
        assert aes_cmac(RFC4493_KEY) == bytes.fromhex("BB1D6929E95937287FA37D129B756746")

    def test_cmac_one_block(self):
        """RFC 4493 example 2."""
        msg = bytes.fromhex("6BC1BEE22E409F96E93D7E117393172A")
        assert aes_cmac(RFC4493_KEY, msg) == bytes.fromhex("070A16B46B4D4144F79BDD9DD04A287C")

    def test_ecb_encrypt(self):
        """FIPS-197 appendix C.1."""
        key = bytes.fromhex("000102030405060708090A0B0C0D0E0F")
        block = bytes.fromhex("00112233445566778899AABBCCDDEEFF")
        assert aes_ecb_encrypt(key, block) == bytes.fromhex("69C4E0D86A7B0430D8CDB78070B4C55A")

    def test_cbc_decrypt_first_block(self):
        """With a zero IV the first CBC block is plain ECB."""
        key = bytes.fromhex("000102030405060708090A0B0C0D0E0F")
        ct = bytes.fromhex("69C4E0D86A7B0430D8CDB78070B4C55A")
        assert aes_cbc_decrypt(key, bytes(16), ct) == bytes.fromhex(
            "00112233445566778899AABBCCDDEEFF"
        )


class TestSessionKey:
    def test_session_vector_layout(self, monkeypatch):
        """SV1 is C3 3C 00 01 00 80 || UID || counter, one full block."""
        seen = []
        monkeypatch.setattr(
            session, "aes_cmac", lambda key, data: seen.append((key, data)) or bytes(16)
        )
        session.derive_enc_session_key(bytes(16), UID, CTR)
        assert seen == [(bytes(16), bytes.fromhex("C33C0001008004958CAA5C5E80010000"))]

    def test_session_vector_without_counter(self, monkeypatch):
        seen = []
        monkeypatch.setattr(
            session, "aes_cmac", lambda key, data: seen.append(data) or bytes(16)
        )
        session.derive_enc_session_key(bytes(16), UID, b"")
        assert seen == [bytes.fromhex("C33C0001008004958CAA5C5E80000000")]

    def test_session_key_is_full_cmac(self):
        """The session key is the untruncated 16-byte CMAC."""
        key = session.derive_enc_session_key(bytes(16), UID, CTR)
        assert key == aes_cmac(bytes(16), bytes.fromhex("C33C0001008004958CAA5C5E80010000"))


class TestIv:
    @pytest.mark.parametrize(
        "counter, block",
        [
            (CTR, "01000000000000000000000000000000"),
            (bytes.fromhex("3D0000"), "3D000000000000000000000000000000"),
            (b"", "00000000000000000000000000000000"),
        ],
    )
    def test_iv_input_block(self, counter, block):
        """IV = E(Kses, counter || 00*13); decrypting it gives that block back."""
        ses_key = bytes(range(16))
        iv = session.derive_enc_iv(ses_key, counter)
        dec = Cipher(algorithms.AES(ses_key), modes.ECB()).decryptor()
        assert dec.update(iv) + dec.finalize() == bytes.fromhex(block)


class TestDecryptFileData:
    def test_uses_derived_key_and_iv(self):
        file_key = bytes.fromhex("5ACE7E50AB65D5D51FD5BF5A16B8205B")
        ses_key = aes_cmac(file_key, bytes.fromhex("C33C0001008004958CAA5C5E80010000"))
        iv = aes_ecb_encrypt(ses_key, bytes.fromhex("01000000000000000000000000000000"))
        plain = b"0123456789abcdef" * 2
        enc = Cipher(algorithms.AES(ses_key), modes.CBC(iv)).encryptor()
        ct = enc.update(plain) + enc.finalize()
        assert session.decrypt_file_data(file_key, UID, CTR, ct) == plain

    @pytest.mark.parametrize("size", [0, 15, 17])
    def test_unaligned(self, size):
        with pytest.raises(SdmError):
            session.decrypt_file_data(bytes(16), UID, CTR, bytes(size))

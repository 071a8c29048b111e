from __future__ import annotations

import logging

from cryptography.hazmat.primitives.constant_time import bytes_eq

from sdmverify.core.base import PROTOCOL, Backend, handles
from sdmverify.core.ntag424.cmac import (
    DEFAULT_MAC_PARAM,
    MAC_SIZE,
    Mode,
    check_key,
    compute_sdm_mac,
)
from sdmverify.core.ntag424.messages import (
    ErrorKind,
    PlainSunMessage,
    SdmError,
    SunMessage,
    SunResult,
)
from sdmverify.core.ntag424.padding import BLOCK_SIZE, strip_filler
from sdmverify.core.ntag424.picc import (
    UID_SIZE,
    decode_counter,
    decrypt_picc_data,
    encode_counter,
)
from sdmverify.core.ntag424.session import decrypt_file_data

lg = logging.getLogger(__name__)

_DUMMY_PAYLOAD = b"\x00" * BLOCK_SIZE


class SunBackend(Backend):
    """Verifies SUN messages of one tag key set.

    Holds the SDM meta read key (decrypts PICCData) and the SDM file read
    key (SDMMAC and SDMENCFileData). Each send() is independent; nothing
    derived from one message is kept on the instance. Replay protection
    (counter monotonicity) is left to the caller.
    """

    def __init__(
        self,
        meta_key: bytes | None,
        file_key: bytes,
        *,
        mac_param: str = DEFAULT_MAC_PARAM,
        require_counter: bool = True,
        strip_filler: bool = True,
    ) -> None:
        if meta_key is not None:
            check_key(meta_key, "meta key")
        check_key(file_key, "file key")
        self._meta_key = meta_key
        self._file_key = file_key
        self._mac_param = mac_param
        self._require_counter = require_counter
        self._strip_filler = strip_filler

    # -- handlers --

    @handles(SunMessage)
    def _verify_sun(self, message: SunMessage) -> SunResult:
        if self._meta_key is None:
            raise ValueError("meta key required for encrypted PICC data")
        try:
            mac, enc_file_data = _wire_fields(message.mac, message.enc_file_data)
            try:
                picc = decrypt_picc_data(
                    self._meta_key, bytes(message.picc_data), self._require_counter
                )
            except SdmError as exc:
                if exc.kind is not ErrorKind.MALFORMED_INPUT:
                    # keep the rejection path as costly as a MAC check
                    compute_sdm_mac(self._file_key, _DUMMY_PAYLOAD)
                raise
            return self._authenticate(picc.uid, picc.counter_bytes, mac, enc_file_data)
        except SdmError as exc:
            return self._reject(exc)

    @handles(PlainSunMessage)
    def _verify_plain_sun(self, message: PlainSunMessage) -> SunResult:
        try:
            mac, enc_file_data = _wire_fields(message.mac, message.enc_file_data)
            uid = bytes(message.uid)
            if len(uid) != UID_SIZE:
                raise SdmError(ErrorKind.MALFORMED_INPUT)
            counter_bytes = encode_counter(message.counter)
            return self._authenticate(uid, counter_bytes, mac, enc_file_data)
        except SdmError as exc:
            return self._reject(exc)

    # -- shared steps --

    def _authenticate(
        self,
        uid: bytes,
        counter_bytes: bytes | None,
        mac: bytes,
        enc_file_data: bytes,
    ) -> SunResult:
        mode = Mode.IDENTITY_PLUS_FILE if enc_file_data else Mode.IDENTITY_ONLY
        counter_bytes = counter_bytes or b""

        expected = compute_sdm_mac(
            self._file_key, uid + counter_bytes, enc_file_data, self._mac_param
        )
        if not bytes_eq(expected, mac):
            raise SdmError(ErrorKind.CMAC_MISMATCH)

        file_data = None
        if mode is Mode.IDENTITY_PLUS_FILE:
            file_data = decrypt_file_data(
                self._file_key, uid, counter_bytes, enc_file_data
            )
            if self._strip_filler:
                file_data = strip_filler(file_data)

        counter = decode_counter(counter_bytes) if counter_bytes else None
        lg.log(PROTOCOL, "SUN ok mode=%s", mode.value)
        return SunResult(uid=uid, counter=counter, file_data=file_data)

    @staticmethod
    def _reject(exc: SdmError) -> SunResult:
        lg.log(PROTOCOL, "SUN rejected: %s", exc.kind.value)
        return SunResult.failure(exc.kind)


def _wire_fields(mac: bytes, enc_file_data: bytes) -> tuple[bytes, bytes]:
    """Size-check the URL-derived fields and return them as bytes."""
    mac = bytes(mac)
    enc_file_data = bytes(enc_file_data)
    if len(mac) != MAC_SIZE:
        raise SdmError(ErrorKind.MALFORMED_INPUT)
    if len(enc_file_data) % BLOCK_SIZE:
        raise SdmError(ErrorKind.MALFORMED_INPUT)
    return mac, enc_file_data


def verify_sun_message(
    meta_key: bytes,
    file_key: bytes,
    picc_data: bytes,
    mac: bytes,
    enc_file_data: bytes = b"",
    **options,
) -> SunResult:
    """Decrypt and authenticate an encrypted-mirror SUN message.

    *options* are passed to SunBackend (mac_param, require_counter,
    strip_filler).
    """
    backend = SunBackend(meta_key, file_key, **options)
    return backend.send(SunMessage(picc_data, mac, enc_file_data))


def validate_plain_sun(
    file_key: bytes,
    uid: bytes,
    counter: int,
    mac: bytes,
    enc_file_data: bytes = b"",
    **options,
) -> SunResult:
    """Authenticate a SUN message with plaintext UID and counter mirroring."""
    backend = SunBackend(None, file_key, **options)
    return backend.send(PlainSunMessage(uid, counter, mac, enc_file_data))

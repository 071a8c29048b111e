from __future__ import annotations

import enum
from dataclasses import dataclass

from sdmverify.core.base import Message, Result


class ErrorKind(enum.Enum):
    """Reasons a SUN message is rejected."""

    UNSUPPORTED_UID_LENGTH = "unsupported UID length"
    MISSING_UID_MIRROR = "UID mirroring not enabled"
    MISSING_COUNTER_MIRROR = "read counter mirroring not enabled"
    CMAC_MISMATCH = "CMAC check failed"
    MALFORMED_INPUT = "malformed input"


class SdmError(ValueError):
    """Raised by the decoders; the backend turns it into a SunResult."""

    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind


@dataclass
class SunMessage(Message):
    """Encrypted PICC data, SDMMAC and optional encrypted file data."""

    picc_data: bytes
    mac: bytes
    enc_file_data: bytes = b""


@dataclass
class PlainSunMessage(Message):
    """Plaintext UID and read counter mirrored by the tag, with its SDMMAC."""

    uid: bytes
    counter: int
    mac: bytes
    enc_file_data: bytes = b""


@dataclass
class SunResult(Result):
    """Outcome of a verification. On failure only *error* is set."""

    error: ErrorKind | None = None
    uid: bytes | None = None
    counter: int | None = None
    file_data: bytes | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, kind: ErrorKind) -> SunResult:
        return cls(error=kind)

    def __repr__(self) -> str:
        if self.error is not None:
            return f"SunResult(error={self.error.name})"
        parts = [f"uid={self.uid.hex().upper()}"]
        if self.counter is not None:
            parts.append(f"counter={self.counter}")
        if self.file_data is not None:
            parts.append(f"file_data={len(self.file_data)} bytes")
        return f"SunResult({' '.join(parts)})"

from sdmverify.core.ntag424.backend import (
    SunBackend,
    validate_plain_sun,
    verify_sun_message,
)
from sdmverify.core.ntag424.cmac import Mode, compute_sdm_mac
from sdmverify.core.ntag424.messages import (
    ErrorKind,
    PlainSunMessage,
    SdmError,
    SunMessage,
    SunResult,
)
from sdmverify.core.ntag424.picc import PiccData, TagFlags

__all__ = [
    "ErrorKind",
    "Mode",
    "PiccData",
    "PlainSunMessage",
    "SdmError",
    "SunBackend",
    "SunMessage",
    "SunResult",
    "TagFlags",
    "compute_sdm_mac",
    "validate_plain_sun",
    "verify_sun_message",
]

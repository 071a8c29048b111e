"""Backend configuration, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sdmverify.core.ntag424.cmac import DEFAULT_MAC_PARAM, KEY_SIZE

ZERO_KEY = b"\x00" * KEY_SIZE

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_key(value: str, name: str = "key") -> bytes:
    """Parse a 32 hex character AES-128 key."""
    try:
        key = bytes.fromhex(value.strip())
    except ValueError:
        raise ValueError(f"{name} is not valid hex") from None
    if len(key) != KEY_SIZE:
        raise ValueError(f"{name} must be {KEY_SIZE} bytes, got {len(key)}")
    return key


def parse_bool(value: str, name: str = "flag") -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{name}: expected a boolean, got '{value}'")


@dataclass
class SdmConfig:
    """Keys and verification options for one tag key set."""

    meta_key: bytes = ZERO_KEY
    file_key: bytes = ZERO_KEY
    mac_param: str = DEFAULT_MAC_PARAM
    require_counter: bool = True
    strip_filler: bool = True

    @property
    def demo_mode(self) -> bool:
        """True while either key is still the factory default (all zero)."""
        return self.meta_key == ZERO_KEY or self.file_key == ZERO_KEY

    @property
    def backend_options(self) -> dict:
        return {
            "mac_param": self.mac_param,
            "require_counter": self.require_counter,
            "strip_filler": self.strip_filler,
        }

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> SdmConfig:
        env = os.environ if environ is None else environ
        cfg = cls()
        if "SDM_META_KEY" in env:
            cfg.meta_key = parse_key(env["SDM_META_KEY"], "SDM_META_KEY")
        if "SDM_FILE_KEY" in env:
            cfg.file_key = parse_key(env["SDM_FILE_KEY"], "SDM_FILE_KEY")
        cfg.mac_param = env.get("SDM_MAC_PARAM", cfg.mac_param)
        if "SDM_REQUIRE_COUNTER" in env:
            cfg.require_counter = parse_bool(
                env["SDM_REQUIRE_COUNTER"], "SDM_REQUIRE_COUNTER"
            )
        if "SDM_STRIP_FILLER" in env:
            cfg.strip_filler = parse_bool(env["SDM_STRIP_FILLER"], "SDM_STRIP_FILLER")
        return cfg

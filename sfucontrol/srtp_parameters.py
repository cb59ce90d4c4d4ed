"""SRTP parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class SrtpCryptoSuite(str, Enum):
    """SRTP crypto suite."""

    AES_CM_128_HMAC_SHA1_80 = "AES_CM_128_HMAC_SHA1_80"
    AES_CM_128_HMAC_SHA1_32 = "AES_CM_128_HMAC_SHA1_32"


@dataclass
class SrtpParameters:
    """Crypto suite and Base64 keying material (master key and salt)."""

    crypto_suite: SrtpCryptoSuite
    key_base64: str

    def __post_init__(self) -> None:
        self.crypto_suite = SrtpCryptoSuite(self.crypto_suite)

    def to_dict(self) -> dict[str, Any]:
        return {"cryptoSuite": self.crypto_suite.value, "keyBase64": self.key_base64}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SrtpParameters":
        return cls(crypto_suite=data["cryptoSuite"], key_base64=data["keyBase64"])
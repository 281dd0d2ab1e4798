import json
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from sslcertificate.common.utils import b64d, b64e


# -------------------------------
# 1. Public key algorithm tag
# -------------------------------
class PublicKeyAlgorithm(str, Enum):
    RSA = "RSA"
    DSA = "DSA"
    DH = "DH"
    EC = "EC"
    UNKNOWN = "Unknown"


# -------------------------------
# 2. Public key detail
# -------------------------------
class PublicKeyDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: PublicKeyAlgorithm = PublicKeyAlgorithm.UNKNOWN
    bits: int = 0
    key: str = ""  # PEM SubjectPublicKeyInfo, empty if unavailable

    def encode(self) -> str:
        """
        Opaque, text-safe form: base64 of the JSON document
        """
        return b64e(self.model_dump_json().encode("utf-8"))

    @classmethod
    def decode(cls, encoded: str) -> "PublicKeyDetail":
        if not encoded:
            return cls()
        return cls.model_validate_json(b64d(encoded))


# -------------------------------
# 3. Property bag (constructor inputs)
# -------------------------------
class CertificateProperties(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_certificate_fields: Dict[str, Any]
    fingerprint: str = ""
    fingerprint_sha256: str = ""
    remote_address: str = ""
    public_key_detail: PublicKeyDetail = Field(default_factory=PublicKeyDetail)


# -------------------------------
# 4. Persisted form (public key detail kept opaque)
# -------------------------------
class SerializedCertificate(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_certificate_fields: Dict[str, Any]
    fingerprint: str = ""
    fingerprint_sha256: str = ""
    remote_address: str = ""
    public_key_detail: str = ""  # PublicKeyDetail.encode()

    @classmethod
    def from_properties(cls, props: CertificateProperties) -> "SerializedCertificate":
        return cls(
            raw_certificate_fields=props.raw_certificate_fields,
            fingerprint=props.fingerprint,
            fingerprint_sha256=props.fingerprint_sha256,
            remote_address=props.remote_address,
            public_key_detail=props.public_key_detail.encode(),
        )

    def to_properties(self) -> CertificateProperties:
        return CertificateProperties(
            raw_certificate_fields=self.raw_certificate_fields,
            fingerprint=self.fingerprint,
            fingerprint_sha256=self.fingerprint_sha256,
            remote_address=self.remote_address,
            public_key_detail=PublicKeyDetail.decode(self.public_key_detail),
        )

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), sort_keys=True)

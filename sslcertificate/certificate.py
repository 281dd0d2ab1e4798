"""The SslCertificate value object."""

import copy
import json
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from sslcertificate import config, hostnames
from sslcertificate.common.protocol import (
    CertificateProperties,
    PublicKeyDetail,
    SerializedCertificate,
)
from sslcertificate.common.utils import diff_in_days, from_timestamp_utc, md5_hex, utc_now
from sslcertificate.crypto import pki

WEAK_SIGNATURE_SHORT_NAME = "RSA-SHA1"
WEAK_SIGNATURE_LONG_NAME = "sha1WithRSAEncryption"
PRECERT_POISON_EXTENSION = "ct_precert_poison"


class SslCertificate:
    """
    An immutable, decoded X.509 certificate.

    Every query is a pure function of the decoded fields, the fingerprints
    and the public key detail. Missing optional fields degrade to empty
    results instead of raising.
    """

    __slots__ = (
        "_fields",
        "_fingerprint",
        "_fingerprint_sha256",
        "_remote_address",
        "_public_key_detail",
    )

    def __init__(
        self,
        raw_certificate_fields: Mapping[str, Any],
        fingerprint: str = "",
        fingerprint_sha256: str = "",
        remote_address: str = "",
        public_key_detail: Optional[PublicKeyDetail] = None,
    ):
        object.__setattr__(self, "_fields", copy.deepcopy(dict(raw_certificate_fields)))
        object.__setattr__(self, "_fingerprint", fingerprint or "")
        object.__setattr__(self, "_fingerprint_sha256", fingerprint_sha256 or "")
        object.__setattr__(self, "_remote_address", remote_address or "")
        object.__setattr__(self, "_public_key_detail", public_key_detail or PublicKeyDetail())

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ─────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────
    @staticmethod
    def download():
        """Return a Downloader configured with the environment defaults."""
        from sslcertificate.downloader import Downloader

        return Downloader()

    @classmethod
    def create_for_hostname(
        cls,
        url: str,
        timeout: Optional[int] = None,
        verify_certificate: Optional[bool] = None,
        port: Optional[int] = None,
    ) -> "SslCertificate":
        """
        Fetch the certificate served by a live host.

        Raises CouldNotDownloadCertificate (or a subclass) on connection
        failure, InvalidUrl if no host can be determined and
        CouldNotDecodeCertificate if the peer certificate cannot be parsed.
        """
        from sslcertificate.downloader import Downloader

        downloader = Downloader(port=port, timeout=timeout, verify_peer=verify_certificate)
        return downloader.for_host(url)

    @classmethod
    def create_from_file(cls, path_to_certificate: str) -> "SslCertificate":
        """Load a PEM or DER certificate file. OSError propagates unchanged."""
        from sslcertificate.downloader import read_from_file

        return cls.create_from_string(read_from_file(path_to_certificate))

    @classmethod
    def create_from_string(
        cls, certificate: Union[str, bytes], remote_address: str = ""
    ) -> "SslCertificate":
        """
        Decode PEM text or raw DER bytes.

        Raises CouldNotDecodeCertificate if the input is not a certificate.
        """
        cert = pki.load_certificate(certificate)

        return cls(
            pki.decode_fields(cert),
            pki.fingerprint(cert, config.DEFAULT_FINGERPRINT_ALGORITHM),
            pki.fingerprint(cert, "sha256"),
            remote_address,
            pki.public_key_detail(cert),
        )

    @classmethod
    def create_from_properties(
        cls, properties: Union[CertificateProperties, Mapping[str, Any]]
    ) -> "SslCertificate":
        """Rebuild a certificate from the mapping produced by to_properties()."""
        if not isinstance(properties, CertificateProperties):
            properties = CertificateProperties.model_validate(properties)

        return cls(
            properties.raw_certificate_fields,
            properties.fingerprint,
            properties.fingerprint_sha256,
            properties.remote_address,
            properties.public_key_detail,
        )

    @classmethod
    def from_serialized(
        cls, data: Union[SerializedCertificate, Mapping[str, Any], str]
    ) -> "SslCertificate":
        """Inverse of to_serialized(); accepts the model, its dict or its JSON."""
        if isinstance(data, str):
            data = SerializedCertificate.model_validate_json(data)
        elif not isinstance(data, SerializedCertificate):
            data = SerializedCertificate.model_validate(data)
        return cls.create_from_properties(data.to_properties())

    @staticmethod
    def der2pem(der: bytes) -> str:
        return pki.der2pem(der)

    # ─────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────
    def get_raw_certificate_fields(self) -> Dict[str, Any]:
        return copy.deepcopy(self._fields)

    def _issuer(self) -> Mapping[str, Any]:
        return self._fields.get("issuer") or {}

    def _subject(self) -> Mapping[str, Any]:
        return self._fields.get("subject") or {}

    def _extensions(self) -> Mapping[str, Any]:
        return self._fields.get("extensions") or {}

    def get_issuer(self) -> str:
        return _first_value(self._issuer().get("CN", ""))

    def get_organization(self) -> str:
        return _first_value(self._issuer().get("O", ""))

    def get_serial_number(self) -> str:
        return self._fields.get("serialNumber", "")

    def get_signature_algorithm(self) -> str:
        return self._fields.get("signatureTypeSN", "")

    def get_fingerprint(self) -> str:
        return self._fingerprint

    def get_fingerprint_sha256(self) -> str:
        return self._fingerprint_sha256

    def get_remote_address(self) -> str:
        return self._remote_address

    def get_public_key_detail(self) -> PublicKeyDetail:
        return self._public_key_detail

    def get_public_key_algorithm(self) -> str:
        return self._public_key_detail.type.value

    def get_public_key_size(self) -> int:
        return int(self._public_key_detail.bits or 0)

    def get_domain(self) -> str:
        """
        The subject common name. For a multi-valued CN the first entry wins.
        """
        subject = self._subject()
        if "CN" not in subject:
            return ""
        return _first_value(subject["CN"])

    def get_additional_domains(self) -> List[str]:
        """
        subjectAltName entries with the `DNS:` prefix removed, in order and
        with duplicates kept. A missing extension yields [""].
        """
        alt_names = self._extensions().get("subjectAltName", "")
        return [domain.replace("DNS:", "") for domain in alt_names.split(", ")]

    def get_domains(self) -> List[str]:
        """
        Additional domains followed by the primary domain, de-duplicated
        (first occurrence kept) with empty entries removed.
        """
        all_domains = self.get_additional_domains() + [self.get_domain()]
        return [domain for domain in dict.fromkeys(all_domains) if domain]

    # ─────────────────────────────────────────────────────────
    # Validity & expiry
    # ─────────────────────────────────────────────────────────
    def valid_from_date(self) -> datetime:
        return from_timestamp_utc(self._fields["validFrom_time_t"])

    def expiration_date(self) -> datetime:
        return from_timestamp_utc(self._fields["validTo_time_t"])

    def lifespan_in_days(self) -> int:
        return diff_in_days(self.valid_from_date(), self.expiration_date())

    def days_until_expiration_date(self, now: Optional[datetime] = None) -> int:
        return diff_in_days(now or utc_now(), self.expiration_date())

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) > self.expiration_date()

    def is_valid(self, url: Optional[str] = None, now: Optional[datetime] = None) -> bool:
        """
        True inside [valid_from, expiration] (inclusive) and, when url is
        given, if the certificate applies to its host.
        """
        now = now or utc_now()
        if not (self.valid_from_date() <= now <= self.expiration_date()):
            return False

        if url:
            return self.applies_to_url(url)

        return True

    def is_valid_until(
        self, threshold: datetime, url: Optional[str] = None, now: Optional[datetime] = None
    ) -> bool:
        """Expiring exactly at threshold does not count as valid until it."""
        if self.expiration_date() <= threshold:
            return False

        return self.is_valid(url, now=now)

    def is_self_signed(self) -> bool:
        return self.get_issuer() == self.get_domain()

    def uses_weak_hash(self) -> bool:
        if self._fields.get("signatureTypeSN") == WEAK_SIGNATURE_SHORT_NAME:
            return True

        if self._fields.get("signatureTypeLN") == WEAK_SIGNATURE_LONG_NAME:
            return True

        return False

    uses_sha1_hash = uses_weak_hash

    def is_pre_certificate(self) -> bool:
        """CT precertificates carry the poison extension and are never leaf certs."""
        return PRECERT_POISON_EXTENSION in self._extensions()

    # ─────────────────────────────────────────────────────────
    # Matching
    # ─────────────────────────────────────────────────────────
    def applies_to_url(self, url: str) -> bool:
        return hostnames.applies_to_host(self.get_domains(), url)

    applies_to_host = applies_to_url

    def contains_domain(self, domain: str) -> bool:
        """Loose subdomain membership; not for trust decisions."""
        return hostnames.contains_domain(self.get_domains(), domain)

    # ─────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────
    def get_raw_certificate_fields_json(self) -> str:
        return json.dumps(self._fields, sort_keys=True)

    def get_hash(self) -> str:
        """Identifies the certificate content, not where it came from."""
        return md5_hex(self.get_raw_certificate_fields_json().encode("utf-8"))

    def _properties(self) -> CertificateProperties:
        return CertificateProperties(
            raw_certificate_fields=self.get_raw_certificate_fields(),
            fingerprint=self._fingerprint,
            fingerprint_sha256=self._fingerprint_sha256,
            remote_address=self._remote_address,
            public_key_detail=self._public_key_detail,
        )

    def to_properties(self) -> Dict[str, Any]:
        return self._properties().model_dump(mode="json")

    def to_serialized(self) -> SerializedCertificate:
        return SerializedCertificate.from_properties(self._properties())

    def __str__(self) -> str:
        return self.get_raw_certificate_fields_json()

    def __repr__(self) -> str:
        return f"<SslCertificate domain={self.get_domain()!r} issuer={self.get_issuer()!r}>"

    def _identity(self):
        return (
            self.get_raw_certificate_fields_json(),
            self._fingerprint,
            self._fingerprint_sha256,
            self._public_key_detail.type,
            self._public_key_detail.bits,
            self._public_key_detail.key,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, SslCertificate):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __reduce__(self):
        return (self.__class__.create_from_properties, (self.to_properties(),))


def _first_value(value: Any) -> str:
    if isinstance(value, list):
        return value[0] if value else ""
    if isinstance(value, str):
        return value
    return ""

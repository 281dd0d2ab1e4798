"""Shared fixtures: on-the-fly certificates built with cryptography."""

import ipaddress
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import serialization, hashes
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from sslcertificate import SslCertificate


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


def _alt_name(name):
    try:
        return x509.IPAddress(ipaddress.ip_address(name))
    except ValueError:
        return x509.DNSName(name)


@pytest.fixture
def make_cert(rsa_key):
    """
    Build a signed x509.Certificate.

    Args:
        cn: subject CN (None for no CN)
        sans: SAN entries, DNS names or IP literals (None for no extension)
        issuer_cn: issuer CN, defaults to cn (self-signed)
        not_before/not_after: validity window, defaults to now-1d .. now+365d
        algorithm: signature hash
        precert: add the CT poison extension
        key: signing/subject key, defaults to an RSA-2048 key
    """
    def _make(cn="example.com", sans=None, issuer_cn=None, not_before=None, not_after=None,
              algorithm=None, precert=False, key=None):
        key = key or rsa_key
        now = datetime.now(timezone.utc)

        subject_attrs = [x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example Org")]
        if cn is not None:
            subject_attrs.append(x509.NameAttribute(NameOID.COMMON_NAME, cn))
        issuer = x509.Name([
            x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example CA Inc"),
            x509.NameAttribute(NameOID.COMMON_NAME, issuer_cn if issuer_cn is not None else (cn or "Example CA")),
        ])

        builder = (
            x509.CertificateBuilder()
            .subject_name(x509.Name(subject_attrs))
            .issuer_name(issuer)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(not_before or now - timedelta(days=1))
            .not_valid_after(not_after or now + timedelta(days=365))
        )
        if sans is not None:
            builder = builder.add_extension(
                x509.SubjectAlternativeName([_alt_name(n) for n in sans]), critical=False
            )
        if precert:
            builder = builder.add_extension(x509.PrecertPoison(), critical=True)

        return builder.sign(private_key=key, algorithm=algorithm or hashes.SHA256())

    return _make


@pytest.fixture
def make_pem(make_cert):
    def _make(**kwargs):
        return make_cert(**kwargs).public_bytes(serialization.Encoding.PEM).decode()

    return _make


@pytest.fixture
def base_fields():
    """A decoded field mapping, valid 2023-11-14T22:13:20Z .. 2024-11-13T22:13:20Z."""
    return {
        "name": "/CN=example.com",
        "subject": {"CN": "example.com"},
        "issuer": {"C": "US", "O": "Let's Encrypt", "CN": "R3"},
        "serialNumber": "123456789",
        "validFrom_time_t": 1700000000,
        "validTo_time_t": 1731536000,
        "signatureTypeSN": "RSA-SHA256",
        "signatureTypeLN": "sha256WithRSAEncryption",
        "extensions": {"subjectAltName": "DNS:example.com, DNS:www.example.com"},
    }


@pytest.fixture
def make_from_fields(base_fields):
    """SslCertificate from base_fields with top-level keys overridden."""
    def _make(**overrides):
        fields = dict(base_fields)
        fields.update(overrides)
        return SslCertificate(fields, "sha1-fingerprint", "sha256-fingerprint")

    return _make

"""X.509 decoding on top of `cryptography`.

Turns PEM/DER certificates into the OpenSSL-style field mapping consumed by
SslCertificate, and computes fingerprints and public key details.
"""

import base64
import logging
from datetime import datetime
from typing import Any, Dict, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import dh, dsa, ec, rsa
from cryptography.x509.oid import (
    AuthorityInformationAccessOID,
    ExtendedKeyUsageOID,
    ExtensionOID,
    NameOID,
    SignatureAlgorithmOID,
)

from sslcertificate.common.errors import CouldNotDecodeCertificate
from sslcertificate.common.protocol import PublicKeyAlgorithm, PublicKeyDetail

logger = logging.getLogger(__name__)

PEM_MARKER = "BEGIN CERTIFICATE"
PEM_HEADER = "-----BEGIN CERTIFICATE-----\n"
PEM_FOOTER = "-----END CERTIFICATE-----\n"
PEM_LINE_LENGTH = 64

CertificateInput = Union[str, bytes, x509.Certificate]

NAME_ATTRIBUTES = {
    NameOID.COUNTRY_NAME: "C",
    NameOID.STATE_OR_PROVINCE_NAME: "ST",
    NameOID.LOCALITY_NAME: "L",
    NameOID.STREET_ADDRESS: "street",
    NameOID.POSTAL_CODE: "postalCode",
    NameOID.ORGANIZATION_NAME: "O",
    NameOID.ORGANIZATIONAL_UNIT_NAME: "OU",
    NameOID.COMMON_NAME: "CN",
    NameOID.SERIAL_NUMBER: "serialNumber",
    NameOID.EMAIL_ADDRESS: "emailAddress",
    NameOID.DOMAIN_COMPONENT: "DC",
    NameOID.GIVEN_NAME: "GN",
    NameOID.SURNAME: "SN",
    NameOID.TITLE: "title",
    NameOID.USER_ID: "UID",
    NameOID.BUSINESS_CATEGORY: "businessCategory",
    NameOID.JURISDICTION_COUNTRY_NAME: "jurisdictionC",
    NameOID.JURISDICTION_STATE_OR_PROVINCE_NAME: "jurisdictionST",
    NameOID.JURISDICTION_LOCALITY_NAME: "jurisdictionL",
}

# OpenSSL (short name, long name) per signature algorithm
SIGNATURE_ALGORITHMS = {
    SignatureAlgorithmOID.RSA_WITH_MD5: ("RSA-MD5", "md5WithRSAEncryption"),
    SignatureAlgorithmOID.RSA_WITH_SHA1: ("RSA-SHA1", "sha1WithRSAEncryption"),
    SignatureAlgorithmOID.RSA_WITH_SHA224: ("RSA-SHA224", "sha224WithRSAEncryption"),
    SignatureAlgorithmOID.RSA_WITH_SHA256: ("RSA-SHA256", "sha256WithRSAEncryption"),
    SignatureAlgorithmOID.RSA_WITH_SHA384: ("RSA-SHA384", "sha384WithRSAEncryption"),
    SignatureAlgorithmOID.RSA_WITH_SHA512: ("RSA-SHA512", "sha512WithRSAEncryption"),
    SignatureAlgorithmOID.RSASSA_PSS: ("RSASSA-PSS", "rsassaPss"),
    SignatureAlgorithmOID.ECDSA_WITH_SHA1: ("ecdsa-with-SHA1", "ecdsa-with-SHA1"),
    SignatureAlgorithmOID.ECDSA_WITH_SHA224: ("ecdsa-with-SHA224", "ecdsa-with-SHA224"),
    SignatureAlgorithmOID.ECDSA_WITH_SHA256: ("ecdsa-with-SHA256", "ecdsa-with-SHA256"),
    SignatureAlgorithmOID.ECDSA_WITH_SHA384: ("ecdsa-with-SHA384", "ecdsa-with-SHA384"),
    SignatureAlgorithmOID.ECDSA_WITH_SHA512: ("ecdsa-with-SHA512", "ecdsa-with-SHA512"),
    SignatureAlgorithmOID.DSA_WITH_SHA1: ("DSA-SHA1", "dsaWithSHA1"),
    SignatureAlgorithmOID.DSA_WITH_SHA224: ("dsa_with_SHA224", "dsa_with_SHA224"),
    SignatureAlgorithmOID.DSA_WITH_SHA256: ("dsa_with_SHA256", "dsa_with_SHA256"),
    SignatureAlgorithmOID.ED25519: ("ED25519", "ED25519"),
    SignatureAlgorithmOID.ED448: ("ED448", "ED448"),
}

EXTENDED_KEY_USAGES = {
    ExtendedKeyUsageOID.SERVER_AUTH: "TLS Web Server Authentication",
    ExtendedKeyUsageOID.CLIENT_AUTH: "TLS Web Client Authentication",
    ExtendedKeyUsageOID.CODE_SIGNING: "Code Signing",
    ExtendedKeyUsageOID.EMAIL_PROTECTION: "E-mail Protection",
    ExtendedKeyUsageOID.TIME_STAMPING: "Time Stamping",
    ExtendedKeyUsageOID.OCSP_SIGNING: "OCSP Signing",
}

FINGERPRINT_ALGORITHMS = {
    "md5": hashes.MD5,
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


# -------------------------------
# 1. DER -> PEM framing
# -------------------------------
def der2pem(der: bytes) -> str:
    """
    Base64-encode DER bytes, wrap at 64 columns and add the certificate markers.
    """
    encoded = base64.b64encode(der).decode("ascii")
    body = "".join(
        encoded[i:i + PEM_LINE_LENGTH] + "\n" for i in range(0, len(encoded), PEM_LINE_LENGTH)
    )
    return PEM_HEADER + body + PEM_FOOTER


def ensure_pem(data: Union[str, bytes]) -> str:
    """
    Return PEM text for data, converting from DER when no PEM marker is present.
    """
    if isinstance(data, str):
        if PEM_MARKER in data:
            return data
        try:
            data = data.encode("latin-1")
        except UnicodeEncodeError as e:
            logger.debug("Certificate input is neither PEM nor DER: %s", e)
            raise CouldNotDecodeCertificate(f"Could not decode certificate: {e}") from e

    if PEM_MARKER.encode("ascii") in data:
        return data.decode("utf-8", errors="replace")

    return der2pem(data)


# -------------------------------
# 2. Load certificate
# -------------------------------
def load_certificate(cert: CertificateInput) -> x509.Certificate:
    """
    Load an X.509 certificate from PEM text/bytes.

    Raises CouldNotDecodeCertificate if the input cannot be parsed.
    """
    if isinstance(cert, x509.Certificate):
        return cert

    pem = ensure_pem(cert).encode("utf-8")
    try:
        return x509.load_pem_x509_certificate(pem)
    except (ValueError, TypeError) as e:
        logger.debug("Certificate decode failed: %s", e)
        raise CouldNotDecodeCertificate(f"Could not decode certificate: {e}") from e


# -------------------------------
# 3. Field mapping
# -------------------------------
def decode_fields(cert: CertificateInput) -> Dict[str, Any]:
    """
    Decode a certificate into an OpenSSL-style field mapping.

    Keys: name, subject, issuer, version, serialNumber, serialNumberHex,
    validFrom, validTo, validFrom_time_t, validTo_time_t,
    signatureTypeSN, signatureTypeLN, extensions.
    """
    cert = load_certificate(cert)

    valid_from = cert.not_valid_before_utc
    valid_to = cert.not_valid_after_utc
    signature_sn, signature_ln = _signature_names(cert)

    return {
        "name": _one_line_name(cert.subject),
        "subject": _name_to_dict(cert.subject),
        "issuer": _name_to_dict(cert.issuer),
        "version": cert.version.value,
        "serialNumber": str(cert.serial_number),
        "serialNumberHex": _serial_hex(cert.serial_number),
        "validFrom": _asn1_time(valid_from),
        "validTo": _asn1_time(valid_to),
        "validFrom_time_t": int(valid_from.timestamp()),
        "validTo_time_t": int(valid_to.timestamp()),
        "signatureTypeSN": signature_sn,
        "signatureTypeLN": signature_ln,
        "extensions": _extensions_to_dict(cert),
    }


# -------------------------------
# 4. Fingerprints
# -------------------------------
def fingerprint(cert: CertificateInput, algorithm: str = "sha1") -> str:
    """
    Lower-case hex digest of the DER encoding.
    """
    hash_cls = FINGERPRINT_ALGORITHMS.get(algorithm.lower())
    if hash_cls is None:
        raise ValueError(f"Unsupported fingerprint algorithm: {algorithm}")
    return load_certificate(cert).fingerprint(hash_cls()).hex()


# -------------------------------
# 5. Public key detail
# -------------------------------
def public_key_detail(cert: CertificateInput) -> PublicKeyDetail:
    """
    Algorithm tag, size in bits and PEM of the embedded public key.
    Unsupported key types give an Unknown/0 detail instead of an error.
    """
    cert = load_certificate(cert)
    try:
        key = cert.public_key()
    except (ValueError, UnsupportedAlgorithm) as e:
        logger.debug("Unsupported public key: %s", e)
        return PublicKeyDetail()

    if isinstance(key, rsa.RSAPublicKey):
        algorithm = PublicKeyAlgorithm.RSA
    elif isinstance(key, dsa.DSAPublicKey):
        algorithm = PublicKeyAlgorithm.DSA
    elif isinstance(key, dh.DHPublicKey):
        algorithm = PublicKeyAlgorithm.DH
    elif isinstance(key, ec.EllipticCurvePublicKey):
        algorithm = PublicKeyAlgorithm.EC
    else:
        algorithm = PublicKeyAlgorithm.UNKNOWN

    bits = getattr(key, "key_size", 0) or 0
    pem = key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")

    return PublicKeyDetail(type=algorithm, bits=bits, key=pem)


# -------------------------------
# Helpers
# -------------------------------
def _attribute_name(attr: x509.NameAttribute) -> str:
    return NAME_ATTRIBUTES.get(attr.oid, attr.oid.dotted_string)


def _attribute_value(attr: x509.NameAttribute) -> str:
    if isinstance(attr.value, bytes):
        return attr.value.hex()
    return attr.value


def _name_to_dict(name: x509.Name) -> Dict[str, Any]:
    """Repeated attributes (multi-valued RDNs, several OUs) become lists."""
    result: Dict[str, Any] = {}
    for attr in name:
        key = _attribute_name(attr)
        value = _attribute_value(attr)
        if key not in result:
            result[key] = value
        elif isinstance(result[key], list):
            result[key].append(value)
        else:
            result[key] = [result[key], value]
    return result


def _one_line_name(name: x509.Name) -> str:
    return "".join(f"/{_attribute_name(attr)}={_attribute_value(attr)}" for attr in name)


def _serial_hex(serial: int) -> str:
    hex_serial = format(serial, "X")
    if len(hex_serial) % 2:
        hex_serial = "0" + hex_serial
    return hex_serial


def _asn1_time(dt: datetime) -> str:
    # UTCTime before 2050, GeneralizedTime after
    if dt.year < 2050:
        return dt.strftime("%y%m%d%H%M%SZ")
    return dt.strftime("%Y%m%d%H%M%SZ")


def _signature_names(cert: x509.Certificate):
    oid = cert.signature_algorithm_oid
    return SIGNATURE_ALGORITHMS.get(oid, (oid.dotted_string, oid.dotted_string))


def _colon_hex(data: bytes) -> str:
    return ":".join(f"{b:02X}" for b in data)


def _general_name(name) -> str:
    if isinstance(name, x509.DNSName):
        return f"DNS:{name.value}"
    if isinstance(name, x509.IPAddress):
        return f"IP Address:{name.value}"
    if isinstance(name, x509.RFC822Name):
        return f"email:{name.value}"
    if isinstance(name, x509.UniformResourceIdentifier):
        return f"URI:{name.value}"
    if isinstance(name, x509.DirectoryName):
        return f"DirName:{_one_line_name(name.value)}"
    if isinstance(name, x509.RegisteredID):
        return f"Registered ID:{name.value.dotted_string}"
    return "othername:<unsupported>"


def _key_usage(usage: x509.KeyUsage) -> str:
    flags = [
        (usage.digital_signature, "Digital Signature"),
        (usage.content_commitment, "Non Repudiation"),
        (usage.key_encipherment, "Key Encipherment"),
        (usage.data_encipherment, "Data Encipherment"),
        (usage.key_agreement, "Key Agreement"),
        (usage.key_cert_sign, "Certificate Sign"),
        (usage.crl_sign, "CRL Sign"),
    ]
    # encipher_only/decipher_only are undefined without key_agreement
    if usage.key_agreement:
        flags.append((usage.encipher_only, "Encipher Only"))
        flags.append((usage.decipher_only, "Decipher Only"))
    return ", ".join(label for enabled, label in flags if enabled)


def _basic_constraints(bc: x509.BasicConstraints) -> str:
    text = "CA:TRUE" if bc.ca else "CA:FALSE"
    if bc.path_length is not None:
        text += f", pathlen:{bc.path_length}"
    return text


def _crl_distribution_points(points: x509.CRLDistributionPoints) -> str:
    entries = []
    for point in points:
        for name in point.full_name or []:
            entries.append(_general_name(name))
    return ", ".join(entries)


def _authority_info_access(aia: x509.AuthorityInformationAccess) -> str:
    labels = {
        AuthorityInformationAccessOID.OCSP: "OCSP",
        AuthorityInformationAccessOID.CA_ISSUERS: "CA Issuers",
    }
    return ", ".join(
        f"{labels.get(d.access_method, d.access_method.dotted_string)} - {_general_name(d.access_location)}"
        for d in aia
    )


EXTENSION_RENDERERS = {
    ExtensionOID.SUBJECT_ALTERNATIVE_NAME: (
        "subjectAltName", lambda v: ", ".join(_general_name(n) for n in v)
    ),
    ExtensionOID.ISSUER_ALTERNATIVE_NAME: (
        "issuerAltName", lambda v: ", ".join(_general_name(n) for n in v)
    ),
    ExtensionOID.BASIC_CONSTRAINTS: ("basicConstraints", _basic_constraints),
    ExtensionOID.KEY_USAGE: ("keyUsage", _key_usage),
    ExtensionOID.EXTENDED_KEY_USAGE: (
        "extendedKeyUsage",
        lambda v: ", ".join(EXTENDED_KEY_USAGES.get(oid, oid.dotted_string) for oid in v),
    ),
    ExtensionOID.SUBJECT_KEY_IDENTIFIER: ("subjectKeyIdentifier", lambda v: _colon_hex(v.digest)),
    ExtensionOID.AUTHORITY_KEY_IDENTIFIER: (
        "authorityKeyIdentifier", lambda v: _colon_hex(v.key_identifier or b"")
    ),
    ExtensionOID.CRL_DISTRIBUTION_POINTS: ("crlDistributionPoints", _crl_distribution_points),
    ExtensionOID.AUTHORITY_INFORMATION_ACCESS: ("authorityInfoAccess", _authority_info_access),
    ExtensionOID.CERTIFICATE_POLICIES: (
        "certificatePolicies",
        lambda v: ", ".join(f"Policy: {p.policy_identifier.dotted_string}" for p in v),
    ),
    ExtensionOID.PRECERT_POISON: ("ct_precert_poison", lambda v: "NULL"),
    ExtensionOID.PRECERT_SIGNED_CERTIFICATE_TIMESTAMPS: (
        "ct_precert_scts", lambda v: f"{len(v)} SCT(s)"
    ),
}


def _extensions_to_dict(cert: x509.Certificate) -> Dict[str, str]:
    """
    Map OpenSSL extension short names to display strings.
    Unrecognised extensions are keyed by their dotted OID with an empty value.
    """
    try:
        extensions = list(cert.extensions)
    except ValueError as e:
        # Malformed extensions leave the rest of the certificate inspectable
        logger.warning("Could not parse certificate extensions: %s", e)
        return {}

    result: Dict[str, str] = {}
    for ext in extensions:
        renderer = EXTENSION_RENDERERS.get(ext.oid)
        if renderer is None:
            result[ext.oid.dotted_string] = ""
            continue
        key, render = renderer
        result[key] = render(ext.value)
    return result

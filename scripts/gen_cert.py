"""Issue throw-away self-signed certificates for manual experiments.

Usage:
    python gen_cert.py example.com --san www.example.com --san "*.example.com"
    python gen_cert.py old.example.com --expired --sha1 --der
"""

import argparse
import ipaddress
import os.path

from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization, hashes
from datetime import datetime, timedelta, timezone


def _general_name(name):
    try:
        return x509.IPAddress(ipaddress.ip_address(name))
    except ValueError:
        return x509.DNSName(name)


def issue_certificate(common_name, output_dir, alt_names=(), days=365, expired=False,
                      sha1=False, der=False):
    """Issue a self-signed cert (SAN = alt_names, or DNSName(CN) if none given)."""

    # ---------------------------------------------------
    # 1. Generate RSA private key
    # ---------------------------------------------------
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    # ---------------------------------------------------
    # 2. Build subject (issuer is the same: self-signed)
    # ---------------------------------------------------
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "BE"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "sslcertificate test"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])

    # ---------------------------------------------------
    # 3. Build SAN extension
    # ---------------------------------------------------
    san = x509.SubjectAlternativeName(
        [_general_name(n) for n in (alt_names or [common_name])]
    )

    # ---------------------------------------------------
    # 4. Validity window
    # ---------------------------------------------------
    now = datetime.now(timezone.utc)
    if expired:
        not_before = now - timedelta(days=days + 1)
        not_after = now - timedelta(days=1)
    else:
        not_before = now
        not_after = now + timedelta(days=days)

    # ---------------------------------------------------
    # 5. Build certificate
    # ---------------------------------------------------
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(san, critical=False)
        .add_extension(
            x509.BasicConstraints(ca=False, path_length=None),
            critical=True
        )
        .sign(private_key=key, algorithm=hashes.SHA1() if sha1 else hashes.SHA256())
    )

    # ---------------------------------------------------
    # 6. Save key and cert
    # ---------------------------------------------------
    os.makedirs(output_dir, exist_ok=True)

    file_stem = common_name.replace("*", "wildcard")
    key_filename = os.path.join(output_dir, f"{file_stem}.key")
    crt_filename = os.path.join(output_dir, f"{file_stem}.{'der' if der else 'crt'}")

    with open(key_filename, "wb") as f:
        f.write(key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption()
        ))

    with open(crt_filename, "wb") as f:
        f.write(cert.public_bytes(serialization.Encoding.DER if der else serialization.Encoding.PEM))

    print(f"[+] Issued certificate: {crt_filename}")
    print(f"[+] Issued private key: {key_filename}")
    return crt_filename


def main():
    parser = argparse.ArgumentParser(description="Issue a throw-away self-signed certificate")
    parser.add_argument("common_name", help="subject CN")
    parser.add_argument("--san", action="append", default=[], help="subjectAltName entry (repeatable)")
    parser.add_argument("-o", "--output-dir", default="certs", help="output directory")
    parser.add_argument("--days", type=int, default=365, help="validity in days")
    parser.add_argument("--expired", action="store_true", help="issue an already expired certificate")
    parser.add_argument("--sha1", action="store_true", help="sign with SHA-1 instead of SHA-256")
    parser.add_argument("--der", action="store_true", help="write DER instead of PEM")
    args = parser.parse_args()

    issue_certificate(args.common_name, args.output_dir, args.san, args.days,
                      args.expired, args.sha1, args.der)


if __name__ == "__main__":
    main()

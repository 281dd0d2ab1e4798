"""Print the metadata of a certificate fetched from a host or read from a file.

Usage:
    python inspect_cert.py --host example.com
    python inspect_cert.py --host 10.0.0.5 --port 8443 --no-verify --check app.internal
    python inspect_cert.py --file certs/example.com.crt --check www.example.com
"""

import argparse
import sys

from sslcertificate import SslCertificate, SslCertificateError


def print_report(cert: SslCertificate, check_host=None):
    """Print one certificate's identity, validity and matching results."""
    print("\n" + "=" * 60)
    print(f"CERTIFICATE: {cert.get_domain() or '(no CN)'}")
    print("=" * 60)
    print(f"  Issuer:              {cert.get_issuer()}")
    print(f"  Organization:        {cert.get_organization()}")
    print(f"  Serial number:       {cert.get_serial_number()}")
    print(f"  Signature algorithm: {cert.get_signature_algorithm()}")
    print(f"  Public key:          {cert.get_public_key_algorithm()} ({cert.get_public_key_size()} bits)")
    print(f"  Fingerprint (SHA1):  {cert.get_fingerprint()}")
    print(f"  Fingerprint (SHA256):{cert.get_fingerprint_sha256()}")
    if cert.get_remote_address():
        print(f"  Remote address:      {cert.get_remote_address()}")
    print("-" * 60)
    print(f"  Valid from:          {cert.valid_from_date().isoformat()}")
    print(f"  Expires:             {cert.expiration_date().isoformat()}")
    print(f"  Lifespan (days):     {cert.lifespan_in_days()}")
    print(f"  Days until expiry:   {cert.days_until_expiration_date()}")
    print("-" * 60)
    print(f"  Domains:             {', '.join(cert.get_domains())}")
    print(f"  Valid now:           {'✓' if cert.is_valid() else '✗'}")
    print(f"  Expired:             {'✗ yes' if cert.is_expired() else '✓ no'}")
    print(f"  Self-signed:         {'yes' if cert.is_self_signed() else 'no'}")
    print(f"  Weak (SHA-1) hash:   {'yes' if cert.uses_weak_hash() else 'no'}")
    print(f"  Precertificate:      {'yes' if cert.is_pre_certificate() else 'no'}")

    if check_host:
        applies = cert.applies_to_url(check_host)
        print("-" * 60)
        print(f"  Applies to {check_host}: {'✓ VALID' if applies else '✗ NO MATCH'}")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Inspect an X.509 certificate")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--host", help="hostname or URL to fetch the certificate from")
    source.add_argument("--file", help="PEM or DER certificate file")
    parser.add_argument("--port", type=int, default=None, help="TLS port (default 443)")
    parser.add_argument("--timeout", type=int, default=None, help="connection timeout in seconds")
    parser.add_argument("--no-verify", action="store_true", help="skip chain/hostname verification")
    parser.add_argument("--check", help="hostname to match the certificate against")
    args = parser.parse_args()

    try:
        if args.host:
            print(f"[*] Fetching certificate from {args.host}")
            cert = SslCertificate.create_for_hostname(
                args.host,
                timeout=args.timeout,
                verify_certificate=not args.no_verify,
                port=args.port,
            )
        else:
            print(f"[*] Reading certificate from {args.file}")
            cert = SslCertificate.create_from_file(args.file)
    except (SslCertificateError, OSError) as e:
        print(f"[!] {e}")
        sys.exit(1)

    print_report(cert, args.check)


if __name__ == "__main__":
    main()

"""SslCertificate accessors, validity and matching over decoded field mappings."""

from datetime import datetime, timedelta, timezone

import pytest

from sslcertificate import PublicKeyAlgorithm, PublicKeyDetail, SslCertificate

VALID_FROM = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
VALID_TO = datetime(2024, 11, 13, 22, 13, 20, tzinfo=timezone.utc)
MIDDLE = datetime(2024, 5, 1, tzinfo=timezone.utc)


# ─────────────────────────────────────────────────────────────
# Accessors
# ─────────────────────────────────────────────────────────────
def test_basic_accessors(make_from_fields):
    cert = make_from_fields()
    assert cert.get_issuer() == "R3"
    assert cert.get_organization() == "Let's Encrypt"
    assert cert.get_serial_number() == "123456789"
    assert cert.get_signature_algorithm() == "RSA-SHA256"
    assert cert.get_domain() == "example.com"
    assert cert.get_fingerprint() == "sha1-fingerprint"
    assert cert.get_fingerprint_sha256() == "sha256-fingerprint"
    assert cert.get_remote_address() == ""


def test_missing_optional_fields_degrade_to_empty_values():
    cert = SslCertificate({"subject": {}, "validFrom_time_t": 0, "validTo_time_t": 1})
    assert cert.get_issuer() == ""
    assert cert.get_organization() == ""
    assert cert.get_serial_number() == ""
    assert cert.get_signature_algorithm() == ""
    assert cert.get_domain() == ""
    assert cert.get_additional_domains() == [""]
    assert cert.get_domains() == []
    assert cert.get_public_key_algorithm() == "Unknown"
    assert cert.get_public_key_size() == 0
    assert not cert.is_pre_certificate()
    assert not cert.uses_weak_hash()


def test_multi_valued_common_name_uses_first_entry(make_from_fields):
    cert = make_from_fields(subject={"CN": ["first.example.com", "second.example.com"]})
    assert cert.get_domain() == "first.example.com"


def test_additional_domains_strip_dns_prefix_and_keep_duplicates(make_from_fields):
    cert = make_from_fields(extensions={
        "subjectAltName": "DNS:a.example.com, DNS:b.example.com, DNS:a.example.com"
    })
    assert cert.get_additional_domains() == ["a.example.com", "b.example.com", "a.example.com"]


def test_get_domains_deduplicates(make_from_fields):
    cert = make_from_fields()
    assert cert.get_domains() == ["example.com", "www.example.com"]
    assert len(cert.get_domains()) == 2


def test_get_domains_puts_primary_domain_last(make_from_fields):
    cert = make_from_fields(
        subject={"CN": "primary.example.com"},
        extensions={"subjectAltName": "DNS:alt.example.com"},
    )
    assert cert.get_domains() == ["alt.example.com", "primary.example.com"]


def test_public_key_accessors(base_fields):
    detail = PublicKeyDetail(type=PublicKeyAlgorithm.EC, bits=256)
    cert = SslCertificate(base_fields, public_key_detail=detail)
    assert cert.get_public_key_algorithm() == "EC"
    assert cert.get_public_key_size() == 256


def test_raw_fields_are_a_copy(make_from_fields):
    cert = make_from_fields()
    fields = cert.get_raw_certificate_fields()
    fields["subject"]["CN"] = "tampered.example.com"
    assert cert.get_domain() == "example.com"


def test_certificate_is_immutable(make_from_fields):
    cert = make_from_fields()
    with pytest.raises(AttributeError):
        cert._fields = {}


# ─────────────────────────────────────────────────────────────
# Validity & expiry
# ─────────────────────────────────────────────────────────────
def test_validity_dates(make_from_fields):
    cert = make_from_fields()
    assert cert.valid_from_date() == VALID_FROM
    assert cert.expiration_date() == VALID_TO
    assert cert.lifespan_in_days() == 365


def test_is_valid_boundaries(make_from_fields):
    cert = make_from_fields()
    assert not cert.is_valid(now=VALID_FROM - timedelta(seconds=1))
    assert cert.is_valid(now=VALID_FROM)
    assert cert.is_valid(now=MIDDLE)
    assert cert.is_valid(now=VALID_TO)
    assert not cert.is_valid(now=VALID_TO + timedelta(seconds=1))


def test_is_expired_boundaries(make_from_fields):
    cert = make_from_fields()
    assert not cert.is_expired(now=MIDDLE)
    assert not cert.is_expired(now=VALID_TO)
    assert cert.is_expired(now=VALID_TO + timedelta(seconds=1))


def test_is_valid_with_url_checks_the_host(make_from_fields):
    cert = make_from_fields()
    assert cert.is_valid("https://www.example.com", now=MIDDLE)
    assert not cert.is_valid("https://api.example.com", now=MIDDLE)
    assert not cert.is_valid("https://www.example.com", now=VALID_TO + timedelta(days=1))


def test_is_valid_until_is_strict_on_threshold(make_from_fields):
    cert = make_from_fields()
    assert cert.is_valid_until(VALID_TO - timedelta(seconds=1), now=MIDDLE)
    assert not cert.is_valid_until(VALID_TO, now=MIDDLE)
    assert not cert.is_valid_until(VALID_TO + timedelta(days=1), now=MIDDLE)


def test_is_valid_until_also_requires_current_validity(make_from_fields):
    cert = make_from_fields()
    assert not cert.is_valid_until(MIDDLE, now=VALID_FROM - timedelta(days=1))
    assert not cert.is_valid_until(MIDDLE, "https://other.org", now=MIDDLE)


def test_days_until_expiration(make_from_fields):
    cert = make_from_fields()
    assert cert.days_until_expiration_date(now=VALID_TO - timedelta(days=10)) == 10
    assert cert.days_until_expiration_date(now=VALID_TO - timedelta(days=10, hours=5)) == 10
    assert cert.days_until_expiration_date(now=VALID_TO + timedelta(days=3)) == -3


def test_lifespan_can_be_negative(make_from_fields):
    cert = make_from_fields(validFrom_time_t=1731536000, validTo_time_t=1700000000)
    assert cert.lifespan_in_days() == -365


# ─────────────────────────────────────────────────────────────
# Flags
# ─────────────────────────────────────────────────────────────
def test_is_self_signed(make_from_fields):
    cert = make_from_fields(issuer={"CN": "ca.test"}, subject={"CN": "ca.test"})
    assert cert.is_self_signed()
    assert not make_from_fields().is_self_signed()


def test_is_self_signed_is_case_sensitive(make_from_fields):
    cert = make_from_fields(issuer={"CN": "CA.test"}, subject={"CN": "ca.test"})
    assert not cert.is_self_signed()


def test_uses_weak_hash(make_from_fields):
    assert make_from_fields(signatureTypeSN="RSA-SHA1").uses_weak_hash()
    assert make_from_fields(
        signatureTypeSN="unknown", signatureTypeLN="sha1WithRSAEncryption"
    ).uses_weak_hash()
    assert not make_from_fields(signatureTypeSN="RSA-SHA256").uses_weak_hash()
    assert make_from_fields(signatureTypeSN="RSA-SHA1").uses_sha1_hash()


def test_is_pre_certificate(make_from_fields):
    assert make_from_fields(extensions={"ct_precert_poison": "NULL"}).is_pre_certificate()
    assert not make_from_fields().is_pre_certificate()


# ─────────────────────────────────────────────────────────────
# Matching
# ─────────────────────────────────────────────────────────────
def test_applies_to_url_with_wildcard(make_from_fields):
    cert = make_from_fields(
        subject={"CN": "*.example.com"},
        extensions={"subjectAltName": "DNS:*.example.com"},
    )
    assert cert.applies_to_url("a.example.com")
    assert cert.applies_to_url("https://foo.example.com/login")
    assert not cert.applies_to_url("example.com")
    assert not cert.applies_to_url("a.b.example.com")


def test_applies_to_url_exact(make_from_fields):
    cert = make_from_fields(subject={"CN": "example.com"}, extensions={})
    assert cert.applies_to_url("example.com")
    assert not cert.applies_to_url("www.example.com")


def test_contains_domain_vs_applies_to_url(make_from_fields):
    cert = make_from_fields(subject={"CN": "example.com"}, extensions={})
    assert cert.contains_domain("sub.example.com")
    assert not cert.applies_to_url("sub.example.com")
    assert cert.applies_to_host("example.com")

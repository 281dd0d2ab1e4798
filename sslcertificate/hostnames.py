"""Hostname-to-certificate matching.

Pure functions over a certificate's domain list; no I/O, no state.
"""

import ipaddress
from typing import Iterable

from sslcertificate.common.url import hostname_of

IP_ADDRESS_PREFIX = "ip address:"


def is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def host_from_target(target: str) -> str:
    """
    Literal IPv4/IPv6 addresses are used verbatim, anything else is
    treated as a URL and reduced to its hostname.
    """
    if is_ip_address(target):
        return target
    return hostname_of(target)


def normalize_certificate_host(certificate_host: str) -> str:
    """Lower-case and drop the `IP Address:` prefix of IP SAN entries."""
    return certificate_host.lower().replace(IP_ADDRESS_PREFIX, "")


def wildcard_host_covers_host(wildcard_host: str, host: str) -> bool:
    """
    True if wildcard_host (e.g. "*.example.com") covers host.

    The `*` stands for exactly one non-empty label: "*.example.com" covers
    "a.example.com" but neither "example.com" nor "a.b.example.com".
    """
    if host == wildcard_host:
        return True

    if not wildcard_host.startswith("*"):
        return False

    if wildcard_host.count(".") < host.count("."):
        return False

    wildcard_suffix = wildcard_host[1:]
    dotted_host = f".{host}"

    if wildcard_suffix == dotted_host:
        return False

    return dotted_host.endswith(wildcard_suffix)


def applies_to_host(certificate_hosts: Iterable[str], target: str) -> bool:
    """
    Strict match of target (URL, hostname or IP) against certificate hosts.
    This is the check to use for trust decisions.
    """
    host = host_from_target(target)

    for certificate_host in certificate_hosts:
        certificate_host = normalize_certificate_host(certificate_host)

        if host == certificate_host:
            return True

        if wildcard_host_covers_host(certificate_host, host):
            return True

    return False


def contains_domain(certificate_hosts: Iterable[str], domain: str) -> bool:
    """
    Loose membership: domain equals a certificate host or is any subdomain
    of one, ignoring wildcard rules. For reporting and search only.
    """
    for certificate_host in certificate_hosts:
        if certificate_host == domain:
            return True

        if domain.endswith(f".{certificate_host}"):
            return True

    return False

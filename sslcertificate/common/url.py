from urllib.parse import urlsplit

from sslcertificate.common.errors import InvalidUrl


def hostname_of(url: str) -> str:
    """
    Extract the lower-cased hostname from a URL or bare host string.
    Internationalized names come back in their punycode (IDNA) form.

    Args:
        url: e.g. "https://example.com/path", "example.com:8443" or "example.com"
    Returns:
        the hostname, raises InvalidUrl if none can be determined
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidUrl.could_not_determine_host(url)

    if "://" not in candidate:
        candidate = f"https://{candidate}"

    try:
        host = urlsplit(candidate).hostname
    except ValueError:
        raise InvalidUrl.could_not_determine_host(url) from None

    if not host:
        raise InvalidUrl.could_not_determine_host(url)

    return to_ascii_host(host)


def to_ascii_host(host: str) -> str:
    """IDNA-encode host; names the codec rejects are returned unchanged."""
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError:
        return host

"""Exception taxonomy for certificate decoding and retrieval."""

from typing import Optional


class SslCertificateError(Exception):
    """Base exception for all sslcertificate errors."""

    pass


class CouldNotDecodeCertificate(SslCertificateError, ValueError):
    """Raw bytes or text are not a parseable X.509 certificate."""

    pass


class InvalidUrl(SslCertificateError, ValueError):
    """No hostname could be determined from the given URL."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url

    @classmethod
    def could_not_determine_host(cls, url: str) -> "InvalidUrl":
        return cls(f"Could not determine host from url `{url}`", url=url)


class CouldNotDownloadCertificate(SslCertificateError, ConnectionError):
    """The certificate could not be fetched from a remote host."""

    def __init__(self, message: str, hostname: Optional[str] = None, port: Optional[int] = None):
        super().__init__(message)
        self.hostname = hostname
        self.port = port


class HostDoesNotExist(CouldNotDownloadCertificate):
    """DNS resolution failed for the host."""

    def __init__(self, hostname: str, port: Optional[int] = None):
        super().__init__(f"The host named `{hostname}` does not exist.", hostname=hostname, port=port)


class NoCertificateInstalled(CouldNotDownloadCertificate):
    """The handshake completed but the peer presented no certificate."""

    def __init__(self, hostname: str, port: Optional[int] = None):
        super().__init__(
            f"Could not find a certificate on host named `{hostname}`.", hostname=hostname, port=port
        )


class UnknownDownloadError(CouldNotDownloadCertificate):
    """Timeouts, refused connections and TLS handshake failures."""

    def __init__(self, hostname: str, reason: str, port: Optional[int] = None):
        super().__init__(
            f"Could not download certificate for host `{hostname}` because {reason}",
            hostname=hostname,
            port=port,
        )
        self.reason = reason

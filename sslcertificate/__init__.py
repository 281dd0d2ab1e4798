"""Inspect X.509 certificates and check them against hostnames."""

from sslcertificate.certificate import SslCertificate
from sslcertificate.common.errors import (
    CouldNotDecodeCertificate,
    CouldNotDownloadCertificate,
    HostDoesNotExist,
    InvalidUrl,
    NoCertificateInstalled,
    SslCertificateError,
    UnknownDownloadError,
)
from sslcertificate.common.protocol import PublicKeyAlgorithm, PublicKeyDetail
from sslcertificate.downloader import Downloader

__version__ = "1.0.0"

__all__ = [
    "CouldNotDecodeCertificate",
    "CouldNotDownloadCertificate",
    "Downloader",
    "HostDoesNotExist",
    "InvalidUrl",
    "NoCertificateInstalled",
    "PublicKeyAlgorithm",
    "PublicKeyDetail",
    "SslCertificate",
    "SslCertificateError",
    "UnknownDownloadError",
]

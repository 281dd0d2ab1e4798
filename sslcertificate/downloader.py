"""Retrieval of raw certificates from live hosts and local files."""

import logging
import socket
import ssl
from typing import List, Optional, Tuple

from sslcertificate import config
from sslcertificate.certificate import SslCertificate
from sslcertificate.common.errors import (
    HostDoesNotExist,
    NoCertificateInstalled,
    UnknownDownloadError,
)
from sslcertificate.common.url import hostname_of

logger = logging.getLogger(__name__)


def read_from_file(path: str) -> bytes:
    """Raw certificate bytes (PEM or DER). OSError propagates unchanged."""
    with open(path, "rb") as f:
        return f.read()


def format_remote_address(peer) -> str:
    """(ip, port[, flowinfo, scope_id]) -> "ip:port" ("[ip]:port" for IPv6)."""
    ip, port = peer[0], peer[1]
    if ":" in ip:
        return f"[{ip}]:{port}"
    return f"{ip}:{port}"


class Downloader:
    def __init__(
        self,
        port: Optional[int] = None,
        timeout: Optional[int] = None,
        verify_peer: Optional[bool] = None,
        ip_address: Optional[str] = None,
    ):
        self.port = port if port is not None else config.DEFAULT_PORT
        self.timeout = timeout if timeout is not None else config.DEFAULT_TIMEOUT
        self.verify_peer = verify_peer if verify_peer is not None else config.VERIFY_PEER
        self.ip_address = ip_address

    def _ssl_context(self) -> ssl.SSLContext:
        """Verifying context by default; inspection-only context otherwise."""
        if self.verify_peer:
            return ssl.create_default_context()

        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        return ctx

    def fetch_chain(self, hostname: str) -> Tuple[List[bytes], str]:
        """
        Perform a TLS handshake with hostname and return the presented chain.

        Args:
            hostname: host to connect to, also sent as SNI
        Returns:
            (DER bytes of each peer certificate, leaf first, "ip:port" of the remote end)
        """
        address = self.ip_address or hostname
        logger.debug("Connecting to %s:%d (sni=%s, verify=%s)", address, self.port, hostname, self.verify_peer)

        try:
            with socket.create_connection((address, self.port), timeout=self.timeout) as sock:
                with self._ssl_context().wrap_socket(sock, server_hostname=hostname) as ssock:
                    der = ssock.getpeercert(binary_form=True)
                    chain = _presented_chain(ssock, der)
                    remote_address = format_remote_address(ssock.getpeername())
        except socket.gaierror as e:
            logger.warning("DNS resolution failed for %s: %s", address, e)
            raise HostDoesNotExist(hostname, port=self.port) from e
        except socket.timeout as e:
            logger.warning("Timed out connecting to %s:%d", address, self.port)
            raise UnknownDownloadError(hostname, "the connection timed out", port=self.port) from e
        except ssl.SSLError as e:
            logger.warning("TLS handshake with %s:%d failed: %s", address, self.port, e)
            raise UnknownDownloadError(hostname, f"the TLS handshake failed: {e}", port=self.port) from e
        except OSError as e:
            logger.warning("Could not connect to %s:%d: %s", address, self.port, e)
            raise UnknownDownloadError(hostname, str(e), port=self.port) from e

        if not der:
            raise NoCertificateInstalled(hostname, port=self.port)

        return chain, remote_address

    def fetch_raw(self, hostname: str) -> Tuple[bytes, str]:
        """(DER bytes of the peer's leaf certificate, "ip:port" of the remote end)"""
        chain, remote_address = self.fetch_chain(hostname)
        return chain[0], remote_address

    def get_certificates(self, url: str) -> List[SslCertificate]:
        """
        The certificates presented by the peer, leaf first.

        Interpreters without SSLSocket.get_unverified_chain (Python < 3.13)
        only expose the leaf.
        """
        hostname = hostname_of(url)
        chain, remote_address = self.fetch_chain(hostname)
        return [
            SslCertificate.create_from_string(der, remote_address=remote_address)
            for der in chain
        ]

    def for_host(self, url: str) -> SslCertificate:
        der, remote_address = self.fetch_raw(hostname_of(url))
        return SslCertificate.create_from_string(der, remote_address=remote_address)


def _presented_chain(ssock, leaf: Optional[bytes]) -> List[bytes]:
    if not leaf:
        return []

    if not hasattr(ssock, "get_unverified_chain"):
        return [leaf]

    chain = [bytes(der) for der in ssock.get_unverified_chain() or []]
    if not chain or chain[0] != leaf:
        logger.debug("Peer chain unavailable or does not start with the leaf; using the leaf only")
        return [leaf]
    return chain

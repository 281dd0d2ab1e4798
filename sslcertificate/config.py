"""Retrieval defaults, read from the environment (and a local .env file)."""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DEFAULT_PORT = int(os.getenv("SSL_CERTIFICATE_PORT", "443"))
DEFAULT_TIMEOUT = int(os.getenv("SSL_CERTIFICATE_TIMEOUT", "30"))
VERIFY_PEER = _env_bool("SSL_CERTIFICATE_VERIFY_PEER", "true")
DEFAULT_FINGERPRINT_ALGORITHM = os.getenv("SSL_CERTIFICATE_FINGERPRINT_ALGORITHM", "sha1")

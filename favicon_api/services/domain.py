import re
import logging
from urllib.parse import urlparse
from typing import Mapping, Dict

from requests.utils import DEFAULT_ACCEPT_ENCODING

logger = logging.getLogger(__name__)

DOMAIN_PATTERN = re.compile(r"([a-z0-9-]+\.)+[a-z0-9]+\Z")

# Request-specific headers that must not be forwarded upstream
DROPPED_HEADERS = ("host", "content-length", "accept-encoding")


def normalize_domain(domain: str) -> str:
    """
    Extract the hostname from ``http://<domain>``.
    Normalization is best-effort: if the authority can't be parsed the raw
    domain is returned, so the result is not guaranteed to be valid DNS syntax.
    """
    try:
        hostname = urlparse(f"http://{domain}").hostname
    except ValueError as e:
        logger.debug(f"Could not parse hostname from {domain!r}: {e}")
        return domain

    if not hostname:
        return domain
    hostname = hostname.lower()
    try:
        return hostname.encode("idna").decode("ascii")
    except UnicodeError as e:
        logger.debug(f"Could not IDNA-encode {hostname!r}: {e}")
        return hostname


def is_valid_domain(hostname: str) -> bool:
    return DOMAIN_PATTERN.search(hostname) is not None


def clean_forward_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """
    Copy inbound headers for outbound fetches.
    Accept-Encoding is replaced with the encodings requests can decode itself.
    """
    forwarded = {}
    for name, value in headers.items():
        if name.lower() in DROPPED_HEADERS:
            continue
        forwarded[name] = value
    forwarded["Accept-Encoding"] = DEFAULT_ACCEPT_ENCODING
    return forwarded

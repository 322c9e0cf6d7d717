import logging
from typing import Callable, Dict, List, Optional, Tuple

import requests
from fastapi.responses import Response

from favicon_api.config import BROWSER_CACHE_CONTROL, ICON_DOWNLOAD_TIMEOUT, PROXY_PROVIDERS
from favicon_api.services.placeholder import placeholder_response

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/129.0.0.0 Safari/537.36",
    "Accept": "image/*,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def download_icon(icon_url: str) -> Optional[Tuple[bytes, str]]:
    resp = requests.get(
        icon_url, headers=DEFAULT_HEADERS, timeout=ICON_DOWNLOAD_TIMEOUT, allow_redirects=True
    )
    if resp.status_code != 200:
        logger.warning(f"Failed to download {icon_url}: HTTP {resp.status_code}")
        return None
    content_type = resp.headers.get("content-type", "image/png")
    if not content_type.lower().startswith("image/") or not resp.content:
        logger.warning(f"Invalid content-type or empty body for {icon_url}: {content_type}")
        return None
    return resp.content, content_type


def fetch_google_favicon(domain: str) -> Optional[Tuple[bytes, str]]:
    return download_icon(f"https://www.google.com/s2/favicons?sz=64&domain={domain}")


def fetch_duckduckgo_favicon(domain: str) -> Optional[Tuple[bytes, str]]:
    return download_icon(f"https://icons.duckduckgo.com/ip3/{domain}.ico")


PROVIDERS: Dict[str, Callable[[str], Optional[Tuple[bytes, str]]]] = {
    "google": fetch_google_favicon,
    "duckduckgo": fetch_duckduckgo_favicon,
}


def proxy_favicon(domain: str, providers: Optional[List[str]] = None) -> Response:
    """
    Serve the favicon of ``domain`` from the first public provider that has one.
    Falls back to the placeholder glyph when every provider fails.
    """
    for name in providers or PROXY_PROVIDERS:
        fetcher = PROVIDERS.get(name)
        if fetcher is None:
            logger.warning(f"Unknown favicon provider '{name}', skipping")
            continue
        try:
            result = fetcher(domain)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Provider {name} failed for {domain}: {e}")
            continue
        if result is None:
            continue
        content, content_type = result
        logger.info(f"Served favicon for {domain} from {name}")
        return Response(
            content=content,
            status_code=200,
            media_type=content_type,
            headers={
                "Cache-Control": BROWSER_CACHE_CONTROL,
                "X-Favicon-Source": name,
            },
        )

    logger.info(f"No provider had a favicon for {domain}")
    return placeholder_response(domain)

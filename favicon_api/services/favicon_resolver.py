import base64
import logging
import re
import time
from typing import Mapping, Optional

import requests
from fastapi.responses import PlainTextResponse, Response

from favicon_api.config import BROWSER_CACHE_CONTROL, FAVICON_CACHE_TTL_MS, ICON_DOWNLOAD_TIMEOUT
from favicon_api.models import CachedIcon
from favicon_api.services.domain import clean_forward_headers, is_valid_domain, normalize_domain
from favicon_api.services.icon_cache import IconCache
from favicon_api.services.icon_discovery import get_favicons
from favicon_api.services.placeholder import placeholder_response
from favicon_api.services.proxy_favicon import proxy_favicon

logger = logging.getLogger(__name__)

DEFAULT_ICON_TYPE = "image/png"
DATA_URI_TYPE = re.compile(r"data:(image[^;,]*)[;,]")


def elapsed_ms(start_time: float) -> str:
    return f"{int((time.monotonic() - start_time) * 1000)}ms"


def icon_response(image_bytes: bytes, content_type: str, start_time: float, cache_status: Optional[str]) -> Response:
    headers = {
        "Cache-Control": BROWSER_CACHE_CONTROL,
        "Content-Length": str(len(image_bytes)),
        "X-Execution-Time": elapsed_ms(start_time),
    }
    if cache_status:
        headers["X-Cache"] = cache_status
    return Response(content=image_bytes, status_code=200, media_type=content_type, headers=headers)


def discover_icons(url: str, headers):
    try:
        data = get_favicons(url, headers)
        logger.debug(f"Discovery result for {url}: {data}")
        return data.icons
    except Exception as e:
        logger.error(f"Icon discovery failed for {url}: {e}")
        return []


def decode_data_uri(href: str) -> Optional[CachedIcon]:
    """
    Decode an inline ``data:image/...;base64,...`` icon.
    Returns None when there is no payload after the comma.
    """
    parts = href.split(",", 1)
    payload = parts[1] if len(parts) > 1 else ""
    if not payload:
        return None
    match = DATA_URI_TYPE.search(href)
    content_type = match.group(1) if match else DEFAULT_ICON_TYPE
    return CachedIcon(image_bytes=base64.b64decode(payload), content_type=content_type)


def fetch_remote_icon(href: str, headers) -> Optional[CachedIcon]:
    resp = requests.get(href, headers=headers, timeout=ICON_DOWNLOAD_TIMEOUT, allow_redirects=True)
    if not 200 <= resp.status_code < 300:
        logger.warning(f"Failed to download {href}: HTTP {resp.status_code}")
        return None
    return CachedIcon(
        image_bytes=resp.content,
        content_type=resp.headers.get("Content-Type") or DEFAULT_ICON_TYPE,
    )


def resolve_favicon(domain: str, headers: Mapping[str, str], cache: Optional[IconCache] = None) -> Response:
    """
    Resolve the favicon for ``domain`` into a complete HTTP response.

    Discovery runs over HTTP, then HTTPS, then defers to the proxy providers.
    Invalid domains and unreachable icons degrade to the 404 placeholder glyph;
    only decoding, downloading or caching the selected icon can produce a 500.
    Without a cache every request is resolved from scratch.
    """
    start_time = time.monotonic()
    hostname = normalize_domain(domain)

    if cache is not None:
        cached = cache.get(hostname)
        if cached is not None:
            logger.info(f"Cache hit for {hostname}")
            return icon_response(cached.image_bytes, cached.content_type, start_time, "HIT")

    if not is_valid_domain(hostname):
        logger.info(f"Rejected invalid domain {domain!r}")
        return placeholder_response(domain)

    forward_headers = clean_forward_headers(headers)

    icons = discover_icons(f"http://{hostname}", forward_headers)
    if not icons:
        # Retry over HTTPS
        icons = discover_icons(f"https://{hostname}", forward_headers)

    if not icons:
        logger.info(f"No declared icons for {hostname}, using proxy providers")
        return proxy_favicon(hostname)

    selected_icon = icons[0]

    try:
        icon = None
        if selected_icon and "data:image" in selected_icon.href:
            icon = decode_data_uri(selected_icon.href)
            if icon is None:
                # TODO: report payload-less data URIs as their own error instead of a failed download
                logger.warning(f"Data URI icon for {hostname} has no payload, fetching it as a URL")

        if icon is None:
            if not selected_icon:
                return placeholder_response(domain)
            icon = fetch_remote_icon(selected_icon.href, forward_headers)
            if icon is None:
                return placeholder_response(domain)

        if cache is not None:
            cache.set(hostname, icon, FAVICON_CACHE_TTL_MS)

        logger.info(f"Resolved favicon for {hostname} ({icon.content_type}, {len(icon.image_bytes)} bytes)")
        return icon_response(icon.image_bytes, icon.content_type, start_time, "MISS" if cache is not None else None)
    except Exception as e:
        logger.error(f"Error fetching the selected icon for {hostname}: {e}", exc_info=True)
        return PlainTextResponse("Failed to fetch the icon", status_code=500)

import logging
from typing import Dict, List, Optional
from urllib.parse import urljoin

import cloudscraper
from bs4 import BeautifulSoup

from favicon_api.config import FAVICON_REQUEST_TIMEOUT
from favicon_api.models import DiscoveryResult, IconDescriptor

logger = logging.getLogger(__name__)


def fetch_html(
    url: str,
    scraper: cloudscraper.CloudScraper,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = FAVICON_REQUEST_TIMEOUT,
):
    """Fetch a page, raising on connection errors and non-2xx statuses."""
    resp = scraper.get(url, headers=headers, timeout=timeout, allow_redirects=True)
    resp.raise_for_status()
    return resp


def is_icon_rel(rel) -> bool:
    # bs4 hands multi-valued rel attributes back as a list of tokens
    if not rel:
        return False
    tokens = rel if isinstance(rel, list) else rel.split()
    return any("icon" in token.lower() for token in tokens)


def extract_icons(html: str, base_url: str) -> List[IconDescriptor]:
    """
    Collect declared icon links in document order.
    Relative hrefs are resolved against ``base_url``; inline data URIs are kept as is.
    """
    soup = BeautifulSoup(html, "html.parser")
    icons = []
    seen = set()
    for tag in soup.find_all("link", rel=is_icon_rel):
        href = (tag.get("href") or "").strip()
        if not href:
            continue
        if not href.startswith("data:"):
            href = urljoin(base_url, href)
        if href in seen:
            continue
        seen.add(href)
        icons.append(IconDescriptor(href=href, sizes=tag.get("sizes")))
    return icons


def get_favicons(url: str, headers: Optional[Dict[str, str]] = None) -> DiscoveryResult:
    scraper = cloudscraper.create_scraper()
    resp = fetch_html(url, scraper, headers=headers)
    icons = extract_icons(resp.text, resp.url or url)
    logger.info(f"Discovered {len(icons)} icon(s) at {url}")
    return DiscoveryResult(icons=icons)

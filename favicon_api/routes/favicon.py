from typing import Optional
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from favicon_api.config import FAVICON_CACHE_ENABLED
from favicon_api.services.favicon_resolver import resolve_favicon
from favicon_api.services.icon_cache import IconCache

router = APIRouter()

logger = logging.getLogger(__name__)


def get_icon_cache() -> Optional[IconCache]:
    if not FAVICON_CACHE_ENABLED:
        return None
    return IconCache()


@router.get("/favicon/{domain}")
def get_favicon(domain: str, request: Request, cache: Optional[IconCache] = Depends(get_icon_cache)) -> Response:
    logger.debug(f"Favicon requested for {domain!r} (cache {'on' if cache else 'off'})")
    return resolve_favicon(domain, request.headers, cache=cache)


@router.get("/health")
def health(cache: Optional[IconCache] = Depends(get_icon_cache)):
    return {"status": "ok", "cache": cache is not None}

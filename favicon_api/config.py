import os

# Environment overrides for the favicon service
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./favicons.db")

FAVICON_CACHE_ENABLED = os.getenv("FAVICON_CACHE_ENABLED", "true").lower() in ("1", "true", "yes", "on")
FAVICON_CACHE_TTL_MS = int(os.getenv("FAVICON_CACHE_TTL_MS", 24 * 60 * 60 * 1000))  # 24 hours

FAVICON_REQUEST_TIMEOUT = float(os.getenv("FAVICON_REQUEST_TIMEOUT", 15))
ICON_DOWNLOAD_TIMEOUT = float(os.getenv("ICON_DOWNLOAD_TIMEOUT", 20))

PROXY_PROVIDERS = [
    name.strip()
    for name in os.getenv("PROXY_PROVIDERS", "google,duckduckgo").split(",")
    if name.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

BROWSER_CACHE_CONTROL = "public, max-age=86400"

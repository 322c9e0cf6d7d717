import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from favicon_api.models import CachedIcon, FaviconCacheEntry, SessionLocal

logger = logging.getLogger(__name__)


class IconCache:
    """Key-value store of resolved favicons, one expiring row per domain."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[CachedIcon]:
        db = self.session_factory()
        try:
            entry = db.query(FaviconCacheEntry).filter(FaviconCacheEntry.domain == key).first()
            if entry is None:
                return None
            if entry.expires_at <= datetime.utcnow():
                logger.debug(f"Cache entry for {key} expired at {entry.expires_at}")
                db.delete(entry)
                db.commit()
                return None
            return CachedIcon(image_bytes=entry.image_bytes, content_type=entry.content_type)
        finally:
            db.close()

    def set(self, key: str, value: CachedIcon, ttl_ms: int) -> None:
        expires_at = datetime.utcnow() + timedelta(milliseconds=ttl_ms)
        db = self.session_factory()
        try:
            entry = db.query(FaviconCacheEntry).filter(FaviconCacheEntry.domain == key).first()
            if entry is None:
                entry = FaviconCacheEntry(domain=key)
                db.add(entry)
            self._fill(entry, value, expires_at)
            try:
                db.commit()
            except IntegrityError:
                # Another writer inserted this domain first
                db.rollback()
                logger.debug(f"Concurrent cache insert for {key}, updating existing entry")
                entry = db.query(FaviconCacheEntry).filter(FaviconCacheEntry.domain == key).one()
                self._fill(entry, value, expires_at)
                db.commit()
            logger.info(f"Cached favicon for {key} until {expires_at}")
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    def _fill(entry: FaviconCacheEntry, value: CachedIcon, expires_at: datetime) -> None:
        entry.image_bytes = value.image_bytes
        entry.content_type = value.content_type
        entry.expires_at = expires_at

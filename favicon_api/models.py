from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    LargeBinary,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker
from pydantic import BaseModel
from typing import Optional, List

from favicon_api.config import DATABASE_URL

Base = declarative_base()


class FaviconCacheEntry(Base):
    __tablename__ = "favicon_cache"

    id = Column(Integer, primary_key=True, index=True)
    domain = Column(String, unique=True, nullable=False)
    image_bytes = Column(LargeBinary, nullable=False)
    content_type = Column(String, nullable=False)
    expires_at = Column(DateTime, nullable=False)


class IconDescriptor(BaseModel):
    href: str
    sizes: Optional[str] = None


class DiscoveryResult(BaseModel):
    icons: List[IconDescriptor] = []


class CachedIcon(BaseModel):
    image_bytes: bytes
    content_type: str


# SQLite database setup
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create tables
Base.metadata.create_all(bind=engine)

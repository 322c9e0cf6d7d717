import io
import os

# Keep the test run from creating favicons.db in the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from favicon_api.models import Base
from favicon_api.services.icon_cache import IconCache


@pytest.fixture
def icon_cache():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield IconCache(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (16, 16), "blue").save(buffer, format="PNG")
    return buffer.getvalue()

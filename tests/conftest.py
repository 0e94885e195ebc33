"""
Shared fixtures: a throwaway SQLite database per test, service-level
sessions and an HTTP client built from the real application factory.
"""
import random

import cv2
import numpy as np
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from promptdesk.core.config import Settings
from promptdesk.database.session import build_engine, build_session_factory, create_schema
from promptdesk.main import create_app
from promptdesk.services.file_storage import FileStorage


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'promptdesk-test.db'}",
        uploads_dir=tmp_path / "uploads",
        log_dir=tmp_path / "logs",
        log_to_console=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def session(settings):
    engine = build_engine(settings)
    await create_schema(engine)
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def storage(settings) -> FileStorage:
    storage = FileStorage(settings.uploads_dir)
    storage.initialize()
    return storage


@pytest.fixture
def client(settings):
    app = create_app(settings, rng=random.Random(42))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def image_bytes():
    """Factory for encoded test images: image_bytes(width, height, ext=".png")."""
    def _make(width: int = 64, height: int = 48, ext: str = ".png") -> bytes:
        image = np.zeros((height, width, 3), dtype=np.uint8)
        image[:, : width // 2] = (255, 128, 0)
        ok, encoded = cv2.imencode(ext, image)
        assert ok
        return encoded.tobytes()

    return _make

"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from hela.api.app import create_app
from hela.api.dependencies import Services
from hela.classification.pipeline import Classifier
from hela.store.service import InMemoryRecordStore
from hela.vision.models import DetectedObject, VisionSummary


@pytest.fixture
def flower_vision() -> VisionSummary:
    """Vision summary of a pink flower photo."""
    return VisionSummary(
        objects=[
            DetectedObject(label="flower", confidence=0.95),
            DetectedObject(label="plant", confidence=0.87),
        ],
        ocr_text="",
        colors=["Pink"],
    )


@pytest.fixture
def services() -> Services:
    """Services with no generative tiers and an empty in-memory store."""
    return Services(classifier=Classifier(), store=InMemoryRecordStore())


@pytest.fixture
async def client(services: Services) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    Yields:
        AsyncClient configured for testing.
    """
    app = create_app(services=services)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

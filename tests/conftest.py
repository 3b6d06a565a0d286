"""
Shared fixtures: an in-memory Mongo collection, a store over it and a
test client for an app wired to both.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.services.chapter_store import ChapterStore


@pytest.fixture
def collection():
    """Fresh in-memory Chapters collection."""
    return mongomock.MongoClient()["PhDSummary"]["Chapters"]


@pytest.fixture
def store(collection):
    """Chapter store over the in-memory collection."""
    return ChapterStore(collection)


@pytest.fixture
def settings(tmp_path):
    """Settings with uploads redirected to a temporary directory."""
    return Settings(UPLOAD_DIR=str(tmp_path / "images"))


@pytest.fixture
def client(settings, store):
    """Test client for an app using the in-memory store, lifespan included."""
    with TestClient(create_app(settings=settings, store=store)) as test_client:
        yield test_client


@pytest.fixture
def chapter_payload():
    """Chapter payload with nested subsections and findings."""
    return {
        "chapterTitle": "Literature Review",
        "subsections": [
            {
                "subsectionTitle": "Prior Work",
                "findings": [
                    {
                        "findingDescription": "Sparse models generalize poorly",
                        "supportingAuthors": ["Smith", "Okafor"],
                    },
                    {
                        "findingDescription": "Dense retrieval helps recall",
                        "supportingAuthors": ["Lee"],
                    },
                ],
            },
            {
                "subsectionTitle": "Open Problems",
                "findings": [],
            },
        ],
        "tags": ["retrieval", "survey"],
    }

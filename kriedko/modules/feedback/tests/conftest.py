# kriedko/modules/feedback/tests/conftest.py

import pytest
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List

from fastapi.testclient import TestClient

from kriedko.core.auth import ADMIN_HEADER
from kriedko.core.config import Settings, StoreBackend
from kriedko.core.database import build_engine
from kriedko.modules.feedback.services.admin_service import AdminService
from kriedko.modules.feedback.services.feedback_service import FeedbackService
from kriedko.modules.feedback.storage.file_store import FileSubmissionStore
from kriedko.modules.feedback.storage.memory_store import InMemorySubmissionStore
from kriedko.modules.feedback.storage.sql_store import SqlSubmissionStore


TEST_ADMIN_TOKEN = "test-admin-token"
TEST_ADMIN_USER = "manager"
TEST_ADMIN_PASS = "s3cret-pass"

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


# Store fixtures
@pytest.fixture
def memory_store() -> InMemorySubmissionStore:
    """Fresh process-local store."""
    return InMemorySubmissionStore()


@pytest.fixture
def file_store(tmp_path) -> FileSubmissionStore:
    """File store writing into a per-test directory."""
    return FileSubmissionStore(tmp_path / "data" / "submissions.json")


@pytest.fixture
def sql_store() -> Generator[SqlSubmissionStore, None, None]:
    """SQL store on in-memory SQLite."""
    store = SqlSubmissionStore(build_engine("sqlite://"))
    yield store
    store.close()


# Service fixtures
@pytest.fixture
def feedback_service(memory_store: InMemorySubmissionStore) -> FeedbackService:
    """Ingestion service with a frozen clock."""
    return FeedbackService(memory_store, clock=lambda: FIXED_NOW)


@pytest.fixture
def admin_service(memory_store: InMemorySubmissionStore) -> AdminService:
    return AdminService(memory_store)


# App fixtures
@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment, with a fast stream."""
    return Settings(
        _env_file=None,
        environment="testing",
        storage_backend=StoreBackend.MEMORY,
        admin_user=TEST_ADMIN_USER,
        admin_pass=TEST_ADMIN_PASS,
        admin_token=TEST_ADMIN_TOKEN,
        session_secret="test-session-secret",
        remote_aggregator_url=None,
        stream_poll_interval_seconds=0.01,
        stream_keepalive_seconds=0.05,
        stream_max_lifetime_seconds=0.2,
    )


@pytest.fixture
def app(settings: Settings, memory_store: InMemorySubmissionStore):
    from kriedko.app.main import create_app

    return create_app(settings=settings, store=memory_store)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {ADMIN_HEADER: TEST_ADMIN_TOKEN}


# Mock data fixtures
@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """Raw public form submission."""
    return {
        "mealPreference": "veg",
        "taste": 5,
        "service": 4,
        "wait": 3,
        "overall": 5,
        "favouriteItem": "Paneer tikka was amazing",
        "improvements": "Service was a bit slow",
    }


def make_record(
    submission_id: str,
    created_at: str,
    ratings: Dict[str, Any] = None,
    label: str = "neutral",
    score: float = 0.0,
    **extra: Any,
) -> Dict[str, Any]:
    """Stored record in wire shape, as an import file would carry it."""
    record = {
        "id": submission_id,
        "createdAt": created_at,
        "mealPreference": None,
        "taste": None,
        "service": None,
        "wait": None,
        "overall": None,
        "favouriteItem": "",
        "improvements": "",
        "experienceIndex": None,
        "sentiment": {"score": score, "label": label},
    }
    record.update(ratings or {})
    record.update(extra)
    return record


@pytest.fixture
def sample_records() -> List[Dict[str, Any]]:
    """Three stored submissions, oldest first."""
    return [
        make_record(
            "1714550000000_aaaaa",
            "2024-05-01T07:53:20.000Z",
            {"taste": 5, "service": 5, "wait": 5, "overall": 5, "experienceIndex": 5.0},
            label="positive",
            score=0.3,
            favouriteItem="Masala dosa",
            mealPreference="veg",
        ),
        make_record(
            "1714560000000_bbbbb",
            "2024-05-01T10:40:00.000Z",
            {"taste": 2, "service": 1, "wait": 1, "overall": 2, "experienceIndex": 1.5},
            label="negative",
            score=-0.3,
            improvements="Food was cold and the waiter was rude",
            mealPreference="non-veg",
        ),
        make_record(
            "1714570000000_ccccc",
            "2024-05-01T13:26:40.000Z",
            {"taste": 4, "overall": 4, "experienceIndex": 4.0},
            favouriteItem="Filter coffee",
            mealPreference="jain",
        ),
    ]


@pytest.fixture
def record_factory():
    return make_record

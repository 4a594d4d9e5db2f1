import os
import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import MagicMock

from bson import ObjectId

os.environ.setdefault("DATABASE_URL", "mongodb://localhost:27017/test_db")
os.environ.setdefault("MONGO_DB", "test_db")

from fastapi.testclient import TestClient

from shared.models.users_model import UsersModel
from shared.http.rate_limit import FixedWindowRateLimiter
from modules.users.services.user_service import UserService


class MockCursor:
    def __init__(self, data: list):
        self._data = data
        self.sort_spec = None
        self.skipped = None
        self.limited = None

    def sort(self, spec, direction=None):
        self.sort_spec = spec
        return self

    def skip(self, n: int):
        self.skipped = n
        return self

    def limit(self, n: int):
        self.limited = n
        return self

    def __iter__(self):
        return iter(self._data)


def make_user_doc(name: str, email: str, created_at: datetime) -> dict:
    return {
        "_id": ObjectId(),
        "name": name,
        "email": email,
        "created_at": created_at,
        "updated_at": created_at,
    }


@pytest.fixture
def mock_mongo_collection() -> MagicMock:
    collection = MagicMock()
    collection.find_one = MagicMock(return_value=None)
    collection.insert_one = MagicMock(
        side_effect=lambda doc: MagicMock(inserted_id=ObjectId())
    )
    collection.find = MagicMock(return_value=MockCursor([]))
    collection.count_documents = MagicMock(return_value=0)
    collection.find_one_and_update = MagicMock(return_value=None)
    collection.find_one_and_delete = MagicMock(return_value=None)
    return collection


@pytest.fixture
def mock_mongo_client() -> MagicMock:
    client = MagicMock()
    client.admin.command = MagicMock(return_value={"ok": 1})
    return client


@pytest.fixture
def sample_user_doc() -> dict:
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return make_user_doc("Test User", "test@example.com", now)


@pytest.fixture
def sample_user(sample_user_doc: dict) -> UsersModel:
    return UsersModel.from_document(sample_user_doc)


@pytest.fixture
def user_docs() -> list[dict]:
    """Three users, newest first."""
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return [
        make_user_doc("Carol", "carol@example.com", base + timedelta(minutes=2)),
        make_user_doc("Bob", "bob@example.com", base + timedelta(minutes=1)),
        make_user_doc("Alice", "alice@example.com", base),
    ]


@pytest.fixture
def user_service(mock_mongo_collection: MagicMock) -> UserService:
    return UserService(collection=mock_mongo_collection)


@pytest.fixture
def mock_user_service() -> MagicMock:
    return MagicMock(spec=UserService)


@pytest.fixture
def api_client(mock_user_service: MagicMock) -> TestClient:
    from main import create_app

    app = create_app(
        user_service=mock_user_service,
        limiter=FixedWindowRateLimiter(max_requests=1000, window_seconds=900),
    )
    return TestClient(app)

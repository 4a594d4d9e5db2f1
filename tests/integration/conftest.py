import pytest
from typing import Generator

from pymongo import MongoClient

from shared.http.rate_limit import FixedWindowRateLimiter
from modules.users.services.user_service import UserService


@pytest.fixture(scope="session")
def mongodb_container():
    try:
        from testcontainers.mongodb import MongoDbContainer

        container = MongoDbContainer("mongo:7.0")
        container.start()
    except Exception as e:
        pytest.skip(f"MongoDB container unavailable: {e}")
    yield container
    container.stop()


@pytest.fixture(scope="session")
def mongodb_uri(mongodb_container) -> str:
    return mongodb_container.get_connection_url()


@pytest.fixture(scope="session")
def mongodb_client(mongodb_uri: str) -> Generator[MongoClient, None, None]:
    client = MongoClient(mongodb_uri, tz_aware=True)
    yield client
    client.close()


@pytest.fixture
def test_database(mongodb_client: MongoClient):
    db_name = "test_user_service"
    db = mongodb_client[db_name]
    yield db
    mongodb_client.drop_database(db_name)


@pytest.fixture
def users_collection(test_database):
    return test_database["users"]


@pytest.fixture
def integration_user_service(users_collection) -> UserService:
    service = UserService(collection=users_collection)
    service.ensure_indexes()
    return service


@pytest.fixture
def integration_app(integration_user_service: UserService):
    from main import create_app

    return create_app(
        user_service=integration_user_service,
        limiter=FixedWindowRateLimiter(max_requests=1000, window_seconds=900),
    )

import pytest
from unittest.mock import MagicMock

from bson import ObjectId
from fastapi.testclient import TestClient

from shared.models.users_model import Pagination, UserListResponse, UsersModel
from modules.users.services.errors import ServiceError


pytestmark = pytest.mark.unit


class TestHealthEndpoint:
    def test_health_check(self, api_client: TestClient):
        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert "timestamp" in data
        assert isinstance(data["uptime"], float)
        assert data["uptime"] >= 0
        assert data["database"] == "disconnected"


class TestListUsers:
    def test_list_users(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
        sample_user: UsersModel,
    ):
        mock_user_service.list_users.return_value = UserListResponse(
            users=[sample_user],
            pagination=Pagination(page=2, limit=1, total=3, pages=3),
        )

        response = api_client.get("/api/users?page=2&limit=1")

        assert response.status_code == 200
        data = response.json()
        assert data["pagination"] == {"page": 2, "limit": 1, "total": 3, "pages": 3}
        assert data["users"][0]["id"] == sample_user.id
        assert "createdAt" in data["users"][0]
        mock_user_service.list_users.assert_called_once_with(page="2", limit="1")

    def test_list_users_passes_raw_query_values(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        mock_user_service.list_users.return_value = UserListResponse(
            users=[],
            pagination=Pagination(page=1, limit=10, total=0, pages=0),
        )

        response = api_client.get("/api/users?page=abc")

        assert response.status_code == 200
        mock_user_service.list_users.assert_called_once_with(page="abc", limit=None)


class TestGetUser:
    def test_get_user(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
        sample_user: UsersModel,
    ):
        mock_user_service.get_user.return_value = sample_user

        response = api_client.get(f"/api/users/{sample_user.id}")

        assert response.status_code == 200
        assert response.json() == sample_user.model_dump(by_alias=True, mode="json")

    def test_get_user_not_found(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        mock_user_service.get_user.side_effect = ServiceError.not_found()

        response = api_client.get(f"/api/users/{ObjectId()}")

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_get_user_invalid_identifier(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        mock_user_service.get_user.side_effect = ServiceError.invalid_identifier()

        response = api_client.get("/api/users/bad-id")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid ID format"}


class TestCreateUser:
    def test_create_user(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
        sample_user: UsersModel,
    ):
        mock_user_service.create_user.return_value = sample_user

        response = api_client.post(
            "/api/users",
            json={"name": "Test User", "email": "test@example.com"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == sample_user.id
        assert set(data) == {"id", "name", "email", "createdAt", "updatedAt"}
        mock_user_service.create_user.assert_called_once_with("Test User", "test@example.com")

    def test_create_user_without_body(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        mock_user_service.create_user.side_effect = ServiceError.missing_field()

        response = api_client.post("/api/users")

        assert response.status_code == 400
        assert response.json() == {"error": "Name and email are required"}
        mock_user_service.create_user.assert_called_once_with(None, None)

    def test_create_user_duplicate(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        mock_user_service.create_user.side_effect = ServiceError.duplicate_email()

        response = api_client.post(
            "/api/users",
            json={"name": "Test User", "email": "test@example.com"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "User with this email already exists"}

    def test_create_user_validation_details(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        mock_user_service.create_user.side_effect = ServiceError.validation_failure(
            ["Please enter a valid email"]
        )

        response = api_client.post("/api/users", json={"name": "A", "email": "nope"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Validation Error",
            "details": ["Please enter a valid email"],
        }

    def test_create_user_wrong_type(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        response = api_client.post("/api/users", json={"name": 123, "email": "a@b.com"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Validation Error"
        assert data["details"]
        mock_user_service.create_user.assert_not_called()

    def test_create_user_malformed_json(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        response = api_client.post(
            "/api/users",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation Error"


class TestUpdateUser:
    def test_update_user(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
        sample_user: UsersModel,
    ):
        mock_user_service.update_user.return_value = sample_user

        response = api_client.put(
            f"/api/users/{sample_user.id}",
            json={"email": "test@example.com"},
        )

        assert response.status_code == 200
        mock_user_service.update_user.assert_called_once_with(
            sample_user.id, name=None, email="test@example.com"
        )

    def test_update_user_not_found(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        mock_user_service.update_user.side_effect = ServiceError.not_found()

        response = api_client.put(f"/api/users/{ObjectId()}", json={"name": "X"})

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}


class TestDeleteUser:
    def test_delete_user(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        user_id = str(ObjectId())

        response = api_client.delete(f"/api/users/{user_id}")

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        mock_user_service.delete_user.assert_called_once_with(user_id)

    def test_delete_user_not_found(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
    ):
        mock_user_service.delete_user.side_effect = ServiceError.not_found()

        response = api_client.delete(f"/api/users/{ObjectId()}")

        assert response.status_code == 404


class TestSearchUsers:
    def test_search_route_is_not_an_id(
        self,
        api_client: TestClient,
        mock_user_service: MagicMock,
        sample_user: UsersModel,
    ):
        mock_user_service.search_users.return_value = [sample_user]

        response = api_client.get("/api/users/search/EXAMPLE.com")

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [sample_user.id]
        mock_user_service.search_users.assert_called_once_with("EXAMPLE.com")
        mock_user_service.get_user.assert_not_called()


class TestErrorMapping:
    def test_unknown_route(self, api_client: TestClient):
        response = api_client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_unsupported_method(self, api_client: TestClient):
        response = api_client.patch("/api/users")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_unexpected_error(self, mock_user_service: MagicMock):
        from main import create_app

        mock_user_service.get_user.side_effect = RuntimeError("boom")
        client = TestClient(create_app(user_service=mock_user_service), raise_server_exceptions=False)

        response = client.get(f"/api/users/{ObjectId()}")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

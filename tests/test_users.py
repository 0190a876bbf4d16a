from unittest.mock import AsyncMock

from pymongo.errors import OperationFailure, PyMongoError

SENSITIVE_FIELDS = {"password", "email", "created_at", "updated_at", "reset_password_token", "reset_password_expire"}


class TestUserDirectoryAPI:

    def test_list_all_users_hides_sensitive_fields(self, client, repo):
        repo.add_user("alice", password="hashed")
        repo.add_user("bob")

        response = client.get("/api/users")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Successfully retrieved all users"
        assert sorted(user["username"] for user in body["data"]) == ["alice", "bob"]
        for user in body["data"]:
            assert not SENSITIVE_FIELDS & set(user)
            assert set(user) == {"_id", "username", "images", "followers", "following"}

    def test_exact_username_filter(self, client, repo):
        alice = repo.add_user("alice")
        repo.add_user("alicia")

        response = client.get("/api/users", params={"username": "alice", "exact": "true"})

        data = response.json()["data"]
        assert [user["_id"] for user in data] == [alice]

    def test_suggestions_return_usernames_only(self, client, repo):
        for i in range(12):
            repo.add_user(f"ali{i}")
        repo.add_user("bob")

        response = client.get("/api/users", params={"username": "ali", "exact": "false"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 10
        assert all(set(item) == {"username"} for item in data)
        assert all(item["username"].startswith("ali") for item in data)

    def test_suggestions_without_username(self, client, repo):
        repo.add_user("alice")

        response = client.get("/api/users", params={"exact": "false"})

        assert response.json() == {"message": "No username specified", "data": []}

    def test_suggestion_failure_reports_error_code(self, client, repo, monkeypatch):
        monkeypatch.setattr(
            repo, "suggest_usernames", AsyncMock(side_effect=OperationFailure("$search is not allowed"))
        )

        response = client.get("/api/users", params={"username": "ali", "exact": "false"})

        assert response.status_code == 500
        body = response.json()
        assert body["errCode"] == "USER003"
        assert "$search" in body["error"]

    def test_get_user_by_id(self, client, repo):
        alice = repo.add_user("alice")
        repo.add_image(alice, "img-1")

        response = client.get(f"/api/users/{alice}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["_id"] == alice
        assert data["images"][0]["id"] == "img-1"
        assert not SENSITIVE_FIELDS & set(data)

    def test_get_unknown_user_is_404(self, client):
        response = client.get("/api/users/not-an-object-id")

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_list_failure_reports_error_code(self, client, repo, monkeypatch):
        monkeypatch.setattr(repo, "find_users", AsyncMock(side_effect=PyMongoError("connection refused")))

        response = client.get("/api/users")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Error getting all users from MongoDB",
            "error": "connection refused",
            "errCode": "USER001",
        }

    def test_get_user_failure_reports_error_code(self, client, repo, monkeypatch):
        alice = repo.add_user("alice")
        monkeypatch.setattr(repo, "get_by_id", AsyncMock(side_effect=PyMongoError("socket timeout")))

        response = client.get(f"/api/users/{alice}")

        assert response.status_code == 500
        body = response.json()
        assert body["errCode"] == "USER002"
        assert body["error"] == "socket timeout"

from unittest.mock import AsyncMock

import pytest
from pymongo.errors import PyMongoError

from snapshare.images import service


class TestLikeService:

    @pytest.mark.asyncio
    async def test_like_twice_keeps_single_entry(self, repo):
        owner = repo.add_user("owner")
        fan = repo.add_user("fan")
        repo.add_image(owner, "img-1")

        await service.like_post(repo, "img-1", fan)
        images = await service.like_post(repo, "img-1", fan)

        assert images[0]["likes"] == [fan]

    @pytest.mark.asyncio
    async def test_unlike_by_non_liker_is_noop(self, repo):
        owner = repo.add_user("owner")
        fan = repo.add_user("fan")
        stranger = repo.add_user("stranger")
        repo.add_image(owner, "img-1", likes=[fan])

        images = await service.unlike_post(repo, "img-1", stranger)

        assert images[0]["likes"] == [fan]

    @pytest.mark.asyncio
    async def test_unknown_post(self, repo):
        fan = repo.add_user("fan")

        with pytest.raises(service.PostNotFoundError):
            await service.like_post(repo, "missing", fan)
        with pytest.raises(service.PostNotFoundError):
            await service.unlike_post(repo, "missing", fan)


class TestLikeAPI:

    def test_like_returns_all_owner_images(self, client, repo, auth_headers):
        owner = repo.add_user("owner")
        fan = repo.add_user("fan")
        repo.add_image(owner, "img-1")
        repo.add_image(owner, "img-2")

        response = client.put(f"/api/posts/img-2/likes/{fan}", headers=auth_headers(fan))

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Successfully liked post"
        assert [image["id"] for image in body["data"]] == ["img-1", "img-2"]
        assert body["data"][0]["likes"] == []
        assert body["data"][1]["likes"] == [fan]

    def test_unlike(self, client, repo, auth_headers):
        owner = repo.add_user("owner")
        fan = repo.add_user("fan")
        repo.add_image(owner, "img-1", likes=[fan, owner])

        response = client.delete(f"/api/posts/img-1/likes/{fan}", headers=auth_headers(fan))

        assert response.status_code == 200
        assert response.json()["data"][0]["likes"] == [owner]

    def test_like_unknown_post_is_404(self, client, repo, auth_headers):
        fan = repo.add_user("fan")

        response = client.put(f"/api/posts/nope/likes/{fan}", headers=auth_headers(fan))

        assert response.status_code == 404
        assert response.json() == {"message": "Post not found"}

    def test_cannot_like_as_another_user(self, client, repo, auth_headers):
        owner = repo.add_user("owner")
        fan = repo.add_user("fan")
        repo.add_image(owner, "img-1")

        response = client.put(f"/api/posts/img-1/likes/{fan}", headers=auth_headers(owner))

        assert response.status_code == 403
        assert repo.users[owner]["images"][0]["likes"] == []

    def test_like_failure_reports_error_code(self, client, repo, auth_headers, monkeypatch):
        fan = repo.add_user("fan")
        monkeypatch.setattr(repo, "add_like", AsyncMock(side_effect=PyMongoError("write concern error")))

        response = client.put(f"/api/posts/img-1/likes/{fan}", headers=auth_headers(fan))

        assert response.status_code == 500
        assert response.json() == {
            "message": "Error liking post",
            "error": "write concern error",
            "errCode": "POST001",
        }

    def test_unlike_failure_reports_error_code(self, client, repo, auth_headers, monkeypatch):
        fan = repo.add_user("fan")
        monkeypatch.setattr(repo, "remove_like", AsyncMock(side_effect=PyMongoError("write concern error")))

        response = client.delete(f"/api/posts/img-1/likes/{fan}", headers=auth_headers(fan))

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Error unliking post"
        assert body["errCode"] == "POST002"

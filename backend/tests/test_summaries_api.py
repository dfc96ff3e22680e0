"""
Summary endpoint tests: on-demand generation and saved articles.
"""

from types import SimpleNamespace

import pytest
from httpx import AsyncClient

from newsbrief.models.user import User


def llm_response(text: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


@pytest.mark.asyncio
class TestGenerateSummary:

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/summaries/generate", json={"text": "Anything"})

        assert response.status_code == 401

    async def test_summarize_free_text(self, client: AsyncClient, auth_headers: dict, llm_client):
        response = await client.post(
            "/api/summaries/generate",
            headers=auth_headers,
            json={"text": "A long pasted article about tides."},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"summary": "A concise two-sentence summary.", "articleId": None},
        }
        prompt = llm_client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert prompt == "Please summarize this news article: A long pasted article about tides."

    async def test_regenerate_article_summary(
        self,
        client: AsyncClient,
        auth_headers: dict,
        make_article,
        llm_client,
    ):
        article = await make_article(ai_summary="Old summary")
        llm_client.messages.create.return_value = llm_response("Fresh summary.")

        response = await client.post(
            "/api/summaries/generate",
            headers=auth_headers,
            json={"articleId": article.id},
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"summary": "Fresh summary.", "articleId": article.id}
        assert article.ai_summary == "Fresh summary."
        assert article.summary_generated_at is not None

    async def test_unknown_article(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/summaries/generate",
            headers=auth_headers,
            json={"articleId": 999},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Article not found"

    async def test_needs_article_or_text(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/summaries/generate", headers=auth_headers, json={})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Either articleId or text is required"}


@pytest.mark.asyncio
class TestSavedArticles:

    async def test_save_article(
        self,
        client: AsyncClient,
        test_user: User,
        auth_headers: dict,
        make_article,
    ):
        article = await make_article()

        response = await client.post(
            f"/api/summaries/save/{article.id}",
            headers=auth_headers,
            json={"notes": "Read later", "tags": ["space"]},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["article"]["_id"] == article.id
        assert data["summary"] == "A concise two-sentence summary."
        assert data["notes"] == "Read later"
        assert data["tags"] == ["space"]
        assert "savedAt" in data
        assert test_user.saved_summary_ids == [data["_id"]]
        # Saving summarized the article as a side effect
        assert article.ai_summary == "A concise two-sentence summary."

    async def test_save_without_body(self, client: AsyncClient, auth_headers: dict, make_article):
        article = await make_article(ai_summary="Existing summary")

        response = await client.post(f"/api/summaries/save/{article.id}", headers=auth_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["summary"] == "Existing summary"
        assert data["notes"] == ""
        assert data["tags"] == []

    async def test_save_twice(self, client: AsyncClient, auth_headers: dict, make_article):
        article = await make_article()

        await client.post(f"/api/summaries/save/{article.id}", headers=auth_headers)
        response = await client.post(f"/api/summaries/save/{article.id}", headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Article already saved"}

    async def test_save_unknown_article(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/summaries/save/12345", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Article not found"

    async def test_list_saved_newest_first(self, client: AsyncClient, auth_headers: dict, make_article):
        first = await make_article()
        second = await make_article()
        await client.post(f"/api/summaries/save/{first.id}", headers=auth_headers)
        await client.post(f"/api/summaries/save/{second.id}", headers=auth_headers)

        response = await client.get("/api/summaries/saved", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [s["article"]["_id"] for s in body["data"]] == [second.id, first.id]

    async def test_saved_summary_is_a_snapshot(
        self,
        client: AsyncClient,
        auth_headers: dict,
        make_article,
        llm_client,
    ):
        article = await make_article(ai_summary="Summary at save time")
        await client.post(f"/api/summaries/save/{article.id}", headers=auth_headers)

        llm_client.messages.create.return_value = llm_response("Later summary")
        await client.post("/api/summaries/generate", headers=auth_headers, json={"articleId": article.id})

        saved = (await client.get("/api/summaries/saved", headers=auth_headers)).json()["data"]
        assert saved[0]["summary"] == "Summary at save time"
        assert saved[0]["article"]["aiSummary"] == "Later summary"

    async def test_unsave(
        self,
        client: AsyncClient,
        test_user: User,
        auth_headers: dict,
        make_article,
    ):
        article = await make_article()
        await client.post(f"/api/summaries/save/{article.id}", headers=auth_headers)

        response = await client.delete(f"/api/summaries/unsave/{article.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {}}
        assert test_user.saved_summary_ids == []
        listing = await client.get("/api/summaries/saved", headers=auth_headers)
        assert listing.json()["count"] == 0

    async def test_unsave_not_saved(self, client: AsyncClient, auth_headers: dict, make_article):
        article = await make_article()

        response = await client.delete(f"/api/summaries/unsave/{article.id}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Saved article not found"}

    async def test_profile_stats_count_saves(self, client: AsyncClient, auth_headers: dict, make_article):
        for _ in range(2):
            article = await make_article()
            await client.post(f"/api/summaries/save/{article.id}", headers=auth_headers)

        response = await client.get("/api/auth/me", headers=auth_headers)

        data = response.json()["data"]
        assert len(data["savedArticles"]) == 2
        assert data["stats"]["summariesGenerated"] == 2
        assert data["stats"]["articlesRead"] == 2
        assert data["stats"]["savedArticles"] == 2

    async def test_saved_routes_require_auth(self, client: AsyncClient):
        assert (await client.get("/api/summaries/saved")).status_code == 401
        assert (await client.post("/api/summaries/save/1")).status_code == 401
        assert (await client.delete("/api/summaries/unsave/1")).status_code == 401

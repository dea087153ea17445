"""Tests for the Supermemory HTTP client."""

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from openclaw_supermemory.client import SupermemoryClient, limit_text
from openclaw_supermemory.errors import GatewayError, ValidationError
from openclaw_supermemory.logging import JSONLLogger

TEST_API_KEY = "sm_test_0123456789abcdef"


class Recorder:
    """MockTransport handler that records requests and replies from a route table."""

    def __init__(self, routes: dict[tuple[str, str], Callable[[dict], httpx.Response]]) -> None:
        self.routes = routes
        self.requests: list[tuple[str, str, dict[str, Any]]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        self.requests.append((request.method, request.url.path, body))
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(body)


def make_client(
    recorder: Recorder, json_logger: JSONLLogger | None = None
) -> SupermemoryClient:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(recorder), base_url="https://api.test"
    )
    return SupermemoryClient(
        TEST_API_KEY, "test_container", http_client=http, json_logger=json_logger
    )


def reply(data: Any, status: int = 200) -> Callable[[dict], httpx.Response]:
    return lambda body: httpx.Response(status, json=data)


class TestClientInit:
    """Tests for client construction."""

    @pytest.mark.parametrize("key", ["", "abc_1234567890abcdefgh", "sm_short", "sm_has space 1234567890"])
    def test_invalid_api_key(self, key: str):
        with pytest.raises(ValidationError, match="invalid API key"):
            SupermemoryClient(key, "tag")

    @pytest.mark.asyncio
    async def test_owned_http_client_has_auth(self):
        client = SupermemoryClient(TEST_API_KEY, "tag", base_url="https://api.test")
        try:
            assert client._http.headers["Authorization"] == f"Bearer {TEST_API_KEY}"
            assert str(client._http.base_url).startswith("https://api.test")
        finally:
            await client.close()


class TestAddMemory:
    """Tests for add_memory."""

    @pytest.mark.asyncio
    async def test_posts_document(self):
        recorder = Recorder({("POST", "/v3/documents"): reply({"id": "doc_9", "status": "queued"})})
        client = make_client(recorder)

        doc_id = await client.add_memory(
            "likes tea\x00", {"type": "preference", "nested": {"x": 1}}, "session_abc"
        )

        assert doc_id == "doc_9"
        method, path, body = recorder.requests[0]
        assert body == {
            "content": "likes tea",
            "containerTag": "test_container",
            "metadata": {"type": "preference"},
            "customId": "session_abc",
        }

    @pytest.mark.asyncio
    async def test_unset_fields_omitted(self):
        recorder = Recorder({("POST", "/v3/documents"): reply({"id": "doc_1"})})
        client = make_client(recorder)

        await client.add_memory("likes tea", container_tag="other")

        _, _, body = recorder.requests[0]
        assert body == {"content": "likes tea", "containerTag": "other"}


class TestSearch:
    """Tests for search."""

    @pytest.mark.asyncio
    async def test_parses_results(self):
        recorder = Recorder(
            {
                ("POST", "/v4/search"): reply(
                    {
                        "results": [
                            {"id": "m1", "memory": "likes tea", "similarity": 0.91, "metadata": {"type": "preference"}},
                            {"id": "m2", "memory": None, "similarity": 0.2},
                        ]
                    }
                )
            }
        )
        client = make_client(recorder)

        results = await client.search("tea", limit=3)

        assert recorder.requests[0][2] == {"q": "tea", "containerTag": "test_container", "limit": 3}
        assert results[0].id == "m1"
        assert results[0].text == "likes tea"
        assert results[0].similarity == 0.91
        assert results[0].metadata == {"type": "preference"}
        assert results[1].text == ""

    @pytest.mark.asyncio
    async def test_missing_results_key(self):
        client = make_client(Recorder({("POST", "/v4/search"): reply({})}))
        assert await client.search("tea") == []


class TestGetProfile:
    """Tests for get_profile."""

    @pytest.mark.asyncio
    async def test_parses_profile(self):
        recorder = Recorder(
            {
                ("POST", "/v4/profile"): reply(
                    {
                        "profile": {"static": ["likes tea"], "dynamic": ["learning Rust"]},
                        "searchResults": {
                            "results": [
                                {"memory": "owns a bike", "similarity": 0.7, "updatedAt": "2026-01-01T00:00:00Z", "id": "m3"}
                            ]
                        },
                    }
                )
            }
        )
        client = make_client(recorder)

        profile = await client.get_profile("bikes")

        assert recorder.requests[0][2] == {"containerTag": "test_container", "q": "bikes"}
        assert profile.static == ["likes tea"]
        assert profile.dynamic == ["learning Rust"]
        hit = profile.search_results[0]
        assert hit.memory == "owns a bike"
        assert hit.similarity == 0.7
        assert hit.updated_at == "2026-01-01T00:00:00Z"
        assert hit.extra == {"id": "m3"}

    @pytest.mark.asyncio
    async def test_query_omitted_when_unset(self):
        recorder = Recorder({("POST", "/v4/profile"): reply({})})
        client = make_client(recorder)

        profile = await client.get_profile()

        assert recorder.requests[0][2] == {"containerTag": "test_container"}
        assert profile.static == []
        assert profile.dynamic == []
        assert profile.search_results == []


class TestDeletion:
    """Tests for delete_memory, list_documents and delete_bulk."""

    @pytest.mark.asyncio
    async def test_delete_memory(self):
        recorder = Recorder({("DELETE", "/v4/memories"): reply({"id": "m1", "forgotten": True})})
        client = make_client(recorder)

        result = await client.delete_memory("m1")

        assert recorder.requests[0] == ("DELETE", "/v4/memories", {"id": "m1", "containerTag": "test_container"})
        assert result.id == "m1"
        assert result.forgotten

    @pytest.mark.asyncio
    async def test_list_documents(self):
        recorder = Recorder(
            {
                ("POST", "/v3/documents/list"): reply(
                    {"memories": [{"id": "d1"}, {"id": "d2"}, {}], "pagination": {"totalPages": 4}}
                )
            }
        )
        client = make_client(recorder)

        page = await client.list_documents("tag", 2, 100)

        assert recorder.requests[0][2] == {"containerTags": ["tag"], "page": 2, "limit": 100}
        assert page.ids == ["d1", "d2"]
        assert page.total_pages == 4

    @pytest.mark.asyncio
    async def test_delete_bulk_reported_count(self):
        recorder = Recorder({("DELETE", "/v3/documents/bulk"): reply({"success": True, "deletedCount": 1})})
        client = make_client(recorder)

        assert await client.delete_bulk(["d1", "d2"]) == 1
        assert recorder.requests[0][2] == {"ids": ["d1", "d2"]}

    @pytest.mark.asyncio
    async def test_delete_bulk_without_count(self):
        client = make_client(Recorder({("DELETE", "/v3/documents/bulk"): reply({"success": True})}))
        assert await client.delete_bulk(["d1", "d2"]) == 2

    @pytest.mark.asyncio
    async def test_non_numeric_page_count_ignored(self):
        recorder = Recorder(
            {("POST", "/v3/documents/list"): reply({"memories": [{"id": "d1"}], "pagination": {"totalPages": "3"}})}
        )
        page = await make_client(recorder).list_documents("tag", 1, 100)
        assert page.total_pages is None


class TestErrors:
    """Tests for backend failures."""

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        client = make_client(Recorder({("POST", "/v4/search"): reply({"error": "rate limited"}, 429)}))

        with pytest.raises(GatewayError) as exc_info:
            await client.search("tea")

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def boom(body: dict) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        client = make_client(Recorder({("POST", "/v4/profile"): boom}))

        with pytest.raises(GatewayError, match="connection refused"):
            await client.get_profile()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def html(body: dict) -> httpx.Response:
            return httpx.Response(200, text="<html>bad gateway</html>")

        client = make_client(Recorder({("POST", "/v4/profile"): html}))

        with pytest.raises(GatewayError, match="not JSON"):
            await client.get_profile()

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        client = make_client(Recorder({("POST", "/v4/search"): reply(["a", "b"])}))

        with pytest.raises(GatewayError, match="expected a JSON object"):
            await client.search("tea")

    @pytest.mark.asyncio
    async def test_malformed_fields_ignored(self):
        recorder = Recorder(
            {
                ("POST", "/v4/profile"): reply(
                    {
                        "profile": ["not", "an", "object"],
                        "searchResults": {"results": [1, {"memory": "kept", "similarity": True}]},
                    }
                )
            }
        )
        client = make_client(recorder)

        profile = await client.get_profile("anything")

        assert profile.static == []
        assert [h.memory for h in profile.search_results] == ["kept"]
        assert profile.search_results[0].similarity is None


class TestForgetByQuery:
    """Tests for forget_by_query."""

    @pytest.mark.asyncio
    async def test_no_match(self):
        recorder = Recorder({("POST", "/v4/search"): reply({"results": []})})
        client = make_client(recorder)

        outcome = await client.forget_by_query("tea")

        assert not outcome.success
        assert outcome.message == "No matching memory found to forget."
        assert all(method != "DELETE" for method, _, _ in recorder.requests)

    @pytest.mark.asyncio
    async def test_deletes_best_match(self):
        long_text = "x" * 150
        recorder = Recorder(
            {
                ("POST", "/v4/search"): reply(
                    {"results": [{"id": "m1", "memory": long_text}, {"id": "m2", "memory": "other"}]}
                ),
                ("DELETE", "/v4/memories"): reply({"id": "m1", "forgotten": True}),
            }
        )
        client = make_client(recorder)

        outcome = await client.forget_by_query("xs")

        assert outcome.success
        assert outcome.message == f'Forgot: "{"x" * 100}…"'
        assert recorder.requests[0][2]["limit"] == 5
        assert recorder.requests[1] == ("DELETE", "/v4/memories", {"id": "m1", "containerTag": "test_container"})


class TestWipeAllMemories:
    """Tests for wipe_all_memories through the HTTP layer."""

    @pytest.mark.asyncio
    async def test_lists_then_deletes(self):
        recorder = Recorder(
            {
                ("POST", "/v3/documents/list"): reply(
                    {"memories": [{"id": "d1"}, {"id": "d2"}], "pagination": {"totalPages": 1}}
                ),
                ("DELETE", "/v3/documents/bulk"): reply({"success": True}),
            }
        )
        client = make_client(recorder)

        result = await client.wipe_all_memories()

        assert result.deleted_count == 2
        assert [(m, p) for m, p, _ in recorder.requests] == [
            ("POST", "/v3/documents/list"),
            ("DELETE", "/v3/documents/bulk"),
        ]
        assert recorder.requests[0][2]["containerTags"] == ["test_container"]


class TestTracing:
    """Tests for request/response tracing."""

    @pytest.mark.asyncio
    async def test_debug_traces_written(self, json_logger: JSONLLogger):
        client = make_client(Recorder({("POST", "/v4/search"): reply({"results": []})}), json_logger)

        await client.search("tea")

        entries = [json.loads(line) for line in json_logger.log_path.read_text().splitlines()]
        assert [e["event"] for e in entries] == ["request", "response"]
        assert entries[0]["method"] == "search.memories"
        assert entries[0]["extra"]["params"]["q"] == "tea"
        assert "duration_ms" in entries[1]

    @pytest.mark.asyncio
    async def test_no_traces_without_debug(self, tmp_path: Path):
        quiet = JSONLLogger(log_dir=tmp_path, debug=False)
        client = make_client(Recorder({("POST", "/v4/search"): reply({"results": []})}), quiet)

        await client.search("tea")

        assert not quiet.log_path.exists()


def test_limit_text():
    assert limit_text("short", 10) == "short"
    assert limit_text("abcdef", 3) == "abc…"

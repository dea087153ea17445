"""HTTP client for the Supermemory API.

This is the only module that talks to the memory backend. Everything
else works on the dataclasses it returns.
"""

import logging
import time
from typing import Any

import httpx

from .config import DEFAULT_BASE_URL
from .errors import GatewayError, ValidationError
from .logging import JSONLLogger
from .memory.lifecycle import wipe_container
from .memory.models import (
    DocumentPage,
    ForgetOutcome,
    ForgetResult,
    ProfileResult,
    SearchHit,
    SearchResult,
    WipeResult,
    parse_similarity,
)
from .validate import (
    sanitize_content,
    sanitize_metadata,
    validate_api_key_format,
    validate_container_tag,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
FORGET_SEARCH_LIMIT = 5
FORGET_PREVIEW_LENGTH = 100


def limit_text(text: str, max_length: int) -> str:
    return f"{text[:max_length]}…" if len(text) > max_length else text


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop unset (None) fields so the backend applies its own defaults."""
    return {k: v for k, v in payload.items() if v is not None}


def _object(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _objects(value: Any) -> list[dict[str, Any]]:
    return [item for item in value if isinstance(item, dict)] if isinstance(value, list) else []


def _strings(value: Any) -> list[str]:
    return [item for item in value if isinstance(item, str)] if isinstance(value, list) else []


class SupermemoryClient:
    """Async gateway to the Supermemory memory service.

    Every operation is scoped to a container tag: the one passed to the
    call, or the client's default.
    """

    def __init__(
        self,
        api_key: str,
        container_tag: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        json_logger: JSONLLogger | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Supermemory API key (``sm_...``).
            container_tag: Default container for all operations.
            base_url: API root.
            json_logger: Optional tracer for requests and responses.
            http_client: Pre-built client, mainly for tests. Its base URL
                and headers are used as they are.
            timeout: Request timeout in seconds for the owned client.

        Raises:
            ValidationError: The API key is malformed.
        """
        valid, reason = validate_api_key_format(api_key)
        if not valid:
            raise ValidationError(f"invalid API key: {reason}")

        valid, reason = validate_container_tag(container_tag)
        if not valid:
            logger.warning("container tag warning: %s", reason)

        self.container_tag = container_tag
        self.json_logger = json_logger
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )
        logger.info("supermemory: initialized (container: %s)", container_tag)

    async def __aenter__(self) -> "SupermemoryClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _tag(self, container_tag: str | None) -> str:
        return container_tag or self.container_tag

    async def _request(self, method: str, path: str, name: str, payload: dict[str, Any]) -> Any:
        if self.json_logger:
            self.json_logger.log_request(name, payload)

        start = time.monotonic()
        try:
            response = await self._http.request(method, path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if self.json_logger:
                self.json_logger.log_error(name, e)
            raise GatewayError(
                f"{name} failed: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            if self.json_logger:
                self.json_logger.log_error(name, e)
            raise GatewayError(f"{name} failed: {e}") from e

        try:
            data = response.json() if response.content else {}
        except ValueError as e:
            if self.json_logger:
                self.json_logger.log_error(name, e)
            raise GatewayError(f"{name} failed: response is not JSON") from e
        if not isinstance(data, dict):
            raise GatewayError(f"{name} failed: expected a JSON object, got {type(data).__name__}")

        if self.json_logger:
            duration_ms = (time.monotonic() - start) * 1000
            self.json_logger.log_response(name, data, duration_ms=duration_ms)
        return data

    async def add_memory(
        self,
        content: str,
        metadata: dict[str, Any] | None = None,
        custom_id: str | None = None,
        container_tag: str | None = None,
    ) -> str:
        """Store content as a memory document.

        Args:
            content: Text to remember.
            metadata: Scalar metadata attached to the document.
            custom_id: Stable document id; repeated adds with the same id
                update one document.
            container_tag: Overrides the default container.

        Returns:
            The document id assigned by the backend.
        """
        payload = _compact(
            {
                "content": sanitize_content(content),
                "containerTag": self._tag(container_tag),
                "metadata": sanitize_metadata(metadata) if metadata else None,
                "customId": custom_id or None,
            }
        )
        data = await self._request("POST", "/v3/documents", "add", payload)
        return str(data.get("id", ""))

    async def search(
        self, query: str, limit: int = 5, container_tag: str | None = None
    ) -> list[SearchResult]:
        """Search memories by similarity to a query."""
        payload = {"q": query, "containerTag": self._tag(container_tag), "limit": limit}
        data = await self._request("POST", "/v4/search", "search.memories", payload)

        results = []
        for item in _objects(data.get("results")):
            memory = item.get("memory")
            if not isinstance(memory, str):
                memory = None
            results.append(
                SearchResult(
                    id=str(item.get("id", "")),
                    content=memory or "",
                    memory=memory,
                    similarity=parse_similarity(item.get("similarity")),
                    metadata=_object(item.get("metadata")) or None,
                )
            )
        return results

    async def get_profile(
        self, query: str | None = None, container_tag: str | None = None
    ) -> ProfileResult:
        """Fetch the user profile, plus hits for ``query`` when given."""
        payload = _compact({"containerTag": self._tag(container_tag), "q": query or None})
        data = await self._request("POST", "/v4/profile", "profile", payload)

        profile = _object(data.get("profile"))
        search = _object(data.get("searchResults"))
        return ProfileResult(
            static=_strings(profile.get("static")),
            dynamic=_strings(profile.get("dynamic")),
            search_results=[SearchHit.from_dict(hit) for hit in _objects(search.get("results"))],
        )

    async def delete_memory(
        self, memory_id: str, container_tag: str | None = None
    ) -> ForgetResult:
        payload = {"id": memory_id, "containerTag": self._tag(container_tag)}
        data = await self._request("DELETE", "/v4/memories", "memories.delete", payload)
        return ForgetResult(id=str(data.get("id", memory_id)), forgotten=bool(data.get("forgotten", True)))

    async def list_documents(
        self, container_tag: str, page: int, page_size: int
    ) -> DocumentPage:
        payload = {"containerTags": [container_tag], "page": page, "limit": page_size}
        data = await self._request("POST", "/v3/documents/list", "documents.list", payload)

        ids = [str(doc["id"]) for doc in _objects(data.get("memories")) if doc.get("id")]
        total_pages = _object(data.get("pagination")).get("totalPages")
        if isinstance(total_pages, bool) or not isinstance(total_pages, int):
            total_pages = None
        return DocumentPage(ids=ids, total_pages=total_pages)

    async def delete_bulk(self, ids: list[str]) -> int:
        """Delete documents by id.

        Returns:
            The count the backend reports, or ``len(ids)`` if it reports none.
        """
        data = await self._request("DELETE", "/v3/documents/bulk", "documents.deleteBulk", {"ids": ids})
        deleted = data.get("deletedCount")
        return deleted if isinstance(deleted, int) and not isinstance(deleted, bool) else len(ids)

    async def forget_by_query(
        self, query: str, container_tag: str | None = None
    ) -> ForgetOutcome:
        """Delete the memory that best matches a description."""
        results = await self.search(query, FORGET_SEARCH_LIMIT, container_tag)
        if not results:
            return ForgetOutcome(success=False, message="No matching memory found to forget.")

        target = results[0]
        await self.delete_memory(target.id, container_tag)

        preview = limit_text(target.text, FORGET_PREVIEW_LENGTH)
        return ForgetOutcome(success=True, message=f'Forgot: "{preview}"')

    async def wipe_all_memories(self, container_tag: str | None = None) -> WipeResult:
        """Delete every document in the container. See ``wipe_container``."""
        tag = self._tag(container_tag)
        result = await wipe_container(self, tag)
        if self.json_logger:
            self.json_logger.log("wipe", container_tag=tag, deleted_count=result.deleted_count)
        return result

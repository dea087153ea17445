"""Bulk deletion of every document in a container."""

import logging
from typing import Protocol

from ..errors import WipeError
from .models import DocumentPage, WipeResult

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
DELETE_BATCH_SIZE = 100


class DocumentBackend(Protocol):
    """The slice of the memory gateway a wipe needs."""

    async def list_documents(
        self, container_tag: str, page: int, page_size: int
    ) -> DocumentPage: ...

    async def delete_bulk(self, ids: list[str]) -> int: ...


async def collect_document_ids(
    backend: DocumentBackend,
    container_tag: str,
    page_size: int = PAGE_SIZE,
) -> list[str]:
    """List every document id in a container, one page at a time.

    Stops at the first empty page, or once the reported page count is
    reached. A page without a reported count is treated as the last.
    """
    ids: list[str] = []
    page = 1

    while True:
        result = await backend.list_documents(container_tag, page, page_size)
        if not result.ids:
            break

        ids.extend(result.ids)

        if not result.total_pages or page >= result.total_pages:
            break
        page += 1

    return ids


async def wipe_container(
    backend: DocumentBackend,
    container_tag: str,
    batch_size: int = DELETE_BATCH_SIZE,
) -> WipeResult:
    """Delete all documents in a container.

    The container is listed completely before anything is deleted, so
    deletions never shift the pages still to be read. Batches are deleted
    one after another.

    Args:
        backend: Gateway used to list and delete documents.
        container_tag: The container to empty.
        batch_size: Ids per bulk-delete call.

    Returns:
        WipeResult with the number of documents deleted.

    Raises:
        WipeError: A batch failed. Earlier batches stay deleted; the error
            reports how many were.
    """
    ids = await collect_document_ids(backend, container_tag)

    if not ids:
        logger.debug("wipe: no documents found in %s", container_tag)
        return WipeResult(deleted_count=0)

    logger.debug("wipe: found %d documents in %s, deleting in batches", len(ids), container_tag)

    deleted = 0
    for start in range(0, len(ids), batch_size):
        batch = ids[start : start + batch_size]
        try:
            deleted += await backend.delete_bulk(batch)
        except Exception as e:
            raise WipeError(
                f"wipe of {container_tag} failed after deleting {deleted} of {len(ids)} documents: {e}",
                deleted_count=deleted,
                total=len(ids),
            ) from e

    return WipeResult(deleted_count=deleted)

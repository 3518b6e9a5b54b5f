"""Firestore database wrapper.

Provides a centralized interface for all Firestore operations. Reads and
writes forward to the synchronous Firestore client on a worker thread;
reference helpers and field-value sentinels are returned directly.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import Any, Literal, TypeVar

from google.cloud import firestore
from google.cloud.firestore import Client as FirestoreClient
from google.cloud.firestore_v1.base_query import BaseCompositeFilter, FieldFilter
from pydantic import BaseModel, Field

from src.cred.core.errors import InvalidCursorError

R = TypeVar("R")

_DIRECTIONS = {
    "asc": firestore.Query.ASCENDING,
    "desc": firestore.Query.DESCENDING,
}


class ListOptions(BaseModel):
    """Options for paginated list queries."""

    limit: int | None = Field(default=None, description="Maximum documents to return")
    order_by: str | None = Field(default=None, description="Field to order by")
    order_direction: Literal["asc", "desc"] = Field(default="asc")
    start_after_doc_id: str | None = Field(
        default=None, description="Document id to start after (cursor pagination)"
    )


class WhereFilter(BaseModel):
    """A simple where-clause filter."""

    field: str
    op: str
    value: Any = None


def snapshot_to_dict(snapshot: Any) -> dict[str, Any]:
    """Return the document data with its ``id`` injected."""
    return {**(snapshot.to_dict() or {}), "id": snapshot.id}


def _apply_filters(query: Any, filters: Iterable[WhereFilter]) -> Any:
    for f in filters:
        query = query.where(filter=FieldFilter(f.field, f.op, f.value))
    return query


def _apply_order_and_limit(query: Any, options: ListOptions) -> Any:
    if options.order_by:
        query = query.order_by(
            options.order_by, direction=_DIRECTIONS[options.order_direction]
        )
    if options.limit:
        query = query.limit(options.limit)
    return query


class FirestoreService:
    def __init__(self, db: FirestoreClient):
        self._db = db

    @property
    def db(self) -> FirestoreClient:
        return self._db

    # -- References --------------------------------------------------------

    def collection(self, collection_path: str):
        return self._db.collection(collection_path)

    def doc(self, collection_path: str, doc_id: str):
        return self._db.collection(collection_path).document(doc_id)

    # -- Create ------------------------------------------------------------

    async def add(self, collection_path: str, data: dict[str, Any]) -> str:
        """Create a document with an auto-generated id and return the id."""
        _, ref = await asyncio.to_thread(self.collection(collection_path).add, data)
        return ref.id

    async def set(
        self,
        collection_path: str,
        doc_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ):
        """Create or overwrite a document; ``merge=True`` merges into it."""
        return await asyncio.to_thread(
            self.doc(collection_path, doc_id).set, data, merge=merge
        )

    # -- Read --------------------------------------------------------------

    async def get(self, collection_path: str, doc_id: str) -> dict[str, Any] | None:
        """Get a single document by id, or ``None`` if it does not exist."""
        snap = await asyncio.to_thread(self.doc(collection_path, doc_id).get)
        if not snap.exists:
            return None
        return snapshot_to_dict(snap)

    async def exists(self, collection_path: str, doc_id: str) -> bool:
        snap = await asyncio.to_thread(self.doc(collection_path, doc_id).get)
        return bool(snap.exists)

    async def list(
        self, collection_path: str, options: ListOptions | None = None
    ) -> list[dict[str, Any]]:
        """List documents with optional ordering and cursor pagination.

        Raises:
            InvalidCursorError: if ``start_after_doc_id`` names a missing document.
        """
        options = options or ListOptions()
        query = self.collection(collection_path)

        if options.order_by:
            query = query.order_by(
                options.order_by, direction=_DIRECTIONS[options.order_direction]
            )

        if options.start_after_doc_id:
            cursor = await asyncio.to_thread(
                self.doc(collection_path, options.start_after_doc_id).get
            )
            if not cursor.exists:
                raise InvalidCursorError(collection_path, options.start_after_doc_id)
            query = query.start_after(cursor)

        if options.limit:
            query = query.limit(options.limit)

        return await self._run(query)

    async def query(
        self,
        collection_path: str,
        filters: list[WhereFilter],
        options: ListOptions | None = None,
    ) -> list[dict[str, Any]]:
        """Query documents with where-clause filters, all of which must match."""
        query = _apply_filters(self.collection(collection_path), filters)
        return await self._run(_apply_order_and_limit(query, options or ListOptions()))

    async def query_with_filter(
        self,
        collection_path: str,
        composite: BaseCompositeFilter | FieldFilter,
        options: ListOptions | None = None,
    ) -> list[dict[str, Any]]:
        """Query using a composite ``And`` / ``Or`` filter."""
        query = self.collection(collection_path).where(filter=composite)
        return await self._run(_apply_order_and_limit(query, options or ListOptions()))

    async def count(
        self, collection_path: str, filters: list[WhereFilter] | None = None
    ) -> int:
        """Count matching documents without downloading them."""
        query = _apply_filters(self.collection(collection_path), filters or [])
        results = await asyncio.to_thread(query.count(alias="count").get)
        return int(results[0][0].value)

    # -- Update / delete ---------------------------------------------------

    async def update(self, collection_path: str, doc_id: str, data: dict[str, Any]):
        """Update fields on an existing document; fails if it does not exist."""
        return await asyncio.to_thread(self.doc(collection_path, doc_id).update, data)

    async def delete(self, collection_path: str, doc_id: str):
        return await asyncio.to_thread(self.doc(collection_path, doc_id).delete)

    # -- Batch & transaction -----------------------------------------------

    def batch(self):
        """Create a write batch for atomic multi-document writes (max 500 ops)."""
        return self._db.batch()

    async def transaction(self, fn: Callable[[Any], R]) -> R:
        """Run ``fn(transaction)`` inside a transaction and return its result.

        ``fn`` runs on a worker thread and may be retried by the client on
        contention, so it must not have side effects outside the transaction.
        """

        @firestore.transactional
        def run(transaction):
            return fn(transaction)

        return await asyncio.to_thread(run, self._db.transaction())

    # -- Subcollections ----------------------------------------------------

    def subcollection(self, collection_path: str, doc_id: str, name: str):
        return self.doc(collection_path, doc_id).collection(name)

    async def list_subcollection(
        self,
        collection_path: str,
        doc_id: str,
        name: str,
        options: ListOptions | None = None,
    ) -> list[dict[str, Any]]:
        return await self.list(f"{collection_path}/{doc_id}/{name}", options)

    # -- Field value helpers -----------------------------------------------

    @staticmethod
    def delete_field():
        return firestore.DELETE_FIELD

    @staticmethod
    def increment(n: int | float):
        return firestore.Increment(n)

    @staticmethod
    def array_union(*elements: Any):
        return firestore.ArrayUnion(list(elements))

    @staticmethod
    def array_remove(*elements: Any):
        return firestore.ArrayRemove(list(elements))

    @staticmethod
    def server_timestamp():
        return firestore.SERVER_TIMESTAMP

    async def _run(self, query: Any) -> list[dict[str, Any]]:
        snapshots = await asyncio.to_thread(query.get)
        return [snapshot_to_dict(s) for s in snapshots]

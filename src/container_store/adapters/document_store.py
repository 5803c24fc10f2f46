"""Document store interface and its pymongo implementation."""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from bson.code import Code
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.results import DeleteResult, UpdateResult

Document = dict[str, Any]
Query = Mapping[str, Any]
Sort = Sequence[tuple[str, int]]


class DocumentStore(Protocol):
    """Low-level operations against named collections."""

    def execute_query(
        self, collection_name: str, query: Query, callback: Callable[[Document], None]
    ) -> None:
        """Run a query and hand every matching document to the callback."""

    def find_one(
        self, collection_name: str, query: Query, projection: Query | None = None
    ) -> Document | None:
        """Return the first document matching the query, if any."""

    def find(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        projection: Query | None = None,
        sort: Sort | None = None,
        limit: int = 0,
    ) -> list[Document]:
        """Return all documents matching the query."""

    def find_all(self, collection_name: str) -> list[Document]:
        """Return every document in the collection."""

    def save(self, collection_name: str, document: Mapping[str, Any]) -> Document:
        """Insert the document, or replace it when its ``_id`` already exists."""

    def insert(self, collection_name: str, document: Mapping[str, Any]) -> Document:
        """Insert a single document."""

    def insert_batch(
        self, collection_name: str, documents: Iterable[Mapping[str, Any]]
    ) -> list[Document]:
        """Insert several documents."""

    def remove(
        self, collection_name: str, query: Query, multi: bool = True
    ) -> DeleteResult:
        """Delete one or all documents matching the query."""

    def update(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        update: Query,
        upsert: bool = False,
        multi: bool = False,
    ) -> UpdateResult:
        """Apply an update to one or all matching documents."""

    def count(self, collection_name: str, query: Query | None = None) -> int:
        """Count documents matching the query."""

    def exists(self, collection_name: str, query: Query) -> bool:
        """Return whether any document matches the query."""

    def collection_exists(self, collection_name: str) -> bool:
        """Return whether the collection exists."""

    def drop_collection(self, collection_name: str) -> None:
        """Drop the collection."""

    def find_and_modify(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        update: Query,
        sort: Sort | None = None,
        upsert: bool = False,
        return_new: bool = False,
    ) -> Document | None:
        """Atomically update a document and return it."""

    def find_and_replace(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        replacement: Mapping[str, Any],
        sort: Sort | None = None,
        upsert: bool = False,
        return_new: bool = False,
    ) -> Document | None:
        """Atomically replace a document and return it."""

    def find_and_remove(
        self, collection_name: str, query: Query, sort: Sort | None = None
    ) -> Document | None:
        """Atomically delete a document and return it."""

    def group(
        self,
        collection_name: str,
        keys: Sequence[str],
        accumulators: Mapping[str, Any],
        criteria: Query | None = None,
    ) -> list[Document]:
        """Group matching documents by the given keys."""

    def aggregate(
        self, collection_name: str, pipeline: Sequence[Mapping[str, Any]]
    ) -> list[Document]:
        """Run an aggregation pipeline."""

    def map_reduce(
        self,
        collection_name: str,
        map_function: str,
        reduce_function: str,
        query: Query | None = None,
    ) -> list[Document]:
        """Run a JavaScript map-reduce with inline output."""

    def find_distinct(
        self, collection_name: str, field: str, query: Query | None = None
    ) -> list[Any]:
        """Return the distinct values of a field."""


@dataclass
class PymongoDocumentStore(DocumentStore):
    """pymongo-backed document store."""

    database: Database

    def execute_query(
        self, collection_name: str, query: Query, callback: Callable[[Document], None]
    ) -> None:
        """Stream matching documents into the callback."""
        for document in self.database[collection_name].find(query):
            callback(document)

    def find_one(
        self, collection_name: str, query: Query, projection: Query | None = None
    ) -> Document | None:
        """Return the first matching document."""
        return self.database[collection_name].find_one(query, projection)

    def find(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        projection: Query | None = None,
        sort: Sort | None = None,
        limit: int = 0,
    ) -> list[Document]:
        """Return matching documents."""
        cursor = self.database[collection_name].find(
            query, projection, sort=sort, limit=limit
        )
        return list(cursor)

    def find_all(self, collection_name: str) -> list[Document]:
        """Return every document in the collection."""
        return list(self.database[collection_name].find({}))

    def save(self, collection_name: str, document: Mapping[str, Any]) -> Document:
        """Upsert by ``_id`` when present, otherwise insert."""
        payload = dict(document)
        collection = self.database[collection_name]
        if "_id" in payload:
            collection.replace_one({"_id": payload["_id"]}, payload, upsert=True)
            return payload
        result = collection.insert_one(payload)
        payload["_id"] = result.inserted_id
        return payload

    def insert(self, collection_name: str, document: Mapping[str, Any]) -> Document:
        """Insert a document and return it with its ``_id``."""
        payload = dict(document)
        result = self.database[collection_name].insert_one(payload)
        payload["_id"] = result.inserted_id
        return payload

    def insert_batch(
        self, collection_name: str, documents: Iterable[Mapping[str, Any]]
    ) -> list[Document]:
        """Insert documents and return them with their ``_id`` values."""
        payloads = [dict(document) for document in documents]
        if not payloads:
            return []
        result = self.database[collection_name].insert_many(payloads)
        for payload, inserted_id in zip(payloads, result.inserted_ids, strict=True):
            payload["_id"] = inserted_id
        return payloads

    def remove(
        self, collection_name: str, query: Query, multi: bool = True
    ) -> DeleteResult:
        """Delete matching documents."""
        collection = self.database[collection_name]
        if multi:
            return collection.delete_many(query)
        return collection.delete_one(query)

    def update(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        update: Query,
        upsert: bool = False,
        multi: bool = False,
    ) -> UpdateResult:
        """Update matching documents."""
        collection = self.database[collection_name]
        if multi:
            return collection.update_many(query, update, upsert=upsert)
        return collection.update_one(query, update, upsert=upsert)

    def count(self, collection_name: str, query: Query | None = None) -> int:
        """Count matching documents."""
        return self.database[collection_name].count_documents(query or {})

    def exists(self, collection_name: str, query: Query) -> bool:
        """Return whether any document matches."""
        found = self.database[collection_name].find_one(query, {"_id": 1})
        return found is not None

    def collection_exists(self, collection_name: str) -> bool:
        """Return whether the collection exists."""
        names = self.database.list_collection_names(filter={"name": collection_name})
        return collection_name in names

    def drop_collection(self, collection_name: str) -> None:
        """Drop the collection."""
        self.database.drop_collection(collection_name)

    def find_and_modify(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        update: Query,
        sort: Sort | None = None,
        upsert: bool = False,
        return_new: bool = False,
    ) -> Document | None:
        """Update one document and return its old or new version."""
        return self.database[collection_name].find_one_and_update(
            query,
            update,
            sort=sort,
            upsert=upsert,
            return_document=_return_document(return_new),
        )

    def find_and_replace(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        replacement: Mapping[str, Any],
        sort: Sort | None = None,
        upsert: bool = False,
        return_new: bool = False,
    ) -> Document | None:
        """Replace one document and return its old or new version."""
        return self.database[collection_name].find_one_and_replace(
            query,
            replacement,
            sort=sort,
            upsert=upsert,
            return_document=_return_document(return_new),
        )

    def find_and_remove(
        self, collection_name: str, query: Query, sort: Sort | None = None
    ) -> Document | None:
        """Delete one document and return it."""
        return self.database[collection_name].find_one_and_delete(query, sort=sort)

    def group(
        self,
        collection_name: str,
        keys: Sequence[str],
        accumulators: Mapping[str, Any],
        criteria: Query | None = None,
    ) -> list[Document]:
        """Group documents with a ``$match``/``$group`` aggregation."""
        pipeline: list[dict[str, Any]] = []
        if criteria:
            pipeline.append({"$match": dict(criteria)})
        pipeline.append(
            {"$group": {"_id": {key: f"${key}" for key in keys}, **accumulators}}
        )
        return list(self.database[collection_name].aggregate(pipeline))

    def aggregate(
        self, collection_name: str, pipeline: Sequence[Mapping[str, Any]]
    ) -> list[Document]:
        """Run an aggregation pipeline."""
        return list(self.database[collection_name].aggregate(list(pipeline)))

    def map_reduce(
        self,
        collection_name: str,
        map_function: str,
        reduce_function: str,
        query: Query | None = None,
    ) -> list[Document]:
        """Issue the ``mapReduce`` command with inline output."""
        response = self.database.command(
            {
                "mapReduce": collection_name,
                "map": Code(map_function),
                "reduce": Code(reduce_function),
                "query": dict(query or {}),
                "out": {"inline": 1},
            }
        )
        return list(response.get("results", []))

    def find_distinct(
        self, collection_name: str, field: str, query: Query | None = None
    ) -> list[Any]:
        """Return distinct values of a field."""
        return self.database[collection_name].distinct(field, query)


def _return_document(return_new: bool) -> ReturnDocument:
    return ReturnDocument.AFTER if return_new else ReturnDocument.BEFORE

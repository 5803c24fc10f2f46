"""Document store decorator that audits every operation.

Each call gets a fresh transaction id. A BEGIN event is emitted before the
wrapped store is invoked and an END event carrying the elapsed time after it
returns or raises. Results and errors from the wrapped store pass through
untouched; the events are a side channel only.
"""

import logging
import time
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import Any
from uuid import uuid4

from pymongo.results import DeleteResult, UpdateResult

from container_store.adapters.document_store import (
    Document,
    DocumentStore,
    Query,
    Sort,
)
from container_store.domain.audit import AuditEvent, AuditPhase, Operation
from container_store.services.audit import AuditEventSink

_logger = logging.getLogger(__name__)


@dataclass
class AuditedDocumentStore(DocumentStore):
    """Wraps a ``DocumentStore`` and reports each call to an audit sink."""

    store: DocumentStore
    sink: AuditEventSink

    @contextmanager
    def _audit(self, collection_name: str, operation: Operation) -> Iterator[None]:
        transaction_id = str(uuid4())
        started = time.perf_counter()
        self._emit(
            AuditEvent(
                transaction_id=transaction_id,
                collection_name=collection_name,
                operation=operation,
                phase=AuditPhase.BEGIN,
            )
        )
        try:
            yield
        finally:
            self._emit(
                AuditEvent(
                    transaction_id=transaction_id,
                    collection_name=collection_name,
                    operation=operation,
                    phase=AuditPhase.END,
                    elapsed=timedelta(seconds=time.perf_counter() - started),
                )
            )

    def _emit(self, event: AuditEvent) -> None:
        try:
            self.sink.emit(event)
        except Exception:
            _logger.warning(
                "Audit sink failed for %s event with transactionId %s",
                event.phase.name,
                event.transaction_id,
                exc_info=True,
            )

    def execute_query(
        self, collection_name: str, query: Query, callback: Callable[[Document], None]
    ) -> None:
        """Audited ``execute_query``."""
        with self._audit(collection_name, Operation.EXECUTE):
            self.store.execute_query(collection_name, query, callback)

    def find_one(
        self, collection_name: str, query: Query, projection: Query | None = None
    ) -> Document | None:
        """Audited ``find_one``."""
        with self._audit(collection_name, Operation.FETCH):
            return self.store.find_one(collection_name, query, projection)

    def find(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        projection: Query | None = None,
        sort: Sort | None = None,
        limit: int = 0,
    ) -> list[Document]:
        """Audited ``find``."""
        with self._audit(collection_name, Operation.FETCH):
            return self.store.find(collection_name, query, projection, sort, limit)

    def find_all(self, collection_name: str) -> list[Document]:
        """Audited ``find_all``."""
        with self._audit(collection_name, Operation.FETCH):
            return self.store.find_all(collection_name)

    def save(self, collection_name: str, document: Mapping[str, Any]) -> Document:
        """Audited ``save``."""
        with self._audit(collection_name, Operation.SAVE):
            return self.store.save(collection_name, document)

    def insert(self, collection_name: str, document: Mapping[str, Any]) -> Document:
        """Audited ``insert``."""
        with self._audit(collection_name, Operation.SAVE):
            return self.store.insert(collection_name, document)

    def insert_batch(
        self, collection_name: str, documents: Iterable[Mapping[str, Any]]
    ) -> list[Document]:
        """Audited ``insert_batch``."""
        with self._audit(collection_name, Operation.SAVE):
            return self.store.insert_batch(collection_name, documents)

    def remove(
        self, collection_name: str, query: Query, multi: bool = True
    ) -> DeleteResult:
        """Audited ``remove``."""
        with self._audit(collection_name, Operation.DELETE):
            return self.store.remove(collection_name, query, multi)

    def update(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        update: Query,
        upsert: bool = False,
        multi: bool = False,
    ) -> UpdateResult:
        """Audited ``update``."""
        with self._audit(collection_name, Operation.UPDATE):
            return self.store.update(collection_name, query, update, upsert, multi)

    def count(self, collection_name: str, query: Query | None = None) -> int:
        """Audited ``count``."""
        with self._audit(collection_name, Operation.FETCH):
            return self.store.count(collection_name, query)

    def exists(self, collection_name: str, query: Query) -> bool:
        """Audited ``exists``."""
        with self._audit(collection_name, Operation.FETCH):
            return self.store.exists(collection_name, query)

    def collection_exists(self, collection_name: str) -> bool:
        """Audited ``collection_exists``."""
        with self._audit(collection_name, Operation.FETCH):
            return self.store.collection_exists(collection_name)

    def drop_collection(self, collection_name: str) -> None:
        """Audited ``drop_collection``."""
        with self._audit(collection_name, Operation.DELETE):
            self.store.drop_collection(collection_name)

    def find_and_modify(  # noqa: PLR0913
        self,
        collection_name: str,
        query: Query,
        update: Query,
        sort: Sort | None = None,
        upsert: bool = False,
        return_new: bool = False,
    ) -> Document | None:
        """Audited ``find_and_modify``."""
        with self._audit(collection_name, Operation.FIND_UPDATE):
            return self.store.find_and_modify(
                collection_name, query, update, sort, upsert, return_new
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
        """Audited ``find_and_replace``."""
        with self._audit(collection_name, Operation.FIND_REPLACE):
            return self.store.find_and_replace(
                collection_name, query, replacement, sort, upsert, return_new
            )

    def find_and_remove(
        self, collection_name: str, query: Query, sort: Sort | None = None
    ) -> Document | None:
        """Audited ``find_and_remove``."""
        with self._audit(collection_name, Operation.FIND_REMOVE):
            return self.store.find_and_remove(collection_name, query, sort)

    def group(
        self,
        collection_name: str,
        keys: Sequence[str],
        accumulators: Mapping[str, Any],
        criteria: Query | None = None,
    ) -> list[Document]:
        """Audited ``group``."""
        with self._audit(collection_name, Operation.GROUP):
            return self.store.group(collection_name, keys, accumulators, criteria)

    def aggregate(
        self, collection_name: str, pipeline: Sequence[Mapping[str, Any]]
    ) -> list[Document]:
        """Audited ``aggregate``."""
        with self._audit(collection_name, Operation.AGGREGATE):
            return self.store.aggregate(collection_name, pipeline)

    def map_reduce(
        self,
        collection_name: str,
        map_function: str,
        reduce_function: str,
        query: Query | None = None,
    ) -> list[Document]:
        """Audited ``map_reduce``."""
        with self._audit(collection_name, Operation.MAP_REDUCE):
            return self.store.map_reduce(
                collection_name, map_function, reduce_function, query
            )

    def find_distinct(
        self, collection_name: str, field: str, query: Query | None = None
    ) -> list[Any]:
        """Audited ``find_distinct``."""
        with self._audit(collection_name, Operation.FETCH):
            return self.store.find_distinct(collection_name, field, query)

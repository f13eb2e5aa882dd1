import json
import logging
import os
import threading
from typing import IO, Any, Dict, Iterator, List, Optional, Tuple

from opentelemetry import trace

from domain.selectors import build_latest_version_query

# Get tracer for this module
tracer = trace.get_tracer(__name__)

DATASETS = "datasets"
EDITIONS = "editions"
INSTANCES = "instances"
DIMENSION_OPTIONS = "dimension.options"

Document = Dict[str, Any]

_MISSING = object()


class DocumentStoreError(Exception):
    """Raised when a collection cannot be read or parsed."""


class QueryCancelledError(DocumentStoreError):
    """Raised when a query is cancelled while its cursor is being read."""


def get_path(document: Document, path: str) -> Any:
    """Resolve a dotted path inside a document."""
    value: Any = document
    for key in path.split("."):
        if not isinstance(value, dict) or key not in value:
            return _MISSING
        value = value[key]
    return value


def matches(document: Document, selector: Dict[str, Any]) -> bool:
    """Check a document against a selector of dotted paths."""
    for path, expected in selector.items():
        value = get_path(document, path)
        if isinstance(expected, dict) and "$in" in expected:
            if value is _MISSING or value not in expected["$in"]:
                return False
        elif value is _MISSING or value != expected:
            return False
    return True


def _sort_key(document: Document, path: str) -> Any:
    value = get_path(document, path)
    return 0 if value is _MISSING else value


class Cursor:
    """
    Lazy iterator over the documents of a collection matching a selector.

    Holds an open file handle until closed; use it as a context manager so
    the handle is released on every exit path.
    """

    def __init__(
        self,
        handle: Optional[IO[str]],
        collection: str,
        selector: Dict[str, Any],
        sort: Optional[Tuple[str, int]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        self._handle = handle
        self.collection = collection
        self.selector = selector
        self.sort = sort
        self.cancel = cancel
        self.closed = False
        self.logger = logging.getLogger(__name__)
        self._documents: Optional[Iterator[Document]] = None

    def __enter__(self) -> "Cursor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __iter__(self) -> Iterator[Document]:
        return self

    def __next__(self) -> Document:
        if self.closed:
            raise StopIteration
        if self._documents is None:
            self._documents = self._iterate()
        return next(self._documents)

    def _scan(self) -> Iterator[Document]:
        if self._handle is None:
            return
        for line_number, line in enumerate(self._handle, start=1):
            if self.cancel is not None and self.cancel.is_set():
                raise QueryCancelledError(f"query on {self.collection} cancelled")
            line = line.strip()
            if not line:
                continue
            try:
                document = json.loads(line)
            except json.JSONDecodeError as e:
                raise DocumentStoreError(
                    f"malformed document in {self.collection} at line {line_number}: {e}"
                ) from e
            if matches(document, self.selector):
                yield document

    def _iterate(self) -> Iterator[Document]:
        if self.sort is None:
            yield from self._scan()
            return

        path, direction = self.sort
        documents = list(self._scan())
        documents.sort(key=lambda doc: _sort_key(doc, path), reverse=direction < 0)
        yield from documents

    def all(self) -> List[Document]:
        return list(self)

    def close(self) -> None:
        """Release the file handle; safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        if self._handle is not None:
            try:
                self._handle.close()
            except OSError as e:
                self.logger.error(
                    "error closing %s cursor: %s (selector=%s)",
                    self.collection,
                    e,
                    self.selector,
                )


class DocumentStoreAdapter:
    """Read-only adapter over JSONL collections, one file per collection."""

    def __init__(self, base_path: str = "data") -> None:
        self.base_path = base_path
        self.logger = logging.getLogger(__name__)

    def _get_collection_file(self, collection: str) -> str:
        """Get path to the JSONL file backing a collection."""
        return os.path.join(self.base_path, f"{collection}.jsonl")

    def _open(self, collection: str) -> Optional[IO[str]]:
        file_path = self._get_collection_file(collection)
        if not os.path.exists(file_path):
            self.logger.debug("collection %s has no file at %s", collection, file_path)
            return None
        try:
            return open(file_path, "r", encoding="utf-8")
        except OSError as e:
            raise DocumentStoreError(f"unable to open collection {collection}: {e}") from e

    def find(
        self,
        collection: str,
        selector: Dict[str, Any],
        sort: Optional[Tuple[str, int]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Cursor:
        """
        Open a cursor over matching documents.

        Args:
            collection: Collection name
            selector: Dotted-path predicate
            sort: Optional (path, direction) pair; direction -1 sorts descending
            cancel: Optional event that stops iteration once set

        Returns:
            A Cursor the caller must close
        """
        return Cursor(self._open(collection), collection, selector, sort, cancel)

    def find_one(
        self,
        collection: str,
        selector: Dict[str, Any],
        sort: Optional[Tuple[str, int]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Optional[Document]:
        """Return the first matching document, or None."""
        with tracer.start_as_current_span("store.find_one") as span:
            span.set_attribute("collection", collection)
            with self.find(collection, selector, sort, cancel) as cursor:
                document = next(cursor, None)
            span.set_attribute("found", document is not None)
            return document

    def count(
        self,
        collection: str,
        selector: Dict[str, Any],
        cancel: Optional[threading.Event] = None,
    ) -> int:
        with tracer.start_as_current_span("store.count") as span:
            span.set_attribute("collection", collection)
            with self.find(collection, selector, cancel=cancel) as cursor:
                total = sum(1 for _ in cursor)
            span.set_attribute("count", total)
            return total

    def find_highest_version_number(
        self,
        dataset_id: str,
        edition: str,
        cancel: Optional[threading.Event] = None,
    ) -> Optional[int]:
        """Return the highest version number of an edition, or None if it has none."""
        document = self.find_one(
            INSTANCES,
            build_latest_version_query(dataset_id, edition),
            sort=("version", -1),
            cancel=cancel,
        )
        # Unnumbered instances sort last
        version = document.get("version") if document is not None else None
        if version is None:
            return None
        return int(version)

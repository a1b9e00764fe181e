"""
Theme Park Wait Times - Document Store
Hierarchical key/value collections on top of a single SQLAlchemy table.

Paths follow the usual document-database layout: a collection holds documents,
a document may own subcollections, e.g.

    parks/{park_id}
    parks/{park_id}/rides/{ride_id}
    parks/{park_id}/rides/{ride_id}/wait_times/{entry_id}

Supported operations: get by id, equality query with limit, set (with merge),
create-if-absent, add with a generated id, ordered listing.
"""

import secrets
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.base import create_session_factory
from models.orm_document import Document
from utils.logger import logger, log_database_error


MAX_ADD_ATTEMPTS = 5


class PersistenceError(Exception):
    """Raised when a document store operation fails."""
    pass


@dataclass
class StoredDocument:
    """A document read back from the store."""
    id: str
    data: Dict[str, Any]


def collection_path(*segments: str) -> str:
    """
    Join path segments into a collection path.

    Example:
        >>> collection_path('parks', 'epcot', 'rides')
        'parks/epcot/rides'
    """
    for segment in segments:
        if not segment or '/' in str(segment):
            raise ValueError(f"Invalid path segment: {segment!r}")
    return '/'.join(str(segment) for segment in segments)


def _json_field(field: str, value: Any):
    """JSON path expression typed to match the comparison value."""
    element = Document.data[field]
    if isinstance(value, bool):
        return element.as_boolean()
    if isinstance(value, int):
        return element.as_integer()
    if isinstance(value, float):
        return element.as_float()
    return element.as_string()


class DocumentStore:
    """
    Document store backed by the `documents` table.

    Every public method runs in its own transaction. SQLAlchemy failures are
    logged and re-raised as PersistenceError; constraint conflicts log at debug
    only, since set() retries an insert race.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = create_session_factory(engine)

    @contextmanager
    def _transaction(self, context: str) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.debug(f"Constraint conflict in {context}: {e}")
            raise PersistenceError(f"{context}: {e}") from e
        except SQLAlchemyError as e:
            session.rollback()
            log_database_error(e, context)
            raise PersistenceError(f"{context}: {e}") from e
        finally:
            session.close()

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document's data, or None if it does not exist."""
        with self._transaction(f"get {collection}/{doc_id}") as session:
            document = session.get(Document, (collection, doc_id))
            return dict(document.data) if document is not None else None

    def exists(self, collection: str, doc_id: str) -> bool:
        return self.get(collection, doc_id) is not None

    def set(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = True) -> None:
        """
        Write a document.

        With merge=True top-level fields are merged into an existing document;
        fields absent from `data` are kept. With merge=False the document is replaced.
        """
        if not doc_id:
            raise ValueError("doc_id is required")

        try:
            self._set_once(collection, doc_id, data, merge)
        except PersistenceError as e:
            # Lost an insert race to another writer; the row exists now
            if not isinstance(e.__cause__, IntegrityError):
                raise
            self._set_once(collection, doc_id, data, merge)

    def _set_once(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool) -> None:
        with self._transaction(f"set {collection}/{doc_id}") as session:
            document = session.get(Document, (collection, doc_id))
            if document is None:
                session.add(Document(collection=collection, doc_id=doc_id, data=dict(data)))
            elif merge:
                # Reassign so the JSON column is flagged as modified
                document.data = {**document.data, **data}
            else:
                document.data = dict(data)

    def create_if_absent(self, collection: str, doc_id: str, data: Dict[str, Any]) -> bool:
        """
        Atomically create a document unless one already exists at that id.

        Returns:
            True if this call created the document, False if it already existed
        """
        if not doc_id:
            raise ValueError("doc_id is required")

        session = self._session_factory()
        try:
            session.add(Document(collection=collection, doc_id=doc_id, data=dict(data)))
            session.commit()
            return True
        except IntegrityError:
            session.rollback()
            return False
        except SQLAlchemyError as e:
            session.rollback()
            log_database_error(e, f"create {collection}/{doc_id}")
            raise PersistenceError(f"create {collection}/{doc_id}: {e}") from e
        finally:
            session.close()

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Add a document under a generated id and return the id."""
        for _ in range(MAX_ADD_ATTEMPTS):
            doc_id = secrets.token_hex(10)
            if self.create_if_absent(collection, doc_id, data):
                return doc_id
        raise PersistenceError(f"add {collection}: no free id after {MAX_ADD_ATTEMPTS} attempts")

    def query_equal(
        self,
        collection: str,
        field: str,
        value: Any,
        limit: Optional[int] = None
    ) -> List[StoredDocument]:
        """Documents of a collection whose top-level `field` equals `value`."""
        stmt = (
            select(Document)
            .where(Document.collection == collection)
            .where(_json_field(field, value) == value)
            .order_by(Document.created_at, Document.doc_id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        with self._transaction(f"query {collection} where {field}") as session:
            return [
                StoredDocument(id=document.doc_id, data=dict(document.data))
                for document in session.execute(stmt).scalars()
            ]

    def list_documents(self, collection: str, order_by: Optional[str] = None) -> List[StoredDocument]:
        """
        All documents of a collection.

        Args:
            order_by: Top-level string field to sort by (e.g. an ISO timestamp);
                      defaults to creation order
        """
        stmt = select(Document).where(Document.collection == collection)
        if order_by:
            stmt = stmt.order_by(Document.data[order_by].as_string(), Document.created_at)
        else:
            stmt = stmt.order_by(Document.created_at, Document.doc_id)

        with self._transaction(f"list {collection}") as session:
            return [
                StoredDocument(id=document.doc_id, data=dict(document.data))
                for document in session.execute(stmt).scalars()
            ]

    def count(self, collection: str) -> int:
        stmt = select(func.count()).select_from(Document).where(Document.collection == collection)
        with self._transaction(f"count {collection}") as session:
            return session.execute(stmt).scalar_one()

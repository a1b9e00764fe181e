"""
SQLAlchemy ORM Model: Document
Stores one JSON document of a hierarchical collection tree.

A document lives at (collection, doc_id). Subcollections are encoded in the
collection path, e.g. ``parks/{park_id}/rides/{ride_id}/wait_times``.
"""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (
        Index('ix_documents_collection_created', 'collection', 'created_at'),
        {'extend_existing': True},
    )

    # Composite primary key: the full document path
    collection: Mapped[str] = mapped_column(String(400), primary_key=True)
    doc_id: Mapped[str] = mapped_column(String(191), primary_key=True)

    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<Document(collection='{self.collection}', doc_id='{self.doc_id}')>"

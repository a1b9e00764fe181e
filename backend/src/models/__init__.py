# Theme Park Wait Times - Models Package

# Import all ORM models to register them with SQLAlchemy's declarative base
# IMPORTANT: Use relative imports to avoid duplicate module loading issues
from .base import Base, create_session_factory
from .orm_document import Document
from .wait_time import AttractionRecord, ParkAttractions, WaitTimeEntry, PipelineResult

__all__ = [
    'Base',
    'create_session_factory',
    'Document',
    'AttractionRecord',
    'ParkAttractions',
    'WaitTimeEntry',
    'PipelineResult',
]

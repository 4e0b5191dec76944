"""
Database models for the processed-document audit store.

Stores each processed record with its analysis payload and the positioned
elements it was reconstructed from.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Float, Text, DateTime, ForeignKey, JSON
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def generate_uuid():
    """Generate UUID string for primary keys."""
    return str(uuid.uuid4())


def utc_now():
    return datetime.now(timezone.utc)


class ProcessedDocumentRecord(Base):
    """One processed file and its extracted analysis."""

    __tablename__ = 'processed_documents'

    id = Column(String, primary_key=True)  # DOC-<hex> from the assembler
    file_name = Column(String, nullable=False)
    file_type = Column(String, nullable=False, default="")
    file_size = Column(Integer, nullable=False, default=0)
    upload_date = Column(String, nullable=False)
    status = Column(String, nullable=False)  # 'processed' or 'error'
    error = Column(Text)

    # Denormalized for listing
    document_type = Column(String, nullable=False, default='other')
    document_number = Column(String)
    analysis_method = Column(String)
    confidence = Column(Float, nullable=False, default=0.0)

    analysis = Column(JSON, nullable=False)  # camelCase record payload
    raw_text = Column(Text, nullable=False, default="")
    spatial_text = Column(Text, nullable=False, default="")
    element_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    # Relationships
    elements = relationship(
        "ElementRecord",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="ElementRecord.sequence"
    )

    def __repr__(self):
        return f"<ProcessedDocumentRecord(id={self.id}, file_name={self.file_name}, status={self.status})>"


class ElementRecord(Base):
    """Positioned element with page-local top-down geometry."""

    __tablename__ = 'elements'

    id = Column(String, primary_key=True, default=generate_uuid)
    document_id = Column(String, ForeignKey('processed_documents.id'), nullable=False)
    sequence = Column(Integer, nullable=False)  # adapter output order

    text = Column(Text, nullable=False)
    page = Column(Integer, nullable=False, default=1)
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)
    width = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    source_confidence = Column(Float)
    font_name = Column(String)

    # Relationships
    document = relationship("ProcessedDocumentRecord", back_populates="elements")

    def __repr__(self):
        return f"<ElementRecord(page={self.page}, text={self.text[:20]!r})>"

    def to_dict(self):
        """Convert to the element dict shape used by core.models."""
        return {
            'text': self.text,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'page': self.page,
            'source_confidence': self.source_confidence,
            'font_name': self.font_name,
        }

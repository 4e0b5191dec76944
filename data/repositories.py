"""
Repository pattern for data access.

Provides clean separation between data access and business logic.
"""
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from core.models import PositionedElement
from core.schemas import ExtractedDocument, ProcessedDocument
from data.db_models import ElementRecord, ProcessedDocumentRecord


class ProcessedDocumentRepository:
    """Repository for processed document records."""

    def __init__(self, session: Session):
        self.session = session

    def save(
        self,
        record: ProcessedDocument,
        elements: Iterable[PositionedElement] = ()
    ) -> ProcessedDocumentRecord:
        """
        Insert or replace a processed record.

        Args:
            record: Processed document (its id is the primary key)
            elements: Positioned elements the record was built from
        """
        existing = self.get_by_id(record.id)
        if existing is not None:
            self.session.delete(existing)
            self.session.flush()

        row = ProcessedDocumentRecord(
            id=record.id,
            file_name=record.file_name,
            file_type=record.file_type,
            file_size=record.file_size,
            upload_date=record.upload_date,
            status=record.status,
            error=record.error,
            document_type=record.document_type,
            document_number=record.analysis.document_number,
            analysis_method=record.analysis.analysis_method,
            confidence=record.analysis.confidence,
            analysis=record.analysis.to_payload(),
            raw_text=record.raw_text,
            spatial_text=record.spatial_text,
            element_count=record.element_count,
        )
        row.elements = [
            ElementRecord(
                sequence=i,
                text=el.text,
                page=el.page,
                x=el.x,
                y=el.y,
                width=el.width,
                height=el.height,
                source_confidence=el.source_confidence,
                font_name=el.font_name,
            )
            for i, el in enumerate(elements)
        ]
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def get_by_id(self, document_id: str) -> Optional[ProcessedDocumentRecord]:
        """Get record by ID."""
        return self.session.query(ProcessedDocumentRecord).filter(
            ProcessedDocumentRecord.id == document_id
        ).first()

    def list_recent(
        self,
        limit: int = 50,
        offset: int = 0,
        status: Optional[str] = None
    ) -> List[ProcessedDocumentRecord]:
        """List records, newest first, optionally filtered by status."""
        query = self.session.query(ProcessedDocumentRecord)
        if status is not None:
            query = query.filter(ProcessedDocumentRecord.status == status)
        return query\
            .order_by(ProcessedDocumentRecord.created_at.desc())\
            .limit(limit)\
            .offset(offset)\
            .all()

    def delete(self, document_id: str) -> bool:
        """Delete a record and its elements."""
        row = self.get_by_id(document_id)
        if row:
            self.session.delete(row)
            self.session.commit()
            return True
        return False

    @staticmethod
    def to_processed_document(row: ProcessedDocumentRecord) -> ProcessedDocument:
        """Rebuild the immutable record from a stored row."""
        return ProcessedDocument(
            id=row.id,
            file_name=row.file_name,
            file_type=row.file_type,
            file_size=row.file_size,
            upload_date=row.upload_date,
            status=row.status,
            error=row.error,
            document_type=row.document_type,
            analysis=ExtractedDocument.model_validate(row.analysis),
            raw_text=row.raw_text,
            spatial_text=row.spatial_text,
            element_count=row.element_count,
        )

"""
Unit tests for data.repositories and data.db_models modules.
"""
import pytest

from core.models import PositionedElement, SourceExtraction
from core.schemas import ExtractedDocument, Totals
from data import database
from data.database import DatabaseManager, init_database, session_scope
from data.db_models import ElementRecord, ProcessedDocumentRecord
from data.repositories import ProcessedDocumentRepository
from extraction.assembler import assemble_record, error_record


@pytest.fixture
def record_with_elements():
    elements = [
        PositionedElement(text="Invoice", x=10, y=100, width=60, height=10),
        PositionedElement(text="INV-1", x=260, y=100, width=40, height=10, font_name="Helvetica"),
    ]
    extraction = SourceExtraction(elements=elements, raw_text="Invoice INV-1", spatial_text="Invoice\tINV-1")
    analysis = ExtractedDocument(
        document_type='invoice',
        document_number='INV-1',
        totals=Totals(total_amount=31.25),
        confidence=0.98,
        analysis_method='LLM (Spatial)',
    )
    return assemble_record(extraction, analysis, "inv.pdf", "application/pdf", 2048), elements


class TestProcessedDocumentRepository:
    """Tests for ProcessedDocumentRepository."""

    def test_save_and_get(self, test_db_session, record_with_elements):
        record, elements = record_with_elements
        repo = ProcessedDocumentRepository(test_db_session)

        repo.save(record, elements)
        row = repo.get_by_id(record.id)

        assert row.file_name == "inv.pdf"
        assert row.document_number == "INV-1"
        assert row.confidence == 0.98
        assert row.analysis['totals']['totalAmount'] == 31.25
        assert [el.text for el in row.elements] == ["Invoice", "INV-1"]
        assert row.elements[1].font_name == "Helvetica"

    def test_round_trip_to_record(self, test_db_session, record_with_elements):
        record, elements = record_with_elements
        repo = ProcessedDocumentRepository(test_db_session)

        row = repo.save(record, elements)

        assert repo.to_processed_document(row) == record

    def test_element_to_dict(self, test_db_session, record_with_elements):
        record, elements = record_with_elements
        row = ProcessedDocumentRepository(test_db_session).save(record, elements)

        assert row.elements[0].to_dict() == elements[0].to_dict()

    def test_save_replaces_existing(self, test_db_session, record_with_elements):
        record, elements = record_with_elements
        repo = ProcessedDocumentRepository(test_db_session)
        repo.save(record, elements)

        edited = record.with_analysis(record.analysis.model_copy(update={'document_number': 'INV-2'}))
        repo.save(edited, elements[:1])

        row = repo.get_by_id(record.id)
        assert row.document_number == 'INV-2'
        assert len(row.elements) == 1

    def test_list_recent_filters_status(self, test_db_session):
        repo = ProcessedDocumentRepository(test_db_session)
        failed = error_record("broken.pdf", "Could not open PDF")
        repo.save(failed)

        errors = repo.list_recent(status='error')

        assert failed.id in [row.id for row in errors]
        assert all(row.status == 'error' for row in errors)

    def test_delete_cascades_elements(self, test_db_session, record_with_elements):
        record, elements = record_with_elements
        repo = ProcessedDocumentRepository(test_db_session)
        repo.save(record, elements)

        assert repo.delete(record.id) is True
        assert repo.get_by_id(record.id) is None
        assert test_db_session.query(ElementRecord).filter(ElementRecord.document_id == record.id).count() == 0
        assert repo.delete(record.id) is False


class TestDatabaseManager:
    """Tests for DatabaseManager."""

    def test_session_commits(self, temp_dir):
        manager = DatabaseManager(f"sqlite:///{temp_dir / 'audit.db'}")
        manager.create_tables()

        with manager.session() as session:
            ProcessedDocumentRepository(session).save(error_record("a.txt", "boom"))

        with manager.session() as session:
            assert session.query(ProcessedDocumentRecord).count() == 1

    def test_session_rolls_back(self, temp_dir):
        manager = DatabaseManager(f"sqlite:///{temp_dir / 'audit.db'}")
        manager.create_tables()

        with pytest.raises(RuntimeError):
            with manager.session() as session:
                session.add(ProcessedDocumentRecord(
                    id="DOC-x", file_name="a", upload_date="now", status="error", analysis={}
                ))
                raise RuntimeError("abort")

        with manager.session() as session:
            assert session.query(ProcessedDocumentRecord).count() == 0

    def test_session_scope_uses_global_manager(self, temp_dir, monkeypatch):
        monkeypatch.setattr(database, "_db_manager", None)
        init_database(f"sqlite:///{temp_dir / 'global.db'}")

        with session_scope() as session:
            ProcessedDocumentRepository(session).save(error_record("b.txt", "boom"))

        with session_scope() as session:
            assert session.query(ProcessedDocumentRecord).count() == 1

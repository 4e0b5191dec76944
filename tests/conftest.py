"""
Pytest configuration and global fixtures.
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import LLMBackendError
from core.models import PositionedElement
from data.db_models import Base
from llm.llm_client_base import BaseLLMClient


class FakeLLMClient(BaseLLMClient):
    """Scripted backend: returns `response` or raises `error`."""

    def __init__(self, response: str = "{}", error: Exception = None, available: bool = True):
        super().__init__("fake-model")
        self.response = response
        self.error = error
        self.available = available
        self.calls = []
        self.closed = False

    async def complete_json(self, system_prompt: str, user_prompt: str, **kwargs) -> str:
        self.calls.append({'system': system_prompt, 'user': user_prompt, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    async def is_available(self) -> bool:
        return self.available

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_llm():
    """Factory for scripted LLM clients."""
    return FakeLLMClient


@pytest.fixture
def failing_llm():
    """Client whose every call fails at the transport level."""
    return FakeLLMClient(error=LLMBackendError("connection refused"))


@pytest.fixture
def make_element():
    """Factory for positioned elements with a default height of 10."""
    def _make(text, x, y, width=20.0, height=10.0, page=1, **kwargs):
        return PositionedElement(text=text, x=x, y=y, width=width, height=height, page=page, **kwargs)
    return _make


@pytest.fixture(scope="session")
def test_db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def test_db_session(test_db_engine):
    """Create fresh database session for each test."""
    Session = sessionmaker(bind=test_db_engine)
    session = Session()

    yield session

    # Rollback any uncommitted changes and close
    session.rollback()
    session.close()


@pytest.fixture
def temp_dir(tmp_path):
    """Provide temporary directory for test files."""
    return tmp_path


@pytest.fixture
def sample_image_path(temp_dir):
    """Create a sample test image."""
    from PIL import Image

    img_path = temp_dir / "test_image.png"
    img = Image.new('RGB', (800, 600), color='white')
    img.save(img_path)

    return str(img_path)


@pytest.fixture
def sample_pdf_path(temp_dir):
    """Two-line invoice PDF with a real text layer."""
    import fitz

    pdf_path = temp_dir / "invoice.pdf"
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 100), "Invoice No. INV-1", fontsize=12)
    page.insert_text((72, 130), "Total: 1.250,00 EUR", fontsize=12)
    doc.save(str(pdf_path))
    doc.close()

    return str(pdf_path)


@pytest.fixture
def blank_pdf_path(temp_dir):
    """PDF page without any text layer."""
    import fitz

    pdf_path = temp_dir / "scan.pdf"
    doc = fitz.open()
    doc.new_page(width=595, height=842)
    doc.save(str(pdf_path))
    doc.close()

    return str(pdf_path)

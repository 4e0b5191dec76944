"""
Core domain models for document ingestion.

These are pure data structures without business logic.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class PositionedElement:
    """A text fragment with page-local, top-down bounding geometry."""
    text: str
    x: float
    y: float
    width: float
    height: float
    page: int = 1
    source_confidence: Optional[float] = None
    font_name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValueError("PositionedElement text must be a non-empty string")
        for name in ('x', 'y', 'width', 'height'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
                raise ValueError(f"PositionedElement.{name} must be a finite number, got {value!r}")
        if not isinstance(self.page, int) or self.page < 1:
            raise ValueError(f"PositionedElement.page must be an integer >= 1, got {self.page!r}")
        if self.source_confidence is not None and not 0.0 <= self.source_confidence <= 1.0:
            raise ValueError(
                f"PositionedElement.source_confidence must be in [0, 1], got {self.source_confidence!r}"
            )

    @property
    def x_end(self) -> float:
        """Right edge of the element."""
        return self.x + self.width

    @classmethod
    def from_bottom_up(
        cls,
        text: str,
        x: float,
        y_bottom_up: float,
        width: float,
        height: float,
        page_height: float,
        **kwargs
    ) -> "PositionedElement":
        """Create an element from PDF user-space coordinates (origin bottom-left)."""
        return cls(
            text=text,
            x=x,
            y=page_height - y_bottom_up,
            width=width,
            height=height,
            **kwargs
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
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


def drop_blank_elements(candidates: Iterable[dict]) -> List[dict]:
    """Filter raw element candidates whose text is empty after trimming."""
    return [
        candidate for candidate in candidates
        if isinstance(candidate.get('text'), str) and candidate['text'].strip()
    ]


def round_coord(value: float) -> float:
    """Round a coordinate to one decimal place."""
    return round(float(value) * 10) / 10


@dataclass
class SourceExtraction:
    """Output of a source adapter for one file."""
    elements: List[PositionedElement] = field(default_factory=list)
    raw_text: str = ""
    spatial_text: str = ""
    metadata: Dict = field(default_factory=dict)
    source_confidence: Optional[float] = None

    @property
    def text_for_analysis(self) -> str:
        """Spatially reconstructed text, or the raw text for degenerate sources."""
        return self.spatial_text or self.raw_text

    @property
    def page_count(self) -> int:
        """Number of pages reported by the adapter (1 if unknown)."""
        return int(self.metadata.get('num_pages', 1))


def element_from_dict(data: dict) -> PositionedElement:
    """Build an element from a dict using either snake_case or camelCase keys."""
    return PositionedElement(
        text=data['text'],
        x=float(data.get('x', 0)),
        y=float(data.get('y', 0)),
        width=float(data.get('width', 0)),
        height=float(data.get('height', 0)),
        page=int(data.get('page', 1)),
        source_confidence=data.get('source_confidence', data.get('sourceConfidence')),
        font_name=data.get('font_name', data.get('fontName')),
    )

"""Services package - Document processing orchestration."""

from .pipeline import DocumentPipeline

__all__ = ['DocumentPipeline']

"""
Exception types raised across the pipeline.
"""


class InvoflowError(Exception):
    """Base class for pipeline errors."""


class AdapterFailure(InvoflowError):
    """A source file could not be read or decoded."""

    def __init__(self, file_name: str, message: str):
        super().__init__(f"{file_name}: {message}")
        self.file_name = file_name
        self.message = message


class LLMBackendError(InvoflowError):
    """The structured-completion backend failed (transport, HTTP status or empty content)."""

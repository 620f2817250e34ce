"""Exceptions raised by manfinder."""

from __future__ import annotations

from pathlib import Path


class ManFinderError(Exception):
    """Base class for all manfinder errors."""


class ConfigurationError(ManFinderError):
    """The document root configuration is missing or malformed."""


class IndexPersistenceError(ManFinderError):
    """The persisted index is missing, corrupt or has a foreign schema."""


class DocumentOpenError(ManFinderError):
    """A manual page could not be opened."""

    def __init__(self, path: Path, page_name: str, section_label: str, cause: OSError) -> None:
        self.path = path
        self.page_name = page_name
        self.section_label = section_label
        self.cause = cause
        super().__init__(self.describe())

    def describe(self) -> str:
        return (
            f"Error opening file for {self.page_name} in section "
            f"{self.section_label}: {self.cause}"
        )


class DocumentNotFound(DocumentOpenError):
    def describe(self) -> str:
        return f"No manual entry for {self.page_name} in section {self.section_label}"


class DocumentPermissionDenied(DocumentOpenError):
    def describe(self) -> str:
        return f"Permission denied for {self.page_name} in section {self.section_label}"


class DecompressionFailure(ManFinderError):
    """A manual page could not be fully decompressed."""

    def __init__(
        self, path: Path, page_name: str, section_label: str, fmt: str, cause: Exception
    ) -> None:
        self.path = path
        self.page_name = page_name
        self.section_label = section_label
        self.format = fmt
        self.cause = cause
        super().__init__(
            f"Error extracting {fmt} file for {page_name} in section {section_label}: {cause}"
        )

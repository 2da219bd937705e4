"""Exceptions raised by the ingestion pipeline and mapped to HTTP responses."""

from typing import List, Optional


class AssetCatalogError(Exception):
    """Base error carrying a short summary and a detail message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, error: str, message: Optional[str] = None) -> None:
        super().__init__(error)
        self.error = error
        self.message = message or self.default_message


class ValidationError(AssetCatalogError):
    """Bad or missing input field."""

    status_code = 400
    default_message = "Validation failed"


class BatchValidationError(ValidationError):
    """One or more records of an uploaded batch failed validation."""

    default_message = "Data validation failed"

    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class UnsupportedFileType(ValidationError):
    default_message = "Invalid file type"

    def __init__(self, error: str = "Only CSV and JSON files are supported") -> None:
        super().__init__(error)


class ParseError(AssetCatalogError):
    """Malformed CSV or JSON payload."""

    status_code = 400
    default_message = "File parsing failed"


class NotFoundError(AssetCatalogError):
    status_code = 404
    default_message = "Asset not found"

"""Run one upload through parse, validate and store."""

import logging
from typing import Optional

from catalog.core.errors import (
    AssetCatalogError,
    ParseError,
    UnsupportedFileType,
    ValidationError,
)
from catalog.core.store import AssetStore
from catalog.etl.parse import detect_format, parse_content
from catalog.etl.validate import validate_batch
from catalog.models import IngestSummary

logger = logging.getLogger(__name__)


def _failure(exc: AssetCatalogError) -> IngestSummary:
    return IngestSummary(success=False, message=exc.message, error=exc.error)


def build_success_message(company_id: str, added: int, duplicates_skipped: int) -> str:
    message = f"Successfully uploaded {added} asset(s) for company {company_id}"
    if duplicates_skipped > 0:
        message += f". {duplicates_skipped} duplicate(s) were skipped"
    return message


def ingest_upload(
    store: AssetStore,
    *,
    company_id: Optional[str],
    filename: Optional[str],
    content: Optional[bytes],
    mimetype: Optional[str] = None,
) -> IngestSummary:
    """Parse, validate and store an uploaded file.

    Input problems come back as an unsuccessful summary and leave the store
    untouched. Anything else propagates to the caller.
    """
    try:
        company = (company_id or "").strip()
        if not company:
            raise ValidationError("companyId is required")
        if content is None:
            raise ValidationError("assetFile is required")

        fmt = detect_format(filename, mimetype)
        if fmt is None:
            raise UnsupportedFileType()

        candidates = parse_content(content, fmt)
        records = validate_batch(candidates)
    except (ValidationError, ParseError) as exc:
        logger.warning("Rejected upload %s for company=%r: %s", filename, company_id, exc.error)
        return _failure(exc)

    result = store.add_assets(company, records)
    logger.info(
        "Ingested %s for company=%s: added=%d duplicates_skipped=%d",
        filename,
        company,
        len(result.added),
        result.duplicates_skipped,
    )
    return IngestSummary(
        success=True,
        message=build_success_message(company, len(result.added), result.duplicates_skipped),
        added=result.added,
        duplicates_skipped=result.duplicates_skipped,
    )

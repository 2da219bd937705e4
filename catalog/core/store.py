"""In-memory asset store keyed by company identifier."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional, Set

from catalog.models import AddResult, AssetRecord, CompanyAsset, DeleteResult

logger = logging.getLogger(__name__)

COORDINATE_TOLERANCE = 0.0001

SAMPLE_ASSETS: Dict[str, List[AssetRecord]] = {
    "company1": [
        AssetRecord(address="123 Main St, New York, NY", latitude=40.7128, longitude=-74.006),
        AssetRecord(address="456 Oak Ave, Los Angeles, CA", latitude=34.0522, longitude=-118.2437),
    ],
    "company2": [
        AssetRecord(address="789 Pine Rd, Chicago, IL", latitude=41.8781, longitude=-87.6298),
    ],
}


def within_tolerance(record: AssetRecord, latitude: float, longitude: float) -> bool:
    return (
        abs(record.latitude - latitude) < COORDINATE_TOLERANCE
        and abs(record.longitude - longitude) < COORDINATE_TOLERANCE
    )


def is_duplicate(existing: AssetRecord, candidate: AssetRecord) -> bool:
    """Tolerance-window coordinate equality. Not transitive."""
    return within_tolerance(existing, candidate.latitude, candidate.longitude)


class AssetStore:
    """Process-wide asset collection.

    Every company key maps to a non-empty list; a bucket emptied by deletes is
    dropped, so an unknown company and a company without assets look the same.
    Mutations replace the bucket list under the lock instead of editing it in
    place, so readers always see a whole bucket.
    """

    def __init__(self, initial: Optional[Dict[str, Iterable[AssetRecord]]] = None) -> None:
        self._lock = threading.Lock()
        self._buckets: Dict[str, List[AssetRecord]] = {}
        for company_id, records in (initial or {}).items():
            bucket = list(records)
            if bucket:
                self._buckets[company_id] = bucket

    @classmethod
    def with_sample_data(cls) -> "AssetStore":
        return cls(SAMPLE_ASSETS)

    def list_assets(self, company_filter: Optional[str] = None) -> List[CompanyAsset]:
        """Return assets tagged with their company.

        A filter is a case-insensitive substring match on company ids, so
        ``"comp"`` matches both ``company1`` and ``Company2``.
        """
        with self._lock:
            snapshot = list(self._buckets.items())

        needle = company_filter.lower() if company_filter else None
        assets: List[CompanyAsset] = []
        for company_id, bucket in snapshot:
            if needle is not None and needle not in company_id.lower():
                continue
            assets.extend(CompanyAsset.from_record(record, company_id) for record in bucket)
        return assets

    def add_assets(self, company_id: str, records: Iterable[AssetRecord]) -> AddResult:
        """Append records that are not near-duplicates of already stored ones.

        Records of the same batch are only compared against what was stored
        before the call, never against each other.
        """
        result = AddResult()
        with self._lock:
            existing = self._buckets.get(company_id, [])
            for record in records:
                if any(is_duplicate(stored, record) for stored in existing):
                    result.duplicates_skipped += 1
                else:
                    result.added.append(record)
            if result.added:
                self._buckets[company_id] = existing + result.added

        logger.info(
            "Stored %d asset(s) for company=%s (duplicates skipped=%d)",
            len(result.added),
            company_id,
            result.duplicates_skipped,
        )
        return result

    def delete_asset(self, company_id: str, latitude: float, longitude: float) -> DeleteResult:
        """Remove every asset within tolerance of the coordinates, report the first."""
        with self._lock:
            bucket = self._buckets.get(company_id)
            if not bucket:
                return DeleteResult(success=False)

            matches = [record for record in bucket if within_tolerance(record, latitude, longitude)]
            if not matches:
                return DeleteResult(success=False)

            remaining = [record for record in bucket if not within_tolerance(record, latitude, longitude)]
            if remaining:
                self._buckets[company_id] = remaining
            else:
                del self._buckets[company_id]

        logger.info(
            "Deleted %d asset(s) near (%s, %s) for company=%s",
            len(matches),
            latitude,
            longitude,
            company_id,
        )
        return DeleteResult(success=True, deleted_asset=matches[0])

    def companies(self) -> Set[str]:
        with self._lock:
            return set(self._buckets)

    def total_count(self, company_id: Optional[str] = None) -> int:
        with self._lock:
            if company_id is not None:
                return len(self._buckets.get(company_id, []))
            return sum(len(bucket) for bucket in self._buckets.values())

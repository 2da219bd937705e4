"""Core data models shared by the asset ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class AssetRecord:
    """A validated asset. Identity for deduplication is the coordinate pair."""

    address: str
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, Any]:
        return {"address": self.address, "latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True, slots=True)
class CompanyAsset:
    """Asset record tagged with the company bucket it was read from."""

    address: str
    latitude: float
    longitude: float
    company_id: str

    @classmethod
    def from_record(cls, record: AssetRecord, company_id: str) -> "CompanyAsset":
        return cls(
            address=record.address,
            latitude=record.latitude,
            longitude=record.longitude,
            company_id=company_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "companyId": self.company_id,
        }


@dataclass(slots=True)
class AddResult:
    added: List[AssetRecord] = field(default_factory=list)
    duplicates_skipped: int = 0


@dataclass(slots=True)
class DeleteResult:
    success: bool
    deleted_asset: Optional[AssetRecord] = None


@dataclass(slots=True)
class IngestSummary:
    """Outcome of one upload request, serialised as the upload response body."""

    success: bool
    message: str
    added: Optional[List[AssetRecord]] = None
    duplicates_skipped: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.added is not None:
            payload["assets"] = [record.to_dict() for record in self.added]
        if self.duplicates_skipped is not None:
            payload["duplicatesSkipped"] = self.duplicates_skipped
        if self.error is not None:
            payload["error"] = self.error
        return payload

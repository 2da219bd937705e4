"""Field-presence and range checks for candidate asset records."""

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from catalog.core.errors import BatchValidationError
from catalog.models import AssetRecord

logger = logging.getLogger(__name__)

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not coordinates.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_coordinate(value: Any) -> Optional[float]:
    """Return ``value`` as a float, or None when it is not a JSON number.

    Integers too large for a float become signed infinity so range checks
    reject them instead of raising OverflowError.
    """
    if not is_number(value):
        return None
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _in_range(value: Any, bounds: Tuple[float, float]) -> bool:
    number = as_coordinate(value)
    return number is not None and math.isfinite(number) and bounds[0] <= number <= bounds[1]


def validate_record(candidate: Any, position: int) -> Tuple[Optional[AssetRecord], List[str]]:
    """Check one candidate; ``position`` is 1-based and only used in messages.

    All rules are evaluated so the caller gets every violation at once.
    """
    fields: Mapping[str, Any] = candidate if isinstance(candidate, Mapping) else {}
    errors: List[str] = []

    address = fields.get("address")
    if not isinstance(address, str) or not address.strip():
        errors.append(f"Asset {position}: address cannot be empty")

    latitude = fields.get("latitude")
    if not _in_range(latitude, LATITUDE_RANGE):
        errors.append(f"Asset {position}: latitude must be a number between -90 and 90")

    longitude = fields.get("longitude")
    if not _in_range(longitude, LONGITUDE_RANGE):
        errors.append(f"Asset {position}: longitude must be a number between -180 and 180")

    if errors:
        return None, errors
    return AssetRecord(address=address, latitude=float(latitude), longitude=float(longitude)), []


def validate_batch(candidates: Iterable[Any]) -> List[AssetRecord]:
    """All-or-nothing: any invalid record rejects the whole batch."""
    accepted: List[AssetRecord] = []
    errors: List[str] = []
    for position, candidate in enumerate(candidates, start=1):
        record, record_errors = validate_record(candidate, position)
        if record is None:
            errors.extend(record_errors)
        else:
            accepted.append(record)

    if errors:
        logger.warning("Rejected batch with %d validation error(s)", len(errors))
        raise BatchValidationError(errors)
    return accepted

"""Search and sort over brewery records.

Transform projects SourceRecords onto DisplayRecords (name, city, phone,
empty string for anything missing). Search filters the projection by a
case-insensitive substring over those three fields. Sort orders by one of
them; Python's sort is stable, so equal keys keep their input order in
both directions.
"""

import logging
from collections.abc import Iterable, Sequence

from brewfeed.models import DisplayRecord, SourceRecord

logger = logging.getLogger(__name__)

SORT_FIELDS = ("name", "phone", "city")
DEFAULT_SORT_FIELD = "city"


def transform_records(records: Iterable[SourceRecord] | None) -> list[DisplayRecord]:
    """Project source records to display records, preserving order."""
    if not records:
        return []
    return [
        DisplayRecord(
            name=record.name or "",
            city=record.city or "",
            phone=record.phone or "",
        )
        for record in records
    ]


def _matches(record: DisplayRecord, needle: str) -> bool:
    return (
        needle in record.name.casefold()
        or needle in record.city.casefold()
        or needle in record.phone.casefold()
    )


def search_records(
    records: Iterable[SourceRecord] | None,
    term: str | None = None,
) -> list[DisplayRecord]:
    """Transform records and keep those whose name, city or phone contains term.

    A None or blank term returns every transformed record.
    """
    transformed = transform_records(records)

    if term is None or not term.strip():
        logger.debug("No search term, returning all %d records", len(transformed))
        return transformed

    needle = term.strip().casefold()
    matched = [r for r in transformed if _matches(r, needle)]
    logger.debug("Search '%s' matched %d of %d records", term, len(matched), len(transformed))
    return matched


def resolve_sort_field(sort_by: str | None) -> str:
    """Map a requested sort key onto a known field; unknown keys fall back to city."""
    key = (sort_by or "").strip().lower()
    return key if key in SORT_FIELDS else DEFAULT_SORT_FIELD


def sort_records(
    records: Sequence[DisplayRecord] | None,
    sort_by: str | None = DEFAULT_SORT_FIELD,
    descending: bool = False,
) -> list[DisplayRecord]:
    """Stable sort of display records by name, phone or city.

    Unexpected errors return the records in their input order.
    """
    if not records:
        return []

    field = resolve_sort_field(sort_by)
    try:
        result = sorted(records, key=lambda r: getattr(r, field) or "", reverse=descending)
    except Exception as e:
        logger.error("Sorting by '%s' failed, returning input order: %s", field, e)
        return list(records)

    logger.debug("Sorted %d records by %s (descending=%s)", len(result), field, descending)
    return result

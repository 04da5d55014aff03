"""Search/transform engine for brewfeed."""

from brewfeed.engine.search import (
    DEFAULT_SORT_FIELD,
    SORT_FIELDS,
    resolve_sort_field,
    search_records,
    sort_records,
    transform_records,
)

__all__ = [
    "DEFAULT_SORT_FIELD",
    "SORT_FIELDS",
    "resolve_sort_field",
    "search_records",
    "sort_records",
    "transform_records",
]

"""Record types shared across the pipeline.

SourceRecord is the typed boundary for remote and snapshot payloads.
DisplayRecord is the three-field projection handed back to callers.
"""

from dataclasses import asdict, dataclass

from pydantic import BaseModel, ConfigDict, TypeAdapter


class SourceRecord(BaseModel):
    """One brewery as returned by Open Brewery DB.

    All known fields are optional. Unknown attributes are kept as extras so
    they survive a snapshot round trip. Numeric values for string fields
    (postal codes, phones, coordinates) are stored as strings.
    """

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    id: str | None = None
    name: str | None = None
    brewery_type: str | None = None
    address_1: str | None = None
    address_2: str | None = None
    address_3: str | None = None
    city: str | None = None
    state_province: str | None = None
    postal_code: str | None = None
    country: str | None = None
    longitude: str | None = None
    latitude: str | None = None
    phone: str | None = None
    website_url: str | None = None
    state: str | None = None
    street: str | None = None


SourceRecordList = TypeAdapter(list[SourceRecord])


@dataclass(frozen=True)
class DisplayRecord:
    """Normalized view of a brewery: name, city and phone, never None."""

    name: str = ""
    city: str = ""
    phone: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return asdict(self)

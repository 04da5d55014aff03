"""Tests for record models."""

import pytest
from pydantic import ValidationError

from brewfeed.models import DisplayRecord, SourceRecord, SourceRecordList


class TestSourceRecord:
    """Test SourceRecord parsing at the boundary."""

    def test_missing_fields_default_to_none(self) -> None:
        record = SourceRecord.model_validate({"name": "Alpha"})
        assert record.name == "Alpha"
        assert record.city is None
        assert record.phone is None

    def test_extra_attributes_are_kept(self) -> None:
        """Unknown fields pass through and round-trip through JSON."""
        record = SourceRecord.model_validate({"name": "Alpha", "rating": 4.5})
        assert record.model_extra == {"rating": 4.5}

        restored = SourceRecordList.validate_json(SourceRecordList.dump_json([record]))
        assert restored[0].model_extra == {"rating": 4.5}

    def test_numeric_coordinates_become_strings(self) -> None:
        record = SourceRecord.model_validate({"longitude": -104.99, "latitude": "39.74"})
        assert record.longitude == "-104.99"
        assert record.latitude == "39.74"

    def test_numeric_postal_code_id_and_phone_become_strings(self) -> None:
        record = SourceRecord.model_validate(
            {"id": 42, "name": "Odd", "postal_code": 80301, "phone": 3035550100}
        )
        assert record.id == "42"
        assert record.postal_code == "80301"
        assert record.phone == "3035550100"

    def test_is_immutable(self) -> None:
        record = SourceRecord(name="Alpha")
        with pytest.raises(ValidationError):
            record.name = "Beta"

    def test_rejects_wrongly_typed_field(self) -> None:
        with pytest.raises(ValidationError):
            SourceRecord.model_validate({"name": ["not", "a", "string"]})


class TestDisplayRecord:
    """Test DisplayRecord."""

    def test_defaults_to_empty_strings(self) -> None:
        assert DisplayRecord() == DisplayRecord(name="", city="", phone="")

    def test_to_dict(self) -> None:
        record = DisplayRecord(name="Alpha", city="Denver", phone="111")
        assert record.to_dict() == {"name": "Alpha", "city": "Denver", "phone": "111"}

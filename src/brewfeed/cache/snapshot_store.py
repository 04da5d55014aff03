"""Snapshot store — last good record set on local disk.

Holds the whole brewery collection in a single file, used as a fallback when
the remote source is unavailable.

Formats:
    json     JSON array of brewery objects (default)
    parquet  One row per brewery, written with pyarrow

Writes go to a temporary file in the target directory and are swapped in with
os.replace, so a concurrent reader sees either the previous snapshot or the
new one in full. Reads never raise: a missing, empty or corrupt snapshot
loads as an empty list and is logged.

All I/O runs in asyncio.to_thread for non-blocking execution.
"""

import asyncio
import logging
import os
import tempfile
import threading
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
from pydantic import ValidationError

from brewfeed.errors import PersistenceFailure
from brewfeed.models import SourceRecord, SourceRecordList

logger = logging.getLogger(__name__)

SNAPSHOT_FORMATS = ("json", "parquet")


class SnapshotStore:
    """Single-file snapshot of the last successfully fetched records.

    Args:
        path: Snapshot file location. Parent directories are created on save.
        fmt: 'json' or 'parquet'
    """

    def __init__(self, path: str | Path = "response.json", fmt: str = "json") -> None:
        if fmt not in SNAPSHOT_FORMATS:
            raise ValueError(f"fmt must be one of {SNAPSHOT_FORMATS}, got '{fmt}'")
        self.path = Path(path)
        self.fmt = fmt
        self._write_lock = threading.Lock()

    def has_data(self) -> bool:
        """True iff the snapshot file exists and is non-empty."""
        try:
            return self.path.is_file() and self.path.stat().st_size > 0
        except OSError as e:
            logger.error("Failed to stat snapshot %s: %s", self.path, e)
            return False

    async def load(self) -> list[SourceRecord]:
        """Read the snapshot.

        Returns:
            Stored records, or an empty list if absent, empty or unreadable
        """
        if not self.has_data():
            logger.warning("No snapshot data available at %s", self.path)
            return []

        try:
            records = await asyncio.to_thread(self._read)
        except PersistenceFailure as e:
            logger.error("%s; returning empty snapshot", e)
            return []

        logger.info("Loaded %d records from snapshot %s", len(records), self.path)
        return records

    async def save(self, records: list[SourceRecord] | None) -> None:
        """Replace the snapshot with records.

        Empty or None input is ignored so that a legitimately empty fetch does
        not erase a previously good snapshot. Failures are logged, not raised.
        """
        if not records:
            logger.warning("Refusing to save empty record set to snapshot %s", self.path)
            return

        try:
            await asyncio.to_thread(self._write, list(records))
        except PersistenceFailure as e:
            logger.error("%s", e)
            return
        except Exception as e:
            logger.error("Unexpected error saving snapshot %s: %s", self.path, e, exc_info=True)
            return

        logger.info("Saved %d records to snapshot %s", len(records), self.path)

    def _read(self) -> list[SourceRecord]:
        try:
            if self.fmt == "parquet":
                rows = pq.read_table(self.path).to_pylist()
                return SourceRecordList.validate_python(rows)
            data = self.path.read_bytes()
            if not data.strip():
                return []
            return SourceRecordList.validate_json(data)
        except (OSError, ValidationError, pa.ArrowException) as e:
            raise PersistenceFailure(f"Failed to read snapshot {self.path}: {e}") from e

    def _write(self, records: list[SourceRecord]) -> None:
        with self._write_lock:
            tmp_name: str | None = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self.path.parent,
                    prefix=f".{self.path.name}.",
                    suffix=".tmp",
                )
                if self.fmt == "parquet":
                    os.close(fd)
                    rows = [r.model_dump(mode="json") for r in records]
                    # from_pylist takes its columns from the first row only
                    columns = dict.fromkeys(k for row in rows for k in row)
                    rows = [{k: row.get(k) for k in columns} for row in rows]
                    pq.write_table(
                        pa.Table.from_pylist(rows),
                        tmp_name,
                        compression="snappy",
                        use_dictionary=True,
                    )
                else:
                    with os.fdopen(fd, "wb") as fh:
                        fh.write(SourceRecordList.dump_json(records, indent=2))
                        fh.flush()
                        os.fsync(fh.fileno())
                os.replace(tmp_name, self.path)
                tmp_name = None
            except (OSError, ValueError, pa.ArrowException) as e:
                raise PersistenceFailure(f"Failed to write snapshot {self.path}: {e}") from e
            finally:
                if tmp_name is not None:
                    Path(tmp_name).unlink(missing_ok=True)

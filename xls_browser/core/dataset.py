from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .exceptions import DatasetSchemaError

Row = Mapping[str, Any]


def parse_timestamp_ms(raw: Any) -> int:
    """
    Normalise a store timestamp to integer milliseconds since the epoch (UTC).

    Accepts ISO-8601 strings (with or without a trailing 'Z'), datetimes,
    and numbers already expressed in milliseconds. Unparseable values map
    to 0, the same value used for "no timestamp".
    """
    if raw is None or raw == "":
        return 0

    if isinstance(raw, bool):
        return 0

    if isinstance(raw, (int, float)):
        return int(raw)

    if isinstance(raw, datetime):
        dt = raw
    else:
        text = str(raw).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return 0

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def format_timestamp_iso(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).isoformat()


@dataclass(frozen=True)
class DatasetMeta:
    """
    Catalog entry for a dataset, as listed by the store.

    - id: opaque identifier assigned by the store
    - file_name: name of the uploaded spreadsheet/CSV
    - row_count: authoritative number of rows reported by the store
    - created_at: upload time in epoch milliseconds (0 when unknown)
    - display_name: optional human label; `label` falls back to file_name
    - description: optional free text
    """
    id: str
    file_name: str
    row_count: int = 0
    created_at: int = 0
    display_name: Optional[str] = None
    description: Optional[str] = None

    @property
    def label(self) -> str:
        name = (self.display_name or "").strip()
        return name or self.file_name

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> DatasetMeta:
        """Build from a store JSON record (`_id`, `fileName`, `rowCount`, ...)."""
        dataset_id = record.get("_id", record.get("id"))
        if dataset_id is None or str(dataset_id) == "":
            raise DatasetSchemaError("Catalog record is missing an id")

        try:
            row_count = int(record.get("rowCount") or 0)
        except (TypeError, ValueError):
            raise DatasetSchemaError(
                f"Dataset '{dataset_id}' has a non-integer rowCount: {record.get('rowCount')!r}"
            ) from None

        return cls(
            id=str(dataset_id),
            file_name=str(record.get("fileName") or ""),
            row_count=max(row_count, 0),
            created_at=parse_timestamp_ms(record.get("createdAt")),
            display_name=record.get("displayName") or None,
            description=record.get("description") or None,
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "_id": self.id,
            "fileName": self.file_name,
            "rowCount": self.row_count,
            "createdAt": format_timestamp_iso(self.created_at),
        }
        if self.display_name:
            record["displayName"] = self.display_name
        if self.description:
            record["description"] = self.description
        return record


@dataclass(frozen=True)
class DatasetPayload:
    """
    Parsed table content: ordered unique headers and ordered row records.

    Rows are kept exactly as the store sent them; a row may omit any header.
    """
    headers: Tuple[str, ...]
    rows: Tuple[Row, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        seen = set()
        duplicates = []
        for header in self.headers:
            if header in seen:
                duplicates.append(header)
            seen.add(header)
        if duplicates:
            raise DatasetSchemaError(f"Duplicate headers in payload: {sorted(set(duplicates))}")

    @classmethod
    def build(cls, headers: Sequence[Any], rows: Sequence[Row]) -> DatasetPayload:
        for idx, row in enumerate(rows):
            if not isinstance(row, Mapping):
                raise DatasetSchemaError(f"Row {idx} is not a mapping: {type(row).__name__}")
        return cls(headers=tuple(str(h) for h in headers), rows=tuple(rows))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> DatasetPayload:
        """Build from a store JSON record (`headers`, `data`)."""
        return cls.build(record.get("headers") or [], record.get("data") or [])

    def to_frame(self) -> pd.DataFrame:
        """Rows as a DataFrame with columns in header order; missing keys become NaN."""
        if not self.rows:
            return pd.DataFrame(columns=list(self.headers))
        return pd.DataFrame.from_records(list(self.rows), columns=list(self.headers))


@dataclass(frozen=True)
class Dataset:
    """
    A catalog entry together with its payload, when resident.

    Used as the unit the selection hands to the aggregation engine and the
    views. `payload` is None while the rows have not been fetched.
    """
    meta: DatasetMeta
    payload: Optional[DatasetPayload] = None

    @property
    def id(self) -> str:
        return self.meta.id

    @property
    def label(self) -> str:
        return self.meta.label

    @property
    def row_count(self) -> int:
        return self.meta.row_count

    @property
    def headers(self) -> Tuple[str, ...]:
        return self.payload.headers if self.payload is not None else ()

    @property
    def rows(self) -> Tuple[Row, ...]:
        return self.payload.rows if self.payload is not None else ()

    @property
    def is_loaded(self) -> bool:
        return self.payload is not None


def catalog_from_records(records: Sequence[Mapping[str, Any]]) -> List[DatasetMeta]:
    return [DatasetMeta.from_record(r) for r in records]

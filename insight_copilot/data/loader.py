"""Turn uploaded CSV / JSON / Excel files into row-records.

Functions here are side-effect free except for reading the given file.
"""
from __future__ import annotations
import json
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import IO, Any, Dict, List, Union

import numpy as np
import pandas as pd

__all__ = [
    "Dataset",
    "DatasetError",
    "DatasetParseError",
    "SUPPORTED_SUFFIXES",
    "UnsupportedFileError",
    "build_preview",
    "load_dataset",
    "read_frame",
]

SUPPORTED_SUFFIXES = (".csv", ".json", ".xlsx", ".xls")

Source = Union[str, Path, IO[Any]]


class DatasetError(ValueError):
    """Base class for upload problems shown to the user."""


class UnsupportedFileError(DatasetError):
    pass


class DatasetParseError(DatasetError):
    pass


@dataclass
class Dataset:
    file_name: str
    rows: List[Dict[str, Any]] = field(default_factory=list)
    frame: pd.DataFrame = field(default_factory=pd.DataFrame, repr=False)

    def __bool__(self) -> bool:
        return bool(self.rows)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        value = float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def read_frame(source: Source, file_name: str) -> pd.DataFrame:
    """Parse one upload into a DataFrame; only the first Excel sheet is read."""
    suffix = Path(file_name).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedFileError(
            f"Only CSV, JSON, or Excel files are supported (got '{suffix or file_name}')."
        )
    try:
        if suffix == ".csv":
            return pd.read_csv(source, skip_blank_lines=True)
        if suffix == ".json":
            raw = source.read() if hasattr(source, "read") else Path(source).read_bytes()
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            parsed = json.loads(raw)
            records = parsed if isinstance(parsed, list) else [parsed]
            return pd.DataFrame.from_records(records)
        return pd.read_excel(source, sheet_name=0)
    except DatasetError:
        raise
    except Exception as exc:
        raise DatasetParseError(f"Failed to parse {file_name}: {exc}") from exc


def load_dataset(source: Source, file_name: str) -> Dataset:
    frame = read_frame(source, file_name)
    frame = frame.dropna(how="all")
    rows = [
        {str(k): _to_jsonable(v) for k, v in record.items()}
        for record in frame.to_dict(orient="records")
    ]
    return Dataset(file_name=file_name, rows=rows, frame=frame)


def build_preview(dataset: Dataset, sample: int = 3) -> str:
    """Markdown notice shown in the chat right after an upload."""
    preview = f"📂 Uploaded file: **{dataset.file_name}**\n\n"
    if not dataset.rows:
        return preview + "⚠️ Could not parse dataset. Please upload valid CSV/JSON/Excel."
    head = json.dumps(dataset.rows[:sample], indent=2, ensure_ascii=False, default=str)
    return preview + f"Parsed **{len(dataset.rows)} rows**. Example:\n```json\n{head}\n```"

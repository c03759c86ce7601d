from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from ..config import get_config
from .backends.csv_backend import CsvDataAccess
from .interface import DataAccess


def get_data_access(kind: Literal["csv"] = "csv", data_dir: Optional[str | Path] = None) -> DataAccess:
    if kind == "csv":
        # Reads from configured CSV folder unless told otherwise
        return CsvDataAccess(data_dir=data_dir or get_config().data_dir)
    raise ValueError(f"Unknown data access kind: {kind}")

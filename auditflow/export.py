"""Write fetched records to CSV or Excel."""

import csv
import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping

from openpyxl import Workbook

from .models import Record

SUPPORTED_SUFFIXES = (".csv", ".xlsx")
MAX_SHEET_TITLE = 31

log = logging.getLogger(__name__)


def flatten(row: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested dicts into dotted keys: {"vendor": {"name": x}} -> {"vendor.name": x}.

    Lists are written as JSON text.
    """
    out: dict[str, Any] = {}
    for key, value in row.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            out.update(flatten(value, prefix=f"{name}."))
        elif isinstance(value, (list, tuple)):
            out[name] = json.dumps(value, default=str)
        else:
            out[name] = value
    return out


def _as_dict(row: Any) -> Mapping[str, Any]:
    if isinstance(row, Record):
        return row.to_dict()
    if isinstance(row, Mapping):
        return row
    raise TypeError(f"Cannot export row of type {type(row).__name__}")


def _sheet_title(title: str | None) -> str:
    title = re.sub(r"[\[\]:*?/\\]", "", title or "").strip()
    return title[:MAX_SHEET_TITLE] or "Data"


def write_table(
    rows: Iterable[Any],
    path: str | Path,
    columns: list[str] | None = None,
    title: str | None = None,
) -> int:
    """Write ``rows`` (dicts or records) to ``path``; the suffix picks the format.

    ``columns`` fixes the column order and selection; by default every key
    seen is used, in first-seen order. Returns the number of rows written.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported export format {suffix!r} (use .csv or .xlsx)")

    flat = [flatten(_as_dict(row)) for row in rows]
    if columns is None:
        columns = []
        seen: set[str] = set()
        for row in flat:
            for key in row:
                if key not in seen:
                    seen.add(key)
                    columns.append(key)

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(columns)
            for row in flat:
                writer.writerow(["" if row.get(c) is None else row.get(c) for c in columns])
    else:
        wb = Workbook()
        ws = wb.active
        ws.title = _sheet_title(title)
        ws.append(columns)
        for row in flat:
            ws.append([row.get(c) for c in columns])
        wb.save(str(path))

    log.info("Wrote %d rows to %s", len(flat), path)
    return len(flat)

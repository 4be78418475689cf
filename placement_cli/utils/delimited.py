"""Reading and writing the comma-delimited data files.

Every file has a single header row. Writers replace commas and line breaks in
free text with spaces, so no quoting is ever needed. Readers accept comma or
tab delimited input and pad short rows so missing trailing fields read as
empty strings.
"""

import csv
import re
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Type, TypeVar

from placement_cli.errors import PersistenceError

E = TypeVar("E", bound=Enum)

_UNSAFE = re.compile(r"[,\r\n\t]+")


def clean_text(value: Optional[str]) -> str:
    if value is None:
        return ""
    return _UNSAFE.sub(" ", str(value)).strip()


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def format_datetime(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


def format_enum(value: Optional[Enum]) -> str:
    return value.name if value is not None else ""


def parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "y")


def parse_int(value: str, default: int = 0) -> int:
    try:
        return int(value.strip())
    except (TypeError, ValueError):
        return default


def parse_date(value: str) -> Optional[date]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_datetime(value: str, default: Optional[datetime] = None) -> Optional[datetime]:
    value = (value or "").strip()
    if not value:
        return default
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return default
    if parsed.tzinfo is not None:
        # Stored timestamps are naive local time
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_enum(enum_cls: Type[E], value: str, default: E) -> E:
    value = (value or "").strip().upper()
    if not value:
        return default
    try:
        return enum_cls[value]
    except KeyError:
        return default


def numeric_suffix(identifier: Optional[str]) -> int:
    """Return the integer made of the digits in an id (``"REG012"`` -> 12)."""
    if not identifier:
        return 0
    digits = re.sub(r"\D+", "", identifier)
    return int(digits) if digits else 0


def _detect_delimiter(header_line: str) -> str:
    return "\t" if "\t" in header_line and "," not in header_line else ","


def read_rows(path: Path, width: int) -> List[List[str]]:
    """Read data rows (header skipped), each padded to ``width`` fields.

    A missing file reads as no rows. Raises PersistenceError on I/O failure.
    """
    if not path.exists():
        return []
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            first = f.readline()
            if not first:
                return []
            reader = csv.reader(f, delimiter=_detect_delimiter(first))
            rows = []
            for row in reader:
                if not row or not any(cell.strip() for cell in row):
                    continue
                cells = [cell.strip() for cell in row]
                if len(cells) < width:
                    cells.extend([""] * (width - len(cells)))
                rows.append(cells)
            return rows
    except OSError as e:
        raise PersistenceError(f"Failed to read {path}: {e}") from e


def read_records(path: Path) -> List[Dict[str, str]]:
    """Read a roster file into dicts keyed by lower-cased, space-free header names."""
    if not path.exists():
        return []
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            first = f.readline()
            if not first:
                return []
            delimiter = _detect_delimiter(first)
            header = [
                h.strip().lower().replace(" ", "")
                for h in next(csv.reader([first], delimiter=delimiter))
            ]
            records = []
            for row in csv.reader(f, delimiter=delimiter):
                if not row or not any(cell.strip() for cell in row):
                    continue
                values = [cell.strip() for cell in row]
                values.extend([""] * (len(header) - len(values)))
                records.append(dict(zip(header, values)))
            return records
    except OSError as e:
        raise PersistenceError(f"Failed to read {path}: {e}") from e


def write_rows(path: Path, header: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
    """Rewrite the whole file. Raises PersistenceError on I/O failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(header)
            for row in rows:
                writer.writerow(row)
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e

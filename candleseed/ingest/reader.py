"""CSV reader for per-ticker candle files."""

import csv
from pathlib import Path

from candleseed.exceptions import CsvFormatError, DataFileError


def read_rows(path: Path) -> list[list[str]]:
    """Read every data row of a CSV file.

    The first row is always a header and is dropped. Blank lines are
    skipped. The whole file is read into memory.

    Args:
        path: Path to the CSV file.

    Returns:
        Data rows as lists of string fields. Empty if the file has no
        header or no data.

    Raises:
        DataFileError: If the file cannot be opened or decoded.
        CsvFormatError: If a row's field count differs from the header's
            or a quoted field is never closed.
    """
    path = Path(path)
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.reader(f, strict=True)
            rows = [(reader.line_num, row) for row in reader if row]
    except csv.Error as e:
        raise CsvFormatError(f"Malformed CSV in {path}: {e}", path=path) from e
    except UnicodeDecodeError as e:
        raise DataFileError(f"{path} is not valid UTF-8: {e}", path=path) from e
    except OSError as e:
        raise DataFileError(f"Could not read {path}: {e.strerror or e}", path=path) from e

    if not rows:
        return []

    header = rows[0][1]
    data = []
    for number, row in rows[1:]:
        if len(row) != len(header):
            raise CsvFormatError(
                f"{path} line {number}: expected {len(header)} fields, got {len(row)}",
                path=path,
            )
        data.append(row)
    return data

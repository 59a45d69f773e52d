"""
CSV Utilities

Export of normalized product rows to CSV.
"""

import csv
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..models import ProductRow

# Column order of exported rows (wire names)
ROW_FIELDNAMES = [
    'id',
    'name',
    'category',
    'subcategory',
    'price',
    'quantity',
    'unit',
    'pricePerUnit',
    'image',
    'netWeight',
    'supermarket',
]


def rows_to_records(rows: Iterable[ProductRow]) -> List[Dict[str, str]]:
    """
    Flatten product rows into CSV-ready dictionaries.

    Args:
        rows: Normalized product rows

    Returns:
        List of dicts keyed by ROW_FIELDNAMES; None becomes "" and net
        weight is written as "<t> <u>"
    """
    records = []
    for row in rows:
        record = row.to_dict()
        record['netWeight'] = str(row.net_weight) if row.net_weight else ""
        records.append({
            key: "" if record[key] is None else str(record[key])
            for key in ROW_FIELDNAMES
        })
    return records


def write_csv(
    file_path: str | Path,
    rows: List[Dict[str, str]],
    fieldnames: Optional[List[str]] = None,
    encoding: str = 'utf-8'
) -> int:
    """
    Dump flat string records, such as rows_to_records output, with a header line.

    Nothing is written, not even a header, when there are no records.

    Args:
        file_path: Destination file, overwritten if present
        rows: Records to write
        fieldnames: Header order; defaults to the first record's keys
        encoding: Text encoding of the file

    Returns:
        Count of records written
    """
    if not rows:
        return 0

    if fieldnames is None:
        fieldnames = list(rows[0].keys())

    with open(file_path, 'w', encoding=encoding, newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)

    return len(rows)


def export_rows(file_path: str | Path, rows: Iterable[ProductRow]) -> int:
    """
    Write product rows to a CSV file.

    Args:
        file_path: Path to output CSV file
        rows: Normalized product rows

    Returns:
        Number of rows written
    """
    return write_csv(file_path, rows_to_records(rows), fieldnames=ROW_FIELDNAMES)

"""
CSV Utilities

Writing CSV files that may carry preamble lines before the header row
(the Recommendations upload format requires them).
"""

import csv
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence


def configure_csv(field_size_limit: int = 10 * 1024 * 1024) -> None:
    """
    Configure CSV module for large fields.

    Args:
        field_size_limit: Maximum field size in bytes (default: 10MB)
    """
    csv.field_size_limit(field_size_limit)


def write_csv(
    file_path: str | Path,
    rows: List[Dict[str, str]],
    fieldnames: Optional[List[str]] = None,
    header: Optional[List[str]] = None,
    preamble: Sequence[str] = (),
    encoding: str = 'utf-8'
) -> int:
    """
    Write rows to a CSV file, creating parent directories as needed.

    Args:
        file_path: Path to output CSV file
        rows: List of dictionaries to write
        fieldnames: Row keys in column order (if None, uses keys from first row)
        header: Header titles written instead of the field names
        preamble: Raw lines written before the header row
        encoding: File encoding (default: utf-8)

    Returns:
        Number of rows written
    """
    if fieldnames is None:
        if not rows:
            raise ValueError("fieldnames are required when there are no rows")
        fieldnames = list(rows[0].keys())

    directory = os.path.dirname(str(file_path))
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(file_path, 'w', encoding=encoding, newline='') as f:
        for line in preamble:
            f.write(line + '\n')

        writer = csv.DictWriter(f, fieldnames=fieldnames, lineterminator='\n')
        if header is None:
            writer.writeheader()
        else:
            csv.writer(f, lineterminator='\n').writerow(header)
        writer.writerows(rows)

    return len(rows)


# Initialize CSV configuration on module import
configure_csv()

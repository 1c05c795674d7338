"""
CSV row source and result sink.

Decodes a header-row CSV into Row mappings, checks the row source contract,
and writes LeadResults back out.
"""

import csv
import io
from pathlib import Path
from typing import Iterable

from .errors import ValidationError
from .models.lead import LeadResult, Row

CONTENT_FIELDS = ('snippet', 'description')

RESULT_FIELDNAMES = [
    'url',
    'row_index',
    'contact_name',
    'contact_title',
    'contact_email',
    'contact_phone',
    'company_name',
    'contact_address',
    'matched_keywords',
    'classification',
    'is_person_profile',
    'quality',
    'confidence_score',
    'needs_contact_search',
    'skip_reason',
    'additional_info',
    'processed_at',
    'source',
]


def parse_rows(content: str) -> list[dict[str, str | None]]:
    """
    Decode CSV text with a header row into rows.

    Values stay strings; blank lines and all-empty rows are skipped.
    """
    reader = csv.DictReader(io.StringIO(content.lstrip('\ufeff')))
    return [
        row
        for row in reader
        if any(isinstance(v, str) and v.strip() for v in row.values())
    ]


def read_rows(path: str | Path) -> list[dict[str, str | None]]:
    """Read and decode a CSV file."""
    with open(path, newline='', encoding='utf-8-sig') as f:
        return parse_rows(f.read())


def validate_rows(rows: list[Row]) -> None:
    """
    Check the row source contract.

    Raises:
        ValidationError: If there are no rows, the url column or both content
            columns are missing, or any row has an empty url
    """
    if not rows:
        raise ValidationError('CSV file is empty')

    columns = set(rows[0].keys())
    if 'url' not in columns:
        raise ValidationError(
            'CSV must contain a "url" column',
            context={'columns': sorted(c for c in columns if c)},
        )

    if not any(field in columns for field in CONTENT_FIELDS):
        raise ValidationError(
            'CSV must contain either a "snippet" or "description" column',
            context={'columns': sorted(c for c in columns if c)},
        )

    missing = [i for i, row in enumerate(rows) if not (row.get('url') or '').strip()]
    if missing:
        raise ValidationError(
            f'{len(missing)} rows are missing URL values',
            context={'row_indexes': missing[:20]},
        )


def results_to_csv(results: Iterable[LeadResult]) -> str:
    """Serialize results to CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=RESULT_FIELDNAMES, extrasaction='ignore')
    writer.writeheader()
    for result in results:
        writer.writerow(result.to_record())
    return buffer.getvalue()


def write_results(path: str | Path, results: Iterable[LeadResult]) -> Path:
    """Write results to a CSV file, creating parent directories as needed."""
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        f.write(results_to_csv(results))
    return filepath

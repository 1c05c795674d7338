"""
Contact aggregation.

Combines pattern extraction over a row's free text with the explicit
structured fields the row already carries. Explicit data outranks inferred
data: an explicit value always ends up at index 0 of its list.
"""

import re
from typing import Callable

from ..models.contact import ContactBundle
from ..models.lead import EXPLICIT_CONTACT_FIELDS, Row
from .patterns import (
    extract_addresses,
    extract_companies,
    extract_emails,
    extract_names,
    extract_phones,
    extract_titles,
    format_phone,
)

# Row fields concatenated into the text blob, in this order
TEXT_FIELDS = (
    'snippet',
    'description',
    'contact_name',
    'contact_title',
    'company_name',
    'contact_address',
    'keywords',
)

KEYWORD_PATTERNS = (
    # Role / seniority / partnership terms
    re.compile(
        r'\b(?:sponsor|sponsorship|presenting sponsor|partner|partnership|corporate|'
        r'executive|leadership|owner|founder)\b',
        re.IGNORECASE,
    ),
    # Domain / location terms
    re.compile(
        r'\b(?:Kansas City|KC|Royals|baseball|sports|entertainment)\b',
        re.IGNORECASE,
    ),
    # Business function terms
    re.compile(
        r'\b(?:marketing|sales|business development|ticketing|hospitality)\b',
        re.IGNORECASE,
    ),
)

# Comparison key per explicit field; the rest compare exactly
_COMPARISON_KEYS: dict[str, Callable[[str], str]] = {'contact_email': str.lower}


def _field(row: Row, key: str) -> str:
    value = row.get(key)
    return value if isinstance(value, str) else ''


def build_text_blob(row: Row) -> str:
    """Join the row's free-text and explicit text fields into one blob."""
    return ' '.join(
        value for value in (_field(row, key) for key in TEXT_FIELDS) if value.strip()
    )


def _promote(values: list[str], value: str, key: Callable[[str], str]) -> list[str]:
    """Put value at index 0, dropping any entry that compares equal to it."""
    wanted = key(value)
    return [value, *(v for v in values if key(v) != wanted)]


def _keywords(row: Row, text: str) -> list[str]:
    seeded = [k.strip() for k in _field(row, 'keywords').split(',') if k.strip()]
    for pattern in KEYWORD_PATTERNS:
        seeded.extend(match.group(0) for match in pattern.finditer(text))
    return list(dict.fromkeys(k.lower() for k in seeded))


def aggregate(row: Row) -> ContactBundle:
    """
    Build the ContactBundle for one row.

    Runs every pattern extractor over the row's text blob, then promotes the
    row's explicit contact fields to the front of their lists. Keywords are
    seeded from the row's comma-separated 'keywords' field and extended with
    vocabulary matches, then lowercased and deduplicated.

    Never raises for a well-formed row; a row without text yields an empty bundle.
    """
    text = build_text_blob(row)

    lists: dict[str, list[str]] = {
        'names': extract_names(text),
        'titles': extract_titles(text),
        'emails': extract_emails(text),
        'phones': extract_phones(text),
        'companies': extract_companies(text),
        'addresses': extract_addresses(text),
    }

    for field, attr in EXPLICIT_CONTACT_FIELDS.items():
        value = _field(row, field)
        if not value.strip():
            continue
        if field == 'contact_phone':
            value = format_phone(value)
        lists[attr] = _promote(lists[attr], value, _COMPARISON_KEYS.get(field, str))

    return ContactBundle(**lists, keywords=_keywords(row, text))


def classification_text(row: Row, bundle: ContactBundle) -> str:
    """Text handed to the classifier: row text plus the extracted names, titles and companies."""
    parts = [
        _field(row, 'snippet'),
        _field(row, 'description'),
        ' '.join(bundle.names),
        ' '.join(bundle.titles),
        ' '.join(bundle.companies),
    ]
    return ' '.join(part for part in parts if part)

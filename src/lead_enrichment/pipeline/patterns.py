"""
Pattern-based contact entity extraction.

Stateless functions that pull candidate emails, phones, names, titles,
companies and addresses out of free text. Every function is total: it
returns a (possibly empty) ordered-unique list and never raises.

Extraction is heuristic. Nothing here attempts linguistic correctness.
"""

import re
from typing import Iterable

# =============================================================================
# Patterns
# =============================================================================

EMAIL_PATTERN = re.compile(
    r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b',
    re.IGNORECASE,
)

# Applied in this order; every hit is canonicalized through format_phone.
PHONE_PATTERNS = (
    # 913-555-1234 / 913.555.1234 / 913 555 1234
    re.compile(r'\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b'),
    # (913) 555-1234
    re.compile(r'(?<!\w)\(\d{3}\)\s?\d{3}[-.\s]?\d{4}\b'),
    # +1 913-555-1234 / 1 (913) 555-1234
    re.compile(r'(?<!\w)(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b'),
    # 9135551234
    re.compile(r'\b\d{10}\b'),
)

NAME_PATTERNS = (
    # Two or more consecutive capitalized words
    re.compile(r'(?<!\S)([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+)(?=[\s,]|$)'),
    # Explicit lead-in: "Contact: Jane Doe", "Name: Jane Doe", "by Jane Doe"
    re.compile(r'(?i:\bcontact:|\bname:|\bby\s)\s*([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*)'),
)

TITLE_VOCABULARY = (
    'CEO',
    'CTO',
    'CFO',
    'COO',
    'CMO',
    'President',
    'Vice President',
    'VP',
    'Director',
    'Manager',
    'Founder',
    'Owner',
    'Principal',
    'Partner',
    'Executive',
    'Administrator',
    'Coordinator',
)

TITLE_PATTERNS = (
    re.compile(
        r'\b(?:' + '|'.join(sorted(TITLE_VOCABULARY, key=len, reverse=True)) + r')\b',
        re.IGNORECASE,
    ),
    re.compile(r'(?:Title:|Position:)[ \t]*([^,\n]+)', re.IGNORECASE),
)

COMPANY_PATTERNS = (
    # Legal-entity / organization suffixes
    re.compile(
        r'\b(?:Inc\.?|LLC|Corp\.?|Corporation|Company|Ltd\.?|Limited|Partners|'
        r'Partnership|Group|Holdings|Enterprises)(?!\w)',
        re.IGNORECASE,
    ),
    re.compile(r'(?:Company:|Organization:|Employer:)[ \t]*([^,\n]+)', re.IGNORECASE),
)

STREET_SUFFIXES = (
    'Street',
    'St',
    'Avenue',
    'Ave',
    'Road',
    'Rd',
    'Boulevard',
    'Blvd',
    'Drive',
    'Dr',
    'Lane',
    'Ln',
    'Way',
    'Court',
    'Ct',
    'Plaza',
    'Square',
    'Park',
)

ADDRESS_PATTERNS = (
    re.compile(
        r'\b\d{1,5}[ \t]+[\w \t]+?\b(?:' + '|'.join(STREET_SUFFIXES) + r')\b[^,\n]*',
        re.IGNORECASE,
    ),
    re.compile(r'(?:Address:|Location:)[ \t]*([^,\n]+)', re.IGNORECASE),
)

SENTENCE_BOUNDARY = re.compile(r'[.!?]')

# Words the company walk-back may collect; capped so fragments stay local
COMPANY_LOOKBACK_WORDS = 3

MIN_ADDRESS_LENGTH = 10

# Titles this short ("VP") are too ambiguous to keep
MIN_TITLE_LENGTH = 2

COMMON_WORDS = frozenset(
    {
        'the',
        'and',
        'for',
        'with',
        'from',
        'about',
        'contact',
        'email',
        'phone',
        'address',
        'website',
        'page',
        'profile',
    }
)


# =============================================================================
# Helpers
# =============================================================================


def _unique(values: Iterable[str]) -> list[str]:
    """Deduplicate preserving first occurrence."""
    return list(dict.fromkeys(values))


def _is_common_word(word: str) -> bool:
    return word.lower() in COMMON_WORDS


def format_phone(phone: str) -> str:
    """
    Canonicalize a phone number to (AAA) PPP-NNNN.

    10 digits are formatted directly, 11 digits with a leading country code 1
    drop the 1 first. Anything else is returned unchanged. Idempotent.
    """
    digits = re.sub(r'\D', '', phone)

    if len(digits) == 11 and digits[0] == '1':
        digits = digits[1:]
    elif len(digits) != 10:
        return phone

    return f'({digits[:3]}) {digits[3:6]}-{digits[6:]}'


# =============================================================================
# Extractors
# =============================================================================


def extract_emails(text: str) -> list[str]:
    """Lowercased email addresses in order of first occurrence."""
    if not text:
        return []
    return _unique(match.group(0).lower() for match in EMAIL_PATTERN.finditer(text))


def extract_phones(text: str) -> list[str]:
    """Phone numbers, deduplicated by their formatted form."""
    if not text:
        return []
    found = []
    for pattern in PHONE_PATTERNS:
        found.extend(format_phone(match.group(0)) for match in pattern.finditer(text))
    return _unique(found)


def extract_names(text: str) -> list[str]:
    """Capitalized multi-word names plus explicit Contact:/Name:/by lead-ins."""
    if not text:
        return []
    names = []
    for pattern in NAME_PATTERNS:
        names.extend(match.group(1).strip() for match in pattern.finditer(text))
    return _unique(
        name for name in names if len(name) > 2 and not _is_common_word(name)
    )


def extract_titles(text: str) -> list[str]:
    """Known executive/role titles plus explicit Title:/Position: lead-ins."""
    if not text:
        return []
    vocabulary, explicit = TITLE_PATTERNS
    titles = [match.group(0) for match in vocabulary.finditer(text)]
    titles.extend(match.group(1).strip() for match in explicit.finditer(text))
    return _unique(title for title in titles if len(title) > MIN_TITLE_LENGTH)


def extract_companies(text: str) -> list[str]:
    """
    Company name fragments.

    For each legal-entity suffix, up to three preceding words from the same
    sentence are joined onto the suffix ("Acme Widgets Inc."). Explicit
    Company:/Organization:/Employer: lead-ins are captured verbatim.
    """
    if not text:
        return []
    suffixes, explicit = COMPANY_PATTERNS
    companies = []

    for match in suffixes.finditer(text):
        sentence_start = 0
        for boundary in SENTENCE_BOUNDARY.finditer(text, 0, match.start()):
            sentence_start = boundary.end()
        words = text[sentence_start : match.start()].split()[-COMPANY_LOOKBACK_WORDS:]
        if words:
            companies.append(' '.join([*words, match.group(0)]))

    companies.extend(match.group(1).strip() for match in explicit.finditer(text))

    return _unique(
        company
        for company in companies
        if len(company) > 2 and not _is_common_word(company)
    )


def extract_addresses(text: str) -> list[str]:
    """Street addresses (house number + street suffix) and Address:/Location: lead-ins."""
    if not text:
        return []
    street, explicit = ADDRESS_PATTERNS
    addresses = [match.group(0).strip() for match in street.finditer(text)]
    addresses.extend(match.group(1).strip() for match in explicit.finditer(text))
    return _unique(
        address for address in addresses if len(address) > MIN_ADDRESS_LENGTH
    )

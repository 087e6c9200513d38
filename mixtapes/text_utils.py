"""Text normalization utilities for mixtape records."""

import re
from datetime import date
from typing import Optional

from bs4 import BeautifulSoup

SLUG_MAX_LENGTH = 80
ENTITY_ARTIFACT = '&nbsp;'

_DATE_PATTERN = re.compile(r'^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$')


def collapse_whitespace(text: str) -> str:
    """Trim and collapse runs of whitespace (including non-breaking spaces)."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def normalize_html(html: str) -> str:
    """Drop whitespace between tags and line breaks so patterns see one line."""
    return re.sub(r'>\s+<', '><', html).replace('\r', ' ').replace('\n', ' ')


def strip_markup(fragment: str) -> str:
    """Return the visible text of an HTML fragment, entities decoded."""
    if not fragment:
        return ""
    text = BeautifulSoup(fragment, 'html.parser').get_text()
    return collapse_whitespace(text)


def slugify(title: str) -> str:
    """Derive a filesystem-safe slug from a title.

    Lowercase ASCII alphanumerics and single hyphens only, no leading or
    trailing hyphen, at most 80 characters.
    """
    result = title.lower()
    result = re.sub(r"['‘’\"“”]", '', result)
    result = re.sub(r'[^a-z0-9]+', '-', result)
    result = result.strip('-')
    return result[:SLUG_MAX_LENGTH].rstrip('-')


def parse_date(text: str) -> Optional[str]:
    """Convert ``M/D/YYYY`` to ``YYYY-MM-DD``; None if not a real date."""
    match = _DATE_PATTERN.match(text or '')
    if not match:
        return None
    month, day, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def clean_entity_artifacts(text: str) -> str:
    """Remove leftover ``&nbsp;`` tokens and surrounding whitespace."""
    if not text:
        return ""
    result = text
    # Removing one token can join the pieces of another
    while ENTITY_ARTIFACT in result:
        result = result.replace(ENTITY_ARTIFACT, '')
    return result.strip()

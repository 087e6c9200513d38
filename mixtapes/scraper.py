"""Field extraction for Art of the Mix listing and detail pages.

Pages are inconsistent hand-made markup, so every field is recovered
best-effort: a field whose patterns all miss keeps its default and the
caller decides whether the resulting record is usable.

Two copies of the page are used. Structural patterns (title, track rows)
run on a copy with inter-tag whitespace and line breaks removed; the
labeled-field searches (date, format, notes, side markers) run on the raw
text, since some pages depend on the original spacing around labels.
"""

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from .dataclasses import ImporterConfig, MixRecord, Track
from .text_utils import collapse_whitespace, normalize_html, parse_date, strip_markup

MIX_ID_PATTERN = re.compile(r'/mix/(\d+)')

TITLE_PATTERNS = (
    re.compile(r'<h1[^>]*>([^<]+)</h1>', re.IGNORECASE),
    re.compile(r'<title>([^<|]+)', re.IGNORECASE),
    re.compile(r'class="?mix-title"?[^>]*>([^<]+)<', re.IGNORECASE),
)

# Labels may be followed by colons, spaces or closing/opening tags before the value
_LABEL_GAP = r'(?:[:\s]|&nbsp;|<[^>]+>)*'
DATE_PATTERNS = (
    re.compile(r'Submit\s*Date' + _LABEL_GAP + r'(\d{1,2}/\d{1,2}/\d{4})', re.IGNORECASE),
    re.compile(r'Submitted' + _LABEL_GAP + r'(\d{1,2}/\d{1,2}/\d{4})', re.IGNORECASE),
)
FORMAT_PATTERN = re.compile(r'Format' + _LABEL_GAP + r'(CD|Cassette|Playlist)\b', re.IGNORECASE)

NOTES_PATTERNS = (
    re.compile(r';\s*for\s+([a-z][a-z\s.]+?)(?:\.|<|$)', re.IGNORECASE),
    re.compile(r'dedicated?\s+(?:to\s+)?([a-z][a-z\s.]+?)(?:\.|<|$)', re.IGNORECASE),
)

SIDE_A_PATTERN = re.compile(r'\bSide\s*A\b', re.IGNORECASE)
SIDE_B_PATTERN = re.compile(r'\bSide\s*B\b', re.IGNORECASE)

HEADER_LABELS = ('artist', 'song')

# "Artist - Title"; spaced separators first so hyphenated names stay whole
_QUOTES = '"“”'
LIST_ITEM_PATTERNS = (
    re.compile(r'^(.+?)\s+[-–—]+\s+[' + _QUOTES + r']?(.+?)[' + _QUOTES + r']?$'),
    re.compile(r'^(.+?)\s*[-–—]\s*[' + _QUOTES + r']?(.+?)[' + _QUOTES + r']?$'),
)


def _dedupe_preserving_order(items: List[str]) -> List[str]:
    seen = set()
    unique_items = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique_items.append(item)
    return unique_items


class MixScraper:
    """Recovers mix ids and mix records from page HTML."""

    def __init__(self, config: Optional[ImporterConfig] = None) -> None:
        self.config = config or ImporterConfig()
        self.logger = logging.getLogger(__name__)

        author = re.escape(self.config.site_author) if self.config.site_author else None
        self._author_suffix = re.compile(rf'\s+by\s+{author}\.?$', re.IGNORECASE) if author else None

    # Listing pages

    def extract_mix_ids(self, html: str) -> List[str]:
        """Return the distinct mix ids linked from a listing page, first-seen order."""
        return _dedupe_preserving_order(MIX_ID_PATTERN.findall(html or ''))

    def extract_page_count(self, html: str) -> Optional[int]:
        """Return the highest listing page number linked from a listing page."""
        pattern = re.compile(rf'/members/{re.escape(self.config.member_id)}/mixes/(\d+)')
        pages = [int(page) for page in pattern.findall(html or '')]
        return max(pages) if pages else None

    # Detail pages

    def extract_title(self, normalized_html: str) -> str:
        for pattern in TITLE_PATTERNS:
            match = pattern.search(normalized_html)
            if match:
                title = strip_markup(match.group(1))
                if self._author_suffix:
                    title = self._author_suffix.sub('', title)
                return title
        return ''

    def extract_date(self, html: str) -> Optional[str]:
        for pattern in DATE_PATTERNS:
            match = pattern.search(html)
            if match:
                return parse_date(match.group(1))
        return None

    def extract_format(self, html: str) -> Optional[str]:
        """Return the labeled format (lower-cased), or None if unlabeled."""
        match = FORMAT_PATTERN.search(html)
        return match.group(1).lower() if match else None

    def extract_notes(self, html: str) -> str:
        for pattern in NOTES_PATTERNS:
            match = pattern.search(html)
            if match:
                name = collapse_whitespace(match.group(1)).lower()
                return f"for {name}"
        return ''

    def split_sides(self, html: str) -> Optional[Tuple[str, str]]:
        """Split at the first "Side B" marker if both side markers are present.

        The second segment keeps the marker itself.
        """
        if not SIDE_A_PATTERN.search(html):
            return None
        side_b = SIDE_B_PATTERN.search(html)
        if not side_b:
            return None
        return html[:side_b.start()], html[side_b.start():]

    def extract_tracks(self, html: str) -> List[Track]:
        """Parse a page segment into an ordered track list.

        Table rows are read first (first cell artist, second cell song). Only
        when no row yields a track are list items tried, as "Artist - Title".
        """
        soup = BeautifulSoup(normalize_html(html), 'html.parser')

        tracks = self._tracks_from_rows(soup)
        if not tracks:
            tracks = self._tracks_from_list_items(soup)
        return tracks

    def _tracks_from_rows(self, soup: BeautifulSoup) -> List[Track]:
        tracks = []
        for row in soup.find_all('tr'):
            cells = row.find_all('td', recursive=False)
            if len(cells) < 2:
                continue
            # Layout rows wrap whole tables, not tracks
            if cells[0].find('tr') or cells[1].find('tr'):
                continue

            artist = collapse_whitespace(cells[0].get_text())
            song = collapse_whitespace(cells[1].get_text())

            if artist.lower() in HEADER_LABELS or song.lower() in HEADER_LABELS:
                continue
            if not artist or not song:
                continue

            tracks.append(Track(title=song.lower(), artist=artist.lower()))
        return tracks

    def _tracks_from_list_items(self, soup: BeautifulSoup) -> List[Track]:
        tracks = []
        for item in soup.find_all('li'):
            text = collapse_whitespace(item.get_text())
            for pattern in LIST_ITEM_PATTERNS:
                match = pattern.match(text)
                if match:
                    artist = match.group(1).strip()
                    title = match.group(2).strip()
                    if artist and title:
                        tracks.append(Track(title=title.lower(), artist=artist.lower()))
                    break
        return tracks

    def extract_mix(self, html: str, mix_id: str) -> MixRecord:
        """Build a candidate record from a detail page (not validated)."""
        normalized = normalize_html(html)
        record = MixRecord(id=mix_id, source_url=self.config.mix_url(mix_id))

        record.title = self.extract_title(normalized)
        record.date = self.extract_date(html)
        record.format = self.extract_format(html) or 'cd'
        record.notes = self.extract_notes(html)

        sides = self.split_sides(html)
        if sides:
            record.format = 'cassette'
            side_a_html, side_b_html = sides
            record.side_a = self.extract_tracks(side_a_html)
            record.side_b = self.extract_tracks(side_b_html)
            record.tracks = record.side_a + record.side_b
        else:
            record.tracks = self.extract_tracks(normalized)

        self.logger.debug(
            f"Mix {mix_id}: title={record.title!r} date={record.date} "
            f"format={record.format} tracks={len(record.tracks)}"
        )
        return record

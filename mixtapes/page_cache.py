"""On-disk cache of fetched listing and mix pages.

Entries are named after what they hold rather than the URL that produced
them: ``mix_<id>.html`` for a mix detail page and
``listing_<member>_<page>.html`` for a page of a member's listing. URLs of
any other shape are never cached. Entry age is taken from the file's
modification time.
"""

import logging
import re
import time
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

MIX_PATH_RE = re.compile(r'^/mix/(\d+)/?$')
LISTING_PATH_RE = re.compile(r'^/members/(\d+)/mixes/(\d+)/?$')

SECONDS_PER_DAY = 24 * 60 * 60


def cache_key(url: str) -> Optional[str]:
    """Return the entry name for ``url``, or None if such pages are not cached."""
    path = urlparse(url).path

    match = MIX_PATH_RE.match(path)
    if match:
        return f"mix_{match.group(1)}"

    match = LISTING_PATH_RE.match(path)
    if match:
        return f"listing_{match.group(1)}_{match.group(2)}"

    return None


class PageCache:
    """Keeps the HTML of listing and mix pages between runs."""

    def __init__(self, cache_dir: str, expiry_days: int = 0) -> None:
        self.cache_dir = Path(cache_dir)
        self.expiry_days = expiry_days
        self.logger = logging.getLogger(__name__)

        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def _entry_path(self, url: str) -> Optional[Path]:
        key = cache_key(url)
        if key is None:
            return None
        return self.cache_dir / f"{key}.html"

    def _is_expired(self, entry: Path) -> bool:
        if self.expiry_days <= 0:
            return False
        age = time.time() - entry.stat().st_mtime
        return age > self.expiry_days * SECONDS_PER_DAY

    def get(self, url: str) -> Optional[str]:
        """Return the cached page for ``url`` if present and fresh."""
        entry = self._entry_path(url)
        if entry is None or not entry.is_file():
            self.logger.debug(f"Cache miss: {url}")
            return None

        try:
            if self._is_expired(entry):
                self.logger.debug(f"Cache expired: {url}")
                entry.unlink()
                return None
            html = entry.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(f"Unreadable cache entry {entry.name}: {e}")
            entry.unlink(missing_ok=True)
            return None

        self.logger.debug(f"Cache hit: {url}")
        return html

    def put(self, url: str, html: str) -> None:
        """Store ``html`` for ``url``; pages outside the listing/mix shapes are ignored."""
        entry = self._entry_path(url)
        if entry is None:
            return

        try:
            entry.write_text(html, encoding='utf-8')
            self.logger.debug(f"Cached {entry.name}")
        except OSError as e:
            self.logger.error(f"Failed to cache {url}: {e}")

    def clear(self) -> int:
        """Remove every cached page and return how many were removed."""
        removed = 0
        for entry in self.cache_dir.glob("*.html"):
            try:
                entry.unlink()
                removed += 1
            except OSError as e:
                self.logger.warning(f"Could not remove {entry}: {e}")
        self.logger.info(f"Cleared {removed} cached pages")
        return removed

    def info(self) -> Dict[str, Any]:
        entries = list(self.cache_dir.glob("*.html"))
        return {
            'cache_dir': str(self.cache_dir),
            'mix_pages': sum(1 for entry in entries if entry.name.startswith('mix_')),
            'listing_pages': sum(1 for entry in entries if entry.name.startswith('listing_')),
            'total_size_bytes': sum(entry.stat().st_size for entry in entries),
            'expiry_days': self.expiry_days,
        }

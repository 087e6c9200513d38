"""Two-phase import of a member's mixes into JSON content files.

Phase 1 walks the paginated listing and collects mix ids; phase 2 fetches
each mix page, extracts a record and writes it. Requests are issued one at
a time and paced by the fetcher. A failure on one page or one mix is logged
and counted; it never stops the run, and a run can be repeated safely since
every mix rewrites its own file.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .page_cache import PageCache
from .dataclasses import ImporterConfig, ImportResult
from .exceptions import FetchError
from .fetcher import PageFetcher
from .scraper import MixScraper
from .writer import RecordWriter

DEFAULT_PAGE_COUNT = 44


class MixtapeImporter:
    """Drives fetch, extract and write across all listing and mix pages."""

    def __init__(self, config: Optional[ImporterConfig] = None,
                 fetcher: Optional[PageFetcher] = None,
                 scraper: Optional[MixScraper] = None,
                 writer: Optional[RecordWriter] = None) -> None:
        self.config = config or ImporterConfig()
        self.logger = logging.getLogger(__name__)

        self.fetcher = fetcher or PageFetcher(self.config, page_cache=self._init_page_cache())
        self.scraper = scraper or MixScraper(self.config)
        self.writer = writer or RecordWriter(self.config.output_dir)

    def _init_page_cache(self) -> Optional[PageCache]:
        if not self.config.cache_enabled:
            return None
        cache_dir = Path(self.config.cache_dir)
        if not cache_dir.is_absolute():
            cache_dir = cache_dir.resolve()
        return PageCache(str(cache_dir), self.config.cache_expiry_days)

    def run(self) -> ImportResult:
        """Import every mix; only an unusable output directory is fatal."""
        self.writer.ensure_output_dir()

        result = ImportResult()
        mix_ids = self.discover_mix_ids(result)
        result.discovered = len(mix_ids)
        self.logger.info(f"Total mix IDs collected: {len(mix_ids)}")

        for index, mix_id in enumerate(mix_ids, start=1):
            self.logger.info(f"[{index}/{len(mix_ids)}] Fetching mix {mix_id}")
            self.import_mix(mix_id, result)

        self.logger.info(
            f"Import complete: {result.created} created, {result.updated} updated, {result.errors} errors"
        )
        return result

    def resolve_page_count(self) -> Tuple[int, Optional[str]]:
        """Return the listing page count and, if it was fetched to detect it, page 1's HTML."""
        if self.config.page_count is not None:
            return self.config.page_count, None

        try:
            html = self.fetcher.fetch(self.config.listing_url(1))
        except FetchError as e:
            self.logger.warning(f"Could not detect page count, using {DEFAULT_PAGE_COUNT}: {e}")
            return DEFAULT_PAGE_COUNT, None

        page_count = self.scraper.extract_page_count(html)
        if page_count is None:
            self.logger.warning(f"No listing pages linked, using {DEFAULT_PAGE_COUNT}")
            return DEFAULT_PAGE_COUNT, html
        self.logger.info(f"Detected {page_count} listing pages")
        return page_count, html

    def discover_mix_ids(self, result: Optional[ImportResult] = None) -> List[str]:
        """Phase 1: collect distinct mix ids across all listing pages."""
        result = result if result is not None else ImportResult()
        page_count, first_page_html = self.resolve_page_count()

        mix_ids: List[str] = []
        seen = set()
        for page in range(1, page_count + 1):
            try:
                if page == 1 and first_page_html is not None:
                    html = first_page_html
                else:
                    html = self.fetcher.fetch(self.config.listing_url(page))
                page_ids = self.scraper.extract_mix_ids(html)
            except Exception as e:
                self.logger.error(f"Listing page {page}/{page_count}: {e}")
                result.failed_pages.append(page)
                continue

            new_ids = [mix_id for mix_id in page_ids if mix_id not in seen]
            seen.update(new_ids)
            mix_ids.extend(new_ids)
            self.logger.info(f"Listing page {page}/{page_count}: found {len(page_ids)} mixes ({len(new_ids)} new)")

        return mix_ids

    def import_mix(self, mix_id: str, result: ImportResult) -> bool:
        """Phase 2 for one mix. Returns True if a file was written."""
        try:
            html = self.fetcher.fetch(self.config.mix_url(mix_id))
            record = self.scraper.extract_mix(html, mix_id)

            problems = record.validation_errors()
            if problems:
                self.logger.warning(f"Mix {mix_id}: could not parse mix data ({', '.join(problems)})")
                result.invalid += 1
                result.errors += 1
                result.failed_ids.append(mix_id)
                return False

            outcome = self.writer.write(record)
        except Exception as e:
            self.logger.error(f"Mix {mix_id}: {type(e).__name__}: {e}")
            result.errors += 1
            result.failed_ids.append(mix_id)
            return False

        if outcome == 'created':
            result.created += 1
        else:
            result.updated += 1
        return True

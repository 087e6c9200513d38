"""Tests for the two-phase import run."""

import json

import pytest
from bs4.builder import ParserRejectedMarkup
from mixtapes.core import DEFAULT_PAGE_COUNT, MixtapeImporter
from mixtapes.exceptions import FetchError


class FakeFetcher:
    """Serves canned pages by URL; unknown URLs fail like a 404."""

    def __init__(self, pages):
        self.pages = pages
        self.requested = []

    def fetch(self, url):
        self.requested.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, status=404)
        if isinstance(page, Exception):
            raise page
        return page

    def close(self):
        pass


def listing(*ids):
    return ''.join(f'<a href="/mix/{mix_id}">Mix {mix_id}</a>' for mix_id in ids)


def detail(title, rows, date="1/2/2003"):
    cells = ''.join(f'<tr><td>{artist}</td><td>{song}</td></tr>' for artist, song in rows)
    return f'<h1>{title}</h1><p>Submit Date: {date}</p><table>{cells}</table>'


class TestMixtapeImporter:
    """Test suite for MixtapeImporter."""

    @pytest.fixture
    def pages(self, test_config):
        return {
            test_config.listing_url(1): listing("7", "12"),
            test_config.listing_url(2): listing("7", "5"),
            test_config.mix_url("7"): detail("First Mix", [("Low", "Words")]),
            test_config.mix_url("12"): detail("Second Mix", [("Air", "Playground Love"), ("Moby", "Porcelain")]),
            test_config.mix_url("5"): detail("Third Mix", [("Bjork", "Joga")]),
        }

    def make_importer(self, test_config, pages):
        return MixtapeImporter(test_config, fetcher=FakeFetcher(pages))

    def test_discovers_distinct_ids_across_pages(self, test_config, pages):
        importer = self.make_importer(test_config, pages)
        assert importer.discover_mix_ids() == ["7", "12", "5"]

    def test_full_run_writes_every_mix(self, test_config, pages, output_dir):
        result = self.make_importer(test_config, pages).run()

        assert result.discovered == 3
        assert result.created == 3
        assert result.updated == 0
        assert result.errors == 0
        assert sorted(path.name for path in output_dir.glob("*.json")) == [
            "first-mix.json", "second-mix.json", "third-mix.json",
        ]
        with open(output_dir / "second-mix.json", encoding='utf-8') as f:
            data = json.load(f)
        assert data['tracks'] == [
            {'title': 'playground love', 'artist': 'air'},
            {'title': 'porcelain', 'artist': 'moby'},
        ]
        assert data['date'] == "2003-01-02"

    def test_rerun_updates_in_place(self, test_config, pages, output_dir):
        self.make_importer(test_config, pages).run()
        before = {path.name: path.read_bytes() for path in output_dir.glob("*.json")}

        result = self.make_importer(test_config, pages).run()

        assert result.created == 0
        assert result.updated == 3
        assert {path.name: path.read_bytes() for path in output_dir.glob("*.json")} == before

    def test_fetch_failure_counted_and_run_continues(self, test_config, pages, output_dir):
        """A 404 for one mix does not stop later mixes."""
        del pages[test_config.mix_url("12")]

        importer = self.make_importer(test_config, pages)
        result = importer.run()

        assert result.errors == 1
        assert result.failed_ids == ["12"]
        assert result.created == 2
        assert importer.fetcher.requested[-1] == test_config.mix_url("5")
        assert (output_dir / "third-mix.json").exists()

    @pytest.mark.parametrize("html", [
        "<html><body>Mix not found</body></html>",
        detail("", [("Low", "Words")]),
        detail("No Tracks", []),
        detail("Header Only", [("Artist", "Song")]),
        detail("Undated", [("Low", "Words")], date="sometime"),
    ])
    def test_invalid_records_never_written(self, test_config, pages, output_dir, html):
        pages[test_config.mix_url("12")] = html

        result = self.make_importer(test_config, pages).run()

        assert result.errors == 1
        assert result.invalid == 1
        assert result.created == 2
        assert len(list(output_dir.glob("*.json"))) == 2

    def test_listing_page_failure_skipped(self, test_config, pages):
        del pages[test_config.listing_url(1)]

        result = self.make_importer(test_config, pages).run()

        assert result.failed_pages == [1]
        assert result.discovered == 2
        assert result.created == 2

    def test_write_failure_counted(self, test_config, pages, output_dir):
        importer = self.make_importer(test_config, pages)
        output_dir.mkdir(parents=True)
        (output_dir / "second-mix.json").mkdir()  # A directory in the way

        result = importer.run()

        assert result.errors == 1
        assert result.failed_ids == ["12"]
        assert result.created == 2

    def test_request_order(self, test_config, pages):
        importer = self.make_importer(test_config, pages)
        importer.run()

        assert importer.fetcher.requested == [
            test_config.listing_url(1),
            test_config.listing_url(2),
            test_config.mix_url("7"),
            test_config.mix_url("12"),
            test_config.mix_url("5"),
        ]

    def test_rejected_markup_counted_and_run_continues(self, test_config, pages, output_dir):
        """A page the HTML parser refuses fails that mix only."""
        importer = self.make_importer(test_config, pages)
        extract_mix = importer.scraper.extract_mix

        def reject_second(html, mix_id):
            if mix_id == "12":
                raise ParserRejectedMarkup("unexpected marked section")
            return extract_mix(html, mix_id)

        importer.scraper.extract_mix = reject_second
        result = importer.run()

        assert result.errors == 1
        assert result.failed_ids == ["12"]
        assert result.created == 2
        assert importer.fetcher.requested[-1] == test_config.mix_url("5")

    def test_listing_extraction_failure_skipped(self, test_config, pages):
        importer = self.make_importer(test_config, pages)
        extract_mix_ids = importer.scraper.extract_mix_ids
        calls = []

        def fail_first(html):
            calls.append(html)
            if len(calls) == 1:
                raise RuntimeError("broken listing")
            return extract_mix_ids(html)

        importer.scraper.extract_mix_ids = fail_first
        result = importer.run()

        assert result.failed_pages == [1]
        assert result.discovered == 2
        assert result.created == 2


class TestPageCountDetection:
    """Test suite for listing page count resolution."""

    def test_fixed_page_count(self, test_config):
        importer = MixtapeImporter(test_config, fetcher=FakeFetcher({}))
        assert importer.resolve_page_count() == (2, None)
        assert importer.fetcher.requested == []

    def test_detected_from_first_page(self, test_config):
        test_config.page_count = None
        first = test_config.listing_url(1)
        pages = {first: '<a href="/members/3942/mixes/2">2</a><a href="/members/3942/mixes/3">3</a>'}
        importer = MixtapeImporter(test_config, fetcher=FakeFetcher(pages))

        assert importer.resolve_page_count() == (3, pages[first])

    def test_falls_back_when_first_page_fails(self, test_config):
        test_config.page_count = None
        importer = MixtapeImporter(test_config, fetcher=FakeFetcher({}))

        assert importer.resolve_page_count() == (DEFAULT_PAGE_COUNT, None)

    def test_falls_back_when_no_pager(self, test_config):
        test_config.page_count = None
        pages = {test_config.listing_url(1): listing("1")}
        importer = MixtapeImporter(test_config, fetcher=FakeFetcher(pages))

        assert importer.resolve_page_count() == (DEFAULT_PAGE_COUNT, listing("1"))

    def test_detection_reuses_first_listing_page(self, test_config):
        test_config.page_count = None
        first = test_config.listing_url(1)
        pages = {
            first: listing("7") + '<a href="/members/3942/mixes/2">2</a>',
            test_config.listing_url(2): listing("5"),
        }
        importer = MixtapeImporter(test_config, fetcher=FakeFetcher(pages))

        assert importer.discover_mix_ids() == ["7", "5"]
        assert importer.fetcher.requested == [first, test_config.listing_url(2)]


def test_page_cache_created_when_enabled(test_config, temp_cache_dir):
    test_config.cache_enabled = True
    test_config.cache_dir = str(temp_cache_dir)

    importer = MixtapeImporter(test_config)

    assert importer.fetcher.page_cache is not None
    assert temp_cache_dir.exists()
    importer.fetcher.close()

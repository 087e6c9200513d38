"""Art of the Mix mixtape importer."""

__version__ = "1.0.0"

from .dataclasses import ImporterConfig, ImportResult, MixRecord, NormalizeResult, Track
from .exceptions import FetchError, MixtapeError, ParseError
from .core import MixtapeImporter

# Components (for direct use and testing)
from .fetcher import PageFetcher
from .page_cache import PageCache
from .scraper import MixScraper
from .writer import RecordWriter
from .normalizer import normalize_directory, normalize_record
from .text_utils import parse_date, slugify

__all__ = [
    # Version
    '__version__',

    # Core API
    'MixtapeImporter',
    'ImporterConfig',
    'ImportResult',
    'MixRecord',
    'Track',
    'NormalizeResult',

    # Errors
    'MixtapeError',
    'FetchError',
    'ParseError',

    # Components
    'PageFetcher',
    'PageCache',
    'MixScraper',
    'RecordWriter',
    'normalize_directory',
    'normalize_record',
    'parse_date',
    'slugify',
]

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

MixFormat = Literal['cd', 'cassette', 'playlist']


@dataclass(repr=True)
class ImporterConfig:
    """Configuration for the mixtape importer."""
    # Source site
    base_url: str = "https://www.artofthemix.org"
    member_id: str = "3942"
    site_author: str = "natalyesaurus"  # Stripped from "<title> by <author>" headings

    # Listing pages (None = detect from the first listing page)
    page_count: Optional[int] = 44

    # Output
    output_dir: str = "src/content/mixtapes"

    # Request settings
    request_timeout: float = 30.0
    user_agent: str = "mixtape-importer/1.0"
    max_attempts: int = 1  # 1 = every request is attempted exactly once
    retry_delay: float = 2.0

    # Rate limiting
    min_request_interval: float = 1.0  # Minimum seconds between requests (0 = disabled)
    humanize_request_interval: bool = False  # Add ±25% random jitter to intervals

    # Cache settings
    cache_enabled: bool = False
    cache_dir: str = '.mixtape_cache'
    cache_expiry_days: int = 0  # 0 = never expire

    def listing_url(self, page: int) -> str:
        """URL of one page of the member's mix listing."""
        return f"{self.base_url}/members/{self.member_id}/mixes/{page}"

    def mix_url(self, mix_id: str) -> str:
        """Canonical URL of a mix detail page."""
        return f"{self.base_url}/mix/{mix_id}"


@dataclass(repr=True)
class Track:
    """One entry of a track list."""
    title: str
    artist: str

    def to_dict(self) -> Dict[str, str]:
        return {'title': self.title, 'artist': self.artist}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Track':
        return cls(title=data['title'], artist=data['artist'])


@dataclass(repr=True)
class MixRecord:
    """A mix recovered from one detail page.

    ``side_a``/``side_b`` are only set for cassettes whose page carries both
    side markers; ``tracks`` is then their concatenation.
    """
    id: str
    title: str = ''
    date: Optional[str] = None  # YYYY-MM-DD
    format: MixFormat = 'cd'
    notes: str = ''
    tracks: List[Track] = field(default_factory=list)
    side_a: Optional[List[Track]] = None
    side_b: Optional[List[Track]] = None
    source_url: str = ''

    @property
    def has_sides(self) -> bool:
        return self.format == 'cassette' and self.side_a is not None and self.side_b is not None

    def validation_errors(self) -> List[str]:
        """Return the reasons this record must not be persisted (empty if valid)."""
        problems = []
        if not self.title.strip():
            problems.append('missing title')
        if not self.tracks:
            problems.append('no tracks')
        # The content schema requires a coercible date
        if not self.date:
            problems.append('missing date')
        return problems

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> Dict[str, Any]:
        """Build the persisted JSON object."""
        data: Dict[str, Any] = {
            'title': self.title.lower(),
            'date': self.date,
            'format': self.format,
            'notes': self.notes,
            'sourceUrl': self.source_url,
            'tracks': [track.to_dict() for track in self.tracks],
        }
        if self.has_sides:
            data['sideA'] = [track.to_dict() for track in self.side_a]
            data['sideB'] = [track.to_dict() for track in self.side_b]
        return data


@dataclass(repr=True)
class ImportResult:
    """Running counters for one import run."""
    discovered: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0
    invalid: int = 0  # Subset of errors: pages that yielded no usable record
    failed_pages: List[int] = field(default_factory=list)
    failed_ids: List[str] = field(default_factory=list)


@dataclass(repr=True)
class NormalizeResult:
    """Outcome of one normalizer pass."""
    rewritten: int = 0
    failed: List[str] = field(default_factory=list)

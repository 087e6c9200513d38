"""Persisting mix records as JSON content files."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from .dataclasses import MixRecord
from .text_utils import SLUG_MAX_LENGTH, slugify

WriteOutcome = Literal['created', 'updated']


def dump_record(data: Dict[str, Any]) -> str:
    """Canonical serialized form: two-space indent, trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + '\n'


class RecordWriter:
    """Writes one ``<slug>.json`` file per record into ``output_dir``.

    Re-importing a mix overwrites its own file. When a different mix already
    owns a slug (by ``sourceUrl``, on disk or earlier in this run), the mix id
    is appended to the slug instead of overwriting.
    """

    def __init__(self, output_dir: str) -> None:
        self.output_dir = Path(output_dir)
        self.logger = logging.getLogger(__name__)
        self._claimed: Dict[str, str] = {}  # slug -> sourceUrl written this run

    def ensure_output_dir(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def slug_for(self, record: MixRecord) -> str:
        """Choose the file slug for a record."""
        base = slugify(record.title) or f"mix-{record.id}"
        owner = self._slug_owner(base)
        if owner is None or owner == record.source_url:
            return base

        suffix = f"-{record.id}"
        disambiguated = base[:SLUG_MAX_LENGTH - len(suffix)].rstrip('-') + suffix
        self.logger.warning(
            f"Slug '{base}' already belongs to {owner}; writing {record.source_url} as '{disambiguated}'"
        )
        return disambiguated

    def _slug_owner(self, slug: str) -> Optional[str]:
        if slug in self._claimed:
            return self._claimed[slug]

        path = self.output_dir / f"{slug}.json"
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                existing = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f"Unreadable existing file {path}, it will be overwritten: {e}")
            return None
        if not isinstance(existing, dict):
            return None
        return existing.get('sourceUrl')

    def write(self, record: MixRecord) -> WriteOutcome:
        """Write a valid record, returning whether the file was created or overwritten."""
        problems = record.validation_errors()
        if problems:
            raise ValueError(f"Refusing to write mix {record.id}: {', '.join(problems)}")

        slug = self.slug_for(record)
        path = self.output_dir / f"{slug}.json"
        outcome: WriteOutcome = 'updated' if path.exists() else 'created'

        with open(path, 'w', encoding='utf-8') as f:
            f.write(dump_record(record.to_dict()))
        self._claimed[slug] = record.source_url

        self.logger.info(f"  {outcome.capitalize()}: {slug}.json ({len(record.tracks)} tracks, {record.format})")
        return outcome

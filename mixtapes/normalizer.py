"""Cleanup pass over previously written mix files."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .dataclasses import NormalizeResult
from .exceptions import ParseError
from .text_utils import clean_entity_artifacts
from .writer import dump_record

logger = logging.getLogger(__name__)

TRACK_LIST_FIELDS = ('tracks', 'sideA', 'sideB')


def _clean_tracks(tracks: Any, path: str, field_name: str) -> List[Dict[str, Any]]:
    if not isinstance(tracks, list):
        raise ParseError(path, f"'{field_name}' is not a list")

    cleaned = []
    for track in tracks:
        if not isinstance(track, dict) or not isinstance(track.get('title'), str) \
                or not isinstance(track.get('artist'), str):
            raise ParseError(path, f"malformed entry in '{field_name}'")
        cleaned.append({
            **track,
            'title': clean_entity_artifacts(track['title']),
            'artist': clean_entity_artifacts(track['artist']),
        })
    return cleaned


def normalize_record(data: Dict[str, Any], path: str = '<record>') -> Dict[str, Any]:
    """Return a copy of a persisted record with entity artifacts stripped."""
    cleaned = dict(data)
    if isinstance(cleaned.get('title'), str):
        cleaned['title'] = clean_entity_artifacts(cleaned['title'])
    for field_name in TRACK_LIST_FIELDS:
        if cleaned.get(field_name) is not None:
            cleaned[field_name] = _clean_tracks(cleaned[field_name], path, field_name)
    return cleaned


def load_record(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise ParseError(str(path), "top-level value is not an object")
    return data


def normalize_directory(directory: str) -> NormalizeResult:
    """Rewrite every ``*.json`` record in ``directory`` in cleaned, canonical form.

    A file that fails to parse, read or write is logged and left untouched.
    """
    result = NormalizeResult()

    for path in sorted(Path(directory).glob('*.json')):
        try:
            data = normalize_record(load_record(path), str(path))
            with open(path, 'w', encoding='utf-8') as f:
                f.write(dump_record(data))
        except ParseError as e:
            logger.error(f"Error processing {path.name}: {e.reason}")
            result.failed.append(path.name)
            continue
        except OSError as e:
            logger.error(f"Error processing {path.name}: {e}")
            result.failed.append(path.name)
            continue
        result.rewritten += 1

    logger.info(f"Reformatted {result.rewritten} files")
    return result

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import ValidationError

from overlap_detector.config import CORPUS_PATH
from overlap_detector.schemas.sources_schemas import SourceDocument

logger = logging.getLogger("corpus")

DEFAULT_CORPUS = Path(__file__).resolve().parent.parent / "data" / "sources.json"


class CorpusLoadError(RuntimeError):
    pass


def load_sources(path: Path) -> List[SourceDocument]:
    """Read a JSON array of {id, title, url, content} records."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CorpusLoadError(f"Cannot read corpus file {path}: {e}") from e

    if not isinstance(raw, list):
        raise CorpusLoadError(f"Corpus file {path} must contain a JSON array")

    try:
        sources = [SourceDocument(**item) for item in raw]
    except (TypeError, ValidationError) as e:
        raise CorpusLoadError(f"Invalid source record in {path}: {e}") from e

    ids = [s.id for s in sources]
    if len(set(ids)) != len(ids):
        raise CorpusLoadError(f"Duplicate source ids in {path}")

    logger.info(f"Loaded {len(sources)} corpus sources from {path}")
    return sources


@lru_cache(maxsize=1)
def _cached_sources() -> tuple:
    path = Path(CORPUS_PATH) if CORPUS_PATH else DEFAULT_CORPUS
    return tuple(load_sources(path))


def get_static_sources() -> List[SourceDocument]:
    return list(_cached_sources())


def reload_static_sources() -> List[SourceDocument]:
    _cached_sources.cache_clear()
    return get_static_sources()

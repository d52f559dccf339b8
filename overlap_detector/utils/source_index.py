import logging
import threading
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from overlap_detector.schemas.sources_schemas import SourceDocument
from overlap_detector.utils.corpus_utils import get_static_sources
from overlap_detector.utils.lexical_utils import Shingle, tokenize, build_shingles

logger = logging.getLogger("source_index")


class SourceIndex(NamedTuple):
    source: SourceDocument
    shingles: List[Shingle]
    shingleMap: Dict[str, List[Shingle]]


def build_source_index(sources: Sequence[SourceDocument]) -> List[SourceIndex]:
    """Shingle each source and map fingerprint -> every occurrence in that source."""
    indexes = []
    for source in sources:
        shingles = build_shingles(tokenize(source.content))
        shingle_map: Dict[str, List[Shingle]] = {}
        for sh in shingles:
            shingle_map.setdefault(sh.hash, []).append(sh)
        indexes.append(SourceIndex(source, shingles, shingle_map))
    return indexes


class CorpusIndex:
    """
    Process-wide handle on the static corpus index.

    The index is built lazily on first use. `rebuild()` constructs a new
    tuple of indexes and swaps the reference under a writer lock; readers
    only load the reference and never block.
    """

    def __init__(self, provider: Callable[[], List[SourceDocument]] = get_static_sources):
        self._provider = provider
        self._indexes: Optional[Tuple[SourceIndex, ...]] = None
        self._write_lock = threading.Lock()

    def get(self) -> Tuple[SourceIndex, ...]:
        indexes = self._indexes
        if indexes is None:
            with self._write_lock:
                if self._indexes is None:
                    self._indexes = self._build(self._provider())
                indexes = self._indexes
        return indexes

    def rebuild(self, sources: Optional[Sequence[SourceDocument]] = None) -> Tuple[SourceIndex, ...]:
        with self._write_lock:
            fresh = self._build(self._provider() if sources is None else sources)
            self._indexes = fresh
        return fresh

    @staticmethod
    def _build(sources: Sequence[SourceDocument]) -> Tuple[SourceIndex, ...]:
        indexes = tuple(build_source_index(sources))
        total = sum(len(ix.shingles) for ix in indexes)
        logger.info(f"Built corpus index: {len(indexes)} sources, {total} shingles")
        return indexes


corpus_index = CorpusIndex()

import logging
import re
import uuid
from typing import Dict, List, NamedTuple, Sequence

from overlap_detector.config import MERGE_GAP, MIN_MATCH_CHARS, SNIPPET_PADDING
from overlap_detector.schemas.plagiarism_schemas import DetectionResult, MatchSegment
from overlap_detector.schemas.sources_schemas import SourceDocument
from overlap_detector.utils.lexical_utils import tokenize, build_shingles
from overlap_detector.utils.source_index import SourceIndex, build_source_index, corpus_index
from overlap_detector.utils.summary_utils import aggregate_summary, merge_results

logger = logging.getLogger("match_detector")


class _Hit(NamedTuple):
    source: SourceDocument
    start: int
    end: int
    source_start: int
    source_end: int


def extract_snippet(content: str, start: int, end: int, padding: int = SNIPPET_PADDING) -> str:
    """Source text around [start, end) with whitespace collapsed."""
    lo = max(0, start - padding)
    hi = min(len(content), end + padding)
    return re.sub(r"\s+", " ", content[lo:hi]).strip()


class SegmentBuilder:
    """
    Greedy single pass over hits sorted by input offset.

    Each source keeps its own open segment (an index into `segments`), so
    hits from other sources at the same offsets never split or join it.
    """

    def __init__(self, gap: int = MERGE_GAP):
        self.gap = gap
        self.segments: List[dict] = []
        self._open: Dict[str, int] = {}

    def add(self, hit: _Hit) -> None:
        idx = self._open.get(hit.source.id)
        snippet = extract_snippet(hit.source.content, hit.source_start, hit.source_end)
        if idx is not None and hit.start <= self.segments[idx]["end"] + self.gap:
            seg = self.segments[idx]
            seg["end"] = max(seg["end"], hit.end)
            seg["snippet"] = snippet
            return
        self._open[hit.source.id] = len(self.segments)
        self.segments.append({
            "source": hit.source,
            "start": hit.start,
            "end": hit.end,
            "snippet": snippet,
        })

    def finish(self) -> List[dict]:
        self._open.clear()
        return self.segments


def compare_against_indexes(text: str, indexes: Sequence[SourceIndex]) -> DetectionResult:
    shingles = build_shingles(tokenize(text))
    if not shingles:
        return DetectionResult()

    hits: List[_Hit] = []
    for sh in shingles:
        for ix in indexes:
            for occ in ix.shingleMap.get(sh.hash, ()):
                hits.append(_Hit(ix.source, sh.start, sh.end, occ.start, occ.end))

    if not hits:
        return DetectionResult()

    hits.sort(key=lambda h: h.start)

    builder = SegmentBuilder()
    for hit in hits:
        builder.add(hit)

    text_len = len(text) or 1
    matches: List[MatchSegment] = []
    for seg in builder.finish():
        matched = text[seg["start"]:seg["end"]]
        if len(matched.strip()) <= MIN_MATCH_CHARS:
            continue
        src = seg["source"]
        matches.append(MatchSegment(
            id=str(uuid.uuid4()),
            sourceId=src.id,
            sourceTitle=src.title,
            sourceUrl=src.url,
            snippet=seg["snippet"],
            matchedText=matched,
            start=seg["start"],
            end=seg["end"],
            overlapRatio=(seg["end"] - seg["start"]) / text_len,
        ))

    logger.debug(f"{len(hits)} shingle hits -> {len(matches)} segments")
    return DetectionResult(matches=matches, summary=aggregate_summary(matches))


def detect_matches(text: str, additional_sources: Sequence[SourceDocument] = ()) -> DetectionResult:
    """Compare text against the static corpus and, optionally, ad-hoc sources."""
    base = compare_against_indexes(text, corpus_index.get())
    if not additional_sources:
        return base
    extra = compare_against_indexes(text, build_source_index(additional_sources))
    return merge_results(base, extra)

from typing import Dict, Iterable, List

from overlap_detector.schemas.plagiarism_schemas import (
    DetectionResult, MatchSegment, SourceSummary,
)


def fold_summaries(entries: Iterable[SourceSummary]) -> List[SourceSummary]:
    """Sum matchCount/totalOverlap per source id, largest overlap first."""
    by_id: Dict[str, SourceSummary] = {}
    for item in entries:
        existing = by_id.get(item.id)
        if existing is None:
            by_id[item.id] = item.model_copy()
        else:
            existing.matchCount += item.matchCount
            existing.totalOverlap += item.totalOverlap
    return sorted(by_id.values(), key=lambda s: s.totalOverlap, reverse=True)


def aggregate_summary(matches: Iterable[MatchSegment]) -> List[SourceSummary]:
    return fold_summaries(
        SourceSummary(
            id=m.sourceId,
            title=m.sourceTitle,
            url=m.sourceUrl,
            matchCount=1,
            totalOverlap=m.end - m.start,
        )
        for m in matches
    )


def merge_results(base: DetectionResult, extra: DetectionResult) -> DetectionResult:
    """
    Combine results computed against independent indexes.

    Matches are concatenated (base first); summaries are summed per source
    id, so the summary does not depend on merge order.
    """
    return DetectionResult(
        matches=[*base.matches, *extra.matches],
        summary=fold_summaries([*base.summary, *extra.summary]),
    )


def coverage_percent(text: str, matches: Iterable[MatchSegment]) -> float:
    """Share of `text` covered by the union of match spans, as a percent."""
    spans = sorted((m.start, m.end) for m in matches)
    covered = 0
    cur_start, cur_end = None, None
    for start, end in spans:
        if cur_end is None or start > cur_end:
            if cur_end is not None:
                covered += cur_end - cur_start
            cur_start, cur_end = start, end
        else:
            cur_end = max(cur_end, end)
    if cur_end is not None:
        covered += cur_end - cur_start
    return round(covered * 100.0 / max(len(text), 1), 1)

from pydantic import BaseModel, Field
from typing import List, Optional


class MatchSegment(BaseModel):
    id: str
    sourceId: str
    sourceTitle: str
    sourceUrl: str
    snippet: str        # excerpt of the source around the hit
    matchedText: str    # exact slice of the checked text
    start: int
    end: int
    overlapRatio: float  # 0–1


class SourceSummary(BaseModel):
    id: str
    title: str
    url: str
    matchCount: int = 0
    totalOverlap: int = 0  # characters of checked text


class DetectionResult(BaseModel):
    matches: List[MatchSegment] = Field(default_factory=list)
    summary: List[SourceSummary] = Field(default_factory=list)


class CheckRequest(BaseModel):
    text: str
    includeWeb: bool = False
    maxQueries: Optional[int] = Field(default=None, ge=1, le=10)
    resultsPerQuery: Optional[int] = Field(default=None, ge=1, le=10)


class CheckResponse(DetectionResult):
    similarity: float = 0.0  # percent of text covered by matches
    checkedSources: int = 0
    webSources: int = 0

from fastapi import APIRouter, UploadFile, File, Form, HTTPException, Depends
from typing import List, Optional
import asyncio
import logging

from overlap_detector.config import (
    MAX_QUERIES_PER_SUBMISSION, RESULTS_PER_QUERY, WEB_GATHER_TIMEOUT,
)
from overlap_detector.dependencies.auth import verify_token
from overlap_detector.schemas.plagiarism_schemas import CheckRequest, CheckResponse
from overlap_detector.schemas.sources_schemas import SourceDocument
from overlap_detector.utils.corpus_utils import reload_static_sources
from overlap_detector.utils.file_utils import extract_text_from_file, allowed_file
from overlap_detector.utils.match_utils import detect_matches
from overlap_detector.utils.source_index import corpus_index
from overlap_detector.utils.summary_utils import coverage_percent
from overlap_detector.utils.web_utils import gather_web_sources

router = APIRouter(prefix="/plagiarism", tags=["plagiarism"])
logger = logging.getLogger("plagiarism")


async def _gather(text: str, max_queries: int, results_per_query: int) -> List[SourceDocument]:
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(gather_web_sources, text, max_queries, results_per_query),
            timeout=WEB_GATHER_TIMEOUT,
        )
    except asyncio.TimeoutError:
        logger.warning(f"🛑 Web gathering exceeded {WEB_GATHER_TIMEOUT}s, continuing without web sources")
        return []


async def run_check(
    text: str,
    include_web: bool = False,
    max_queries: Optional[int] = None,
    results_per_query: Optional[int] = None,
) -> CheckResponse:
    if not text or not text.strip():
        raise HTTPException(status_code=400, detail="Text is required")

    web_sources: List[SourceDocument] = []
    if include_web:
        web_sources = await _gather(
            text,
            max_queries or MAX_QUERIES_PER_SUBMISSION,
            results_per_query or RESULTS_PER_QUERY,
        )

    result = await asyncio.to_thread(detect_matches, text, web_sources)
    similarity = coverage_percent(text, result.matches)

    logger.info(
        f"Checked {len(text)} chars: {len(result.matches)} matches, "
        f"{len(result.summary)} sources, similarity {similarity}%"
    )
    return CheckResponse(
        matches=result.matches,
        summary=result.summary,
        similarity=similarity,
        checkedSources=len(corpus_index.get()) + len(web_sources),
        webSources=len(web_sources),
    )


@router.post("/check", response_model=CheckResponse)
async def check_text(body: CheckRequest, current_user=Depends(verify_token)):
    return await run_check(body.text, body.includeWeb, body.maxQueries, body.resultsPerQuery)


@router.post("/check-file", response_model=CheckResponse)
async def check_file(
    file: UploadFile = File(...),
    includeWeb: bool = Form(False),
    maxQueries: Optional[int] = Form(None, ge=1, le=10),
    resultsPerQuery: Optional[int] = Form(None, ge=1, le=10),
    current_user=Depends(verify_token),
):
    if not allowed_file(file.filename):
        raise HTTPException(status_code=400, detail=f"Invalid file type: {file.filename}")

    raw = await file.read()
    try:
        text = extract_text_from_file(raw, file.filename)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"📄 {file.filename}: {len(text.split())} words")
    return await run_check(text, includeWeb, maxQueries, resultsPerQuery)


def _reload_index():
    return corpus_index.rebuild(reload_static_sources())


@router.post("/corpus/reload")
async def reload_corpus(current_user=Depends(verify_token)):
    indexes = await asyncio.to_thread(_reload_index)
    return {
        "sources": len(indexes),
        "shingles": sum(len(ix.shingles) for ix in indexes),
    }

from typing import Dict, List, Optional
import hashlib
import re
import time
from urllib.parse import unquote

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from overlap_detector.config import (
    MAX_QUERIES_PER_SUBMISSION,
    RESULTS_PER_QUERY,
    MIN_QUERY_SENTENCE,
    MAX_QUERY_CHARS,
    MIN_PAGE_TEXT,
    MAX_PAGE_CHARS,
    REQUEST_TIMEOUT,
    SEARCH_URL,
    READER_PROXY_URL,
)
from overlap_detector.schemas.sources_schemas import SourceDocument
from ..logger import logger

POLITENESS_DELAY = 0.1
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0 Safari/537.36"
)

# ---- Session ----
def _make_session() -> requests.Session:
    s = requests.Session()
    retries = Retry(
        total=1,
        backoff_factor=0.1,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        respect_retry_after_header=False,
    )
    s.mount("https://", HTTPAdapter(max_retries=retries, pool_connections=10, pool_maxsize=10))
    s.mount("http://", HTTPAdapter(max_retries=retries, pool_connections=10, pool_maxsize=10))
    s.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    })
    return s

_SESSION = _make_session()

# ---- Helpers ----
def _url_id(url: str) -> str:
    return "web-" + hashlib.sha1(url.encode("utf-8")).hexdigest()

def extract_readable_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for junk in soup(["script", "style", "noscript"]):
        junk.decompose()
    root = soup.body or soup
    return " ".join(root.get_text(separator=" ").split())

def extract_queries(text: str, max_queries: int = MAX_QUERIES_PER_SUBMISSION) -> List[str]:
    """Pick the first sentences long enough to be distinctive as search queries."""
    sentences = [s.strip() for s in re.split(r"[.?!]|[\n\r]", text or "")]
    queries = [s[:MAX_QUERY_CHARS] for s in sentences if len(s) > MIN_QUERY_SENTENCE][:max_queries]
    stripped = (text or "").strip()
    if not queries and len(stripped) > MIN_QUERY_SENTENCE:
        queries.append(stripped[:MAX_QUERY_CHARS])
    return queries

def normalize_result_url(url: Optional[str]) -> Optional[str]:
    """Unwrap DuckDuckGo's redirect links (…?uddg=<encoded target>)."""
    if not url:
        return None
    m = re.search(r"uddg=([^&]+)", url)
    if m:
        try:
            return unquote(m.group(1), errors="strict")
        except UnicodeDecodeError:
            return None
    return url

# ---- Search ----
def search_duckduckgo(query: str, limit: int) -> List[Dict[str, str]]:
    r = _SESSION.get(SEARCH_URL, params={"q": query, "ia": "web"}, timeout=REQUEST_TIMEOUT)
    r.raise_for_status()
    soup = BeautifulSoup(r.text, "html.parser")
    out = []
    for body in soup.select(".result__body"):
        if len(out) >= limit:
            break
        link = body.select_one(".result__title a, .result__a")
        href = link.get("href") if link else None
        if not href:
            continue
        title_el = body.select_one(".result__title")
        snippet_el = body.select_one(".result__snippet")
        out.append({
            "title": title_el.get_text(strip=True) if title_el else "",
            "url": href,
            "snippet": snippet_el.get_text(strip=True) if snippet_el else "",
        })
    logger.info(f"search: got {len(out)} results for '{query[:60]}'")
    return out

# ---- Fetch with proxy fallback ----
def _get_text(url: str) -> str:
    r = _SESSION.get(url, timeout=REQUEST_TIMEOUT, allow_redirects=True)
    r.raise_for_status()
    return extract_readable_text(r.text)

def fetch_page_text(url: str) -> Optional[str]:
    try:
        return _get_text(url)
    except requests.RequestException as e:
        logger.warning(f"Primary fetch failed for {url}, trying proxy: {e}")
    proxy_url = READER_PROXY_URL + re.sub(r"^https?://", "", url)
    try:
        return _get_text(proxy_url)
    except requests.RequestException as e:
        logger.warning(f"Proxy fetch failed for {url}: {e}")
        return None

# ---- Gatherer ----
def gather_web_sources(
    text: str,
    max_queries: int = MAX_QUERIES_PER_SUBMISSION,
    results_per_query: int = RESULTS_PER_QUERY,
) -> List[SourceDocument]:
    """
    Search the web for sentences of `text` and return the fetched pages as
    reference documents. Failures are logged; never raises.
    """
    collected: List[SourceDocument] = []
    seen_urls = set()

    for query in extract_queries(text, max_queries):
        try:
            for res in search_duckduckgo(query, results_per_query):
                url = normalize_result_url(res.get("url"))
                if not url or url in seen_urls:
                    continue
                seen_urls.add(url)
                page = fetch_page_text(url)
                if not page or len(page) < MIN_PAGE_TEXT:
                    continue
                collected.append(SourceDocument(
                    id=_url_id(url),
                    title=res.get("title") or url,
                    url=url,
                    content=page[:MAX_PAGE_CHARS],
                ))
                time.sleep(POLITENESS_DELAY)
        except Exception as e:
            logger.warning(f"Search query failed: '{query[:60]}': {e}")

    logger.info(f"Gathered {len(collected)} web sources")
    return collected

from unittest import mock

import requests

from overlap_detector.utils import web_utils
from overlap_detector.utils.web_utils import (
    extract_queries, extract_readable_text, gather_web_sources, normalize_result_url,
)

LONG_PAGE = "Reference page text about many things. " * 20


def test_extract_queries_picks_long_sentences():
    text = (
        "Short one. This sentence is certainly long enough to be a query! "
        "Tiny? Another sufficiently long sentence lives right here\nand a third long "
        "sentence that also qualifies nicely."
    )
    queries = extract_queries(text, max_queries=2)
    assert queries == [
        "This sentence is certainly long enough to be a query",
        "Another sufficiently long sentence lives right here",
    ]


def test_extract_queries_truncates_to_160_chars():
    text = "word " * 100
    [query] = extract_queries(text, 3)
    assert len(query) == 160


def test_extract_queries_falls_back_to_whole_text():
    text = "abc. def. ghi. jkl. mno. pqr. stu. vwx. yz!"
    assert extract_queries(text, 3) == [text]


def test_extract_queries_too_short():
    assert extract_queries("tiny text", 3) == []
    assert extract_queries("", 3) == []


def test_normalize_result_url():
    wrapped = "//duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.org%2Fa%3Fb%3D1&rut=abc"
    assert normalize_result_url(wrapped) == "https://example.org/a?b=1"
    assert normalize_result_url("https://plain.example") == "https://plain.example"
    assert normalize_result_url("") is None
    assert normalize_result_url(None) is None
    assert normalize_result_url("/l/?uddg=%ff%fe") is None


def test_extract_readable_text_drops_scripts():
    html = """
    <html><head><style>body{}</style></head>
    <body><script>var x = 1;</script><p>Hello   there</p>
    <noscript>enable js</noscript><div>world</div></body></html>
    """
    assert extract_readable_text(html) == "Hello there world"


def test_fetch_page_text_falls_back_to_proxy():
    calls = []

    def fake_get(url):
        calls.append(url)
        if len(calls) == 1:
            raise requests.ConnectionError("boom")
        return "proxied text"

    with mock.patch.object(web_utils, "_get_text", side_effect=fake_get):
        assert web_utils.fetch_page_text("https://example.org/page") == "proxied text"
    assert calls[1] == "https://r.jina.ai/http://example.org/page"


def test_fetch_page_text_gives_up_quietly():
    with mock.patch.object(web_utils, "_get_text", side_effect=requests.Timeout("slow")):
        assert web_utils.fetch_page_text("https://example.org/page") is None


def test_gather_dedupes_and_filters(monkeypatch):
    results = [
        {"title": "A", "url": "//duckduckgo.com/l/?uddg=https%3A%2F%2Fa.test", "snippet": ""},
        {"title": "", "url": "https://b.test", "snippet": ""},
        {"title": "short", "url": "https://short.test", "snippet": ""},
    ]
    pages = {"https://a.test": LONG_PAGE, "https://b.test": LONG_PAGE * 1000, "https://short.test": "tiny"}
    monkeypatch.setattr(web_utils, "search_duckduckgo", lambda q, n: results)
    monkeypatch.setattr(web_utils, "fetch_page_text", lambda u: pages[u])
    monkeypatch.setattr(web_utils, "POLITENESS_DELAY", 0)

    text = "The first sentence is long enough to search for. The second one is also long enough to search."
    sources = gather_web_sources(text, max_queries=2, results_per_query=3)

    assert [s.url for s in sources] == ["https://a.test", "https://b.test"]
    assert sources[0].title == "A"
    assert sources[1].title == "https://b.test"
    assert sources[0].id.startswith("web-") and len(sources[0].id) == 44
    assert len(sources[1].content) == 20000


def test_gather_survives_search_failures(monkeypatch):
    def broken(q, n):
        raise requests.HTTPError("503")

    monkeypatch.setattr(web_utils, "search_duckduckgo", broken)
    assert gather_web_sources("A sentence that is long enough to become a query.") == []


def test_gather_survives_unexpected_fetch_errors(monkeypatch):
    by_query = {
        "The first sentence is long enough to search for": [{"title": "bad", "url": "https://bad.test"}],
        "The second one is also long enough to search": [{"title": "good", "url": "https://good.test"}],
    }

    def fetch(url):
        if url == "https://bad.test":
            raise RuntimeError("parser blew up")
        return LONG_PAGE

    monkeypatch.setattr(web_utils, "search_duckduckgo", lambda q, n: by_query[q])
    monkeypatch.setattr(web_utils, "fetch_page_text", fetch)
    monkeypatch.setattr(web_utils, "POLITENESS_DELAY", 0)

    text = "The first sentence is long enough to search for. The second one is also long enough to search."
    sources = gather_web_sources(text, max_queries=2)
    assert [s.url for s in sources] == ["https://good.test"]

import pytest
from jose import jwt

from overlap_detector.config import SECRET_KEY, ALGORITHM
from overlap_detector.schemas.sources_schemas import SourceDocument
from overlap_detector.utils.source_index import corpus_index


def make_source(sid: str, content: str) -> SourceDocument:
    return SourceDocument(id=sid, title=f"Title {sid}", url=f"https://example.org/{sid}", content=content)


@pytest.fixture
def static_corpus():
    """Swap the shared corpus index for the duration of a test."""
    def _use(*sources):
        return corpus_index.rebuild(list(sources))
    yield _use
    corpus_index.rebuild()


@pytest.fixture
def auth_headers():
    token = jwt.encode({"sub": "tester"}, SECRET_KEY, algorithm=ALGORITHM)
    return {"Authorization": f"Bearer {token}"}

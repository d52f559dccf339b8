import re
import hashlib
from typing import List, NamedTuple

from overlap_detector.config import SHINGLE_SIZE

_TOKEN_RE = re.compile(r"\S+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


class Token(NamedTuple):
    value: str
    start: int
    end: int


class Shingle(NamedTuple):
    hash: str
    start: int
    end: int


def tokenize(text: str) -> List[Token]:
    """Split text on whitespace, keeping each word's offsets in the original string."""
    return [Token(m.group(0), m.start(), m.end()) for m in _TOKEN_RE.finditer(text or "")]


def canonicalize(word: str) -> str:
    return _NON_ALNUM_RE.sub("", word.lower())


def _fingerprint(canonical: str) -> str:
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()


def build_shingles(tokens: List[Token], k: int = SHINGLE_SIZE) -> List[Shingle]:
    """
    Hash every window of `k` consecutive tokens.

    Tokens are canonicalized (lowercased, reduced to [a-z0-9]) and the
    non-empty ones joined with single spaces. Windows with no alphanumeric
    content at all are skipped. Fewer than `k` tokens yields no shingles.
    """
    shingles: List[Shingle] = []
    for i in range(len(tokens) - k + 1):
        window = tokens[i:i + k]
        canonical = " ".join(c for c in (canonicalize(t.value) for t in window) if c)
        if not canonical:
            continue
        shingles.append(Shingle(_fingerprint(canonical), window[0].start, window[-1].end))
    return shingles

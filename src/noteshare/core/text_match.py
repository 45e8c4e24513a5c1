"""Word-prefix matching used by note search.

A query term matches a note when some word of the note's content starts
with it, ignoring case. Words are runs of letters, digits and underscores.
Terms shorter than ``MIN_TERM_LENGTH`` are ignored. The Redis index and the
database search both use these helpers so they agree on what matches.
"""

import re
from typing import Iterable, List

_WORD_RE = re.compile(r"\w+")
MIN_TERM_LENGTH = 2


def words(text: str) -> List[str]:
    """Lowercased words of ``text`` in order of first appearance."""
    seen = {}
    for word in _WORD_RE.findall((text or "").lower()):
        seen.setdefault(word, None)
    return list(seen)


def query_terms(query: str) -> List[str]:
    return [word for word in words(query) if len(word) >= MIN_TERM_LENGTH]


def indexable_words(text: str) -> List[str]:
    """Content words that at least one valid term can match."""
    return [word for word in words(text) if len(word) >= MIN_TERM_LENGTH]


def prefixes(word: str) -> List[str]:
    """Every prefix of ``word`` that is long enough to be a term."""
    return [word[:n] for n in range(MIN_TERM_LENGTH, len(word) + 1)]


def match_score(terms: Iterable[str], content: str) -> int:
    """Number of terms that match the content (0 means no match)."""
    content_words = words(content)
    return sum(1 for term in terms if any(word.startswith(term) for word in content_words))

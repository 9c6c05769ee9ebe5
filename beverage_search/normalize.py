from __future__ import annotations

"""
Text normalisation helpers shared by catalog building and query parsing.

Catalog names and user queries go through exactly the same functions so
that both sides of a match see the same view of the text.

Public helpers:

* normalize_text(text) -> str
    Accent-free, lowercase, punctuation-free, single-spaced text.

* tokenize(text) -> List[str]
    normalize_text split on spaces, stop-words removed.

* unique_tokens(tokens) -> FrozenSet[str]
    Token set used for membership tests and Jaccard overlap.
"""

import re
import unicodedata
from typing import FrozenSet, Iterable, List, Optional

from .constants import STOPWORDS

_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]")
_WHITESPACE_RE = re.compile(r"\s+")


def remove_diacritics(text: str) -> str:
    # "latão" -> "latao": decompose, then drop the combining marks.
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, accent-free text with anything outside [a-z0-9 ] turned into spaces.

    normalize_text(normalize_text(x)) == normalize_text(x) for every x.
    """
    if not text:
        return ""
    if not isinstance(text, str):
        text = str(text)
    norm = remove_diacritics(text.lower())
    # Whitespace first so tabs/newlines collapse with everything else.
    norm = _WHITESPACE_RE.sub(" ", norm)
    norm = _NON_ALNUM_RE.sub(" ", norm)
    return _WHITESPACE_RE.sub(" ", norm).strip()


def tokenize(text: Optional[str]) -> List[str]:
    """Split normalized text into tokens, dropping empties and stop-words."""
    norm = normalize_text(text)
    if not norm:
        return []
    return [tok for tok in norm.split(" ") if tok and tok not in STOPWORDS]


def unique_tokens(tokens: Iterable[str]) -> FrozenSet[str]:
    return frozenset(tokens)

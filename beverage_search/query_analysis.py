"""Query parsing helpers: container size and pack-type hints in free text."""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional

from .constants import PACK_QUANTITY_KEYWORDS, PACK_SYNONYMS, SIZE_ALIASES, PackCategory
from .normalize import normalize_text, remove_diacritics, tokenize
from .pipeline_types import QuerySizeHint
from .units import to_milliliters, to_number

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# "473ml", "1,5 l", "2 litros".  Longest unit first; the trailing \b keeps
# "2 latas" from reading as 2 litres.
_EXPLICIT_SIZE_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*(litros|litro|ml|l)\b")
_BARE_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")
# Same as normalize_text but keeps "." and "," so decimals survive.
_SIZE_TEXT_DROP_RE = re.compile(r"[^a-z0-9., ]")
_WHITESPACE_RE = re.compile(r"\s+")

_NORMALIZED_ALIASES = [
    (name, [normalize_text(p) for p in phrases], size_ml)
    for name, phrases, size_ml in SIZE_ALIASES
]


# ---------------------------------------------------------------------------
# Size hints
# ---------------------------------------------------------------------------


def _size_text(query: str) -> str:
    text = remove_diacritics((query or "").lower())
    text = _SIZE_TEXT_DROP_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def explicit_size_from_query(query: str) -> Optional[float]:
    """Size from a literal "<number><unit>" mention, in ml."""
    m = _EXPLICIT_SIZE_RE.search(_size_text(query))
    if not m:
        return None
    return to_milliliters(m.group(1), m.group(2))


def alias_size_from_query(normalized_query: str) -> Optional[float]:
    """Size implied by an alias phrase ("latao" -> 473, "long neck" -> 355)."""
    if not normalized_query:
        return None
    for _name, patterns, size_ml in _NORMALIZED_ALIASES:
        for pattern in patterns:
            if pattern and pattern in normalized_query:
                return size_ml
    return None


def bare_number_size_from_query(normalized_query: str) -> Optional[float]:
    """
    First bare number in the query that is not a pack count.

    A number right before or after a pack keyword ("c 12", "12 un",
    "fardo 6") is a quantity, not a size, and is skipped.
    """
    tokens = normalized_query.split(" ") if normalized_query else []
    for i, token in enumerate(tokens):
        if not _BARE_NUMBER_RE.match(token):
            continue
        prev_token = tokens[i - 1] if i > 0 else None
        next_token = tokens[i + 1] if i + 1 < len(tokens) else None
        if prev_token in PACK_QUANTITY_KEYWORDS or next_token in PACK_QUANTITY_KEYWORDS:
            continue
        size = to_number(token)
        if size is not None:
            return size
    return None


def parse_query_size(query: str) -> QuerySizeHint:
    """
    Work out the container size a query asks for.

    Precedence: explicit "<number><unit>" > alias phrase (inferred) >
    bare number not next to a pack keyword > nothing.
    """
    explicit = explicit_size_from_query(query)
    if explicit is not None:
        return QuerySizeHint(size_ml=explicit, explicit=True, inferred=False)

    normalized = normalize_text(query)
    alias = alias_size_from_query(normalized)
    if alias is not None:
        return QuerySizeHint(size_ml=alias, explicit=False, inferred=True)

    bare = bare_number_size_from_query(normalized)
    if bare is not None:
        return QuerySizeHint(size_ml=bare, explicit=False, inferred=False)

    return QuerySizeHint()


# ---------------------------------------------------------------------------
# Pack hints
# ---------------------------------------------------------------------------


def detect_pack_keyword(
    query_tokens: Iterable[str],
    pack_synonyms: Mapping[str, PackCategory] = PACK_SYNONYMS,
) -> Optional[PackCategory]:
    """Canonical pack of the first query token that is a pack synonym, else None."""
    for token in query_tokens:
        if token in pack_synonyms:
            return pack_synonyms[token]
    return None


def query_tokens_in_order(query: str) -> List[str]:
    """Tokens of the query, stop-words removed, first occurrence order kept."""
    return list(dict.fromkeys(tokenize(query)))

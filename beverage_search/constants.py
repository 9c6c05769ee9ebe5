from __future__ import annotations

"""Shared vocabulary used by the normalizer, the catalog pipeline and the query parser.

Everything here is a fixed table.  The catalog is in Brazilian Portuguese, so
the stop-words, pack codes and size aliases are too.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Tuple


# ---------------------------
# Tokenization
# ---------------------------

STOPWORDS: FrozenSet[str] = frozenset(
    ["de", "da", "do", "das", "dos", "para", "por", "com", "sem", "e", "a", "o"]
)


# ---------------------------
# Pack categories
# ---------------------------

class PackCategory(str, Enum):
    """Closed set of canonical pack categories.

    Unknown raw codes are not forced into this set: they pass through as their
    own lowercased string (see packs.canonical_pack).
    """

    CAIXA = "caixa"
    DUZIA = "duzia"
    UNIDADE = "unidade"
    FARDO = "fardo"

    def __str__(self) -> str:
        return self.value


PACK_SYNONYMS: Dict[str, PackCategory] = {
    "cx": PackCategory.CAIXA,
    "cxa": PackCategory.CAIXA,
    "caixa": PackCategory.CAIXA,
    "dz": PackCategory.DUZIA,
    "duzia": PackCategory.DUZIA,
    "un": PackCategory.UNIDADE,
    "unid": PackCategory.UNIDADE,
    "unidade": PackCategory.UNIDADE,
    "fd": PackCategory.FARDO,
    "fardo": PackCategory.FARDO,
}

# Tokens that, next to a bare number, mean "pack count" rather than "size"
# ("c/12", "12 un", "fardo 6").
PACK_QUANTITY_KEYWORDS: FrozenSet[str] = frozenset(PACK_SYNONYMS) | {"pack", "c", "com"}


# ---------------------------
# Container sizes
# ---------------------------

LITER_UNITS: FrozenSet[str] = frozenset(["l", "lt", "litro", "litros"])

LATAO_ML = 473.0
LONG_NECK_ML = 355.0

# (alias name, phrases, size in ml).  Phrases are normalized before matching.
SIZE_ALIASES: List[Tuple[str, Tuple[str, ...], float]] = [
    ("latao", ("latão", "lata grande", "latão grande"), LATAO_ML),
    ("long neck", ("long neck", "longneck", "long-neck"), LONG_NECK_ML),
]


# ---------------------------
# Brands
# ---------------------------

BRANDS: FrozenSet[str] = frozenset(
    ["brahma", "skol", "spaten", "heineken", "beck", "budweiser", "antarctica"]
)

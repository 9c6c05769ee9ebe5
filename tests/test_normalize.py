from beverage_search.constants import STOPWORDS
from beverage_search.normalize import (
    normalize_text,
    remove_diacritics,
    tokenize,
    unique_tokens,
)


SAMPLES = [
    "Cerveja LATÃO  Skol!!",
    "Guaraná Antarctica 2L - Pet",
    "  água   com gás\t500ml\n",
    "Skol c/12 (caixa)",
    "İstanbul ÇAFÉ ß",
    "",
    "já-já...",
]


def test_remove_diacritics_basic():
    assert remove_diacritics("latão açúcar") == "latao acucar"


def test_normalize_text_strips_accents_punctuation_and_spaces():
    assert normalize_text("Cerveja LATÃO  Skol!!") == "cerveja latao skol"
    assert normalize_text("long-neck") == "long neck"
    assert normalize_text("Skol c/12") == "skol c 12"


def test_normalize_text_handles_none():
    assert normalize_text(None) == ""


def test_normalize_is_idempotent():
    for text in SAMPLES:
        once = normalize_text(text)
        assert normalize_text(once) == once


def test_normalize_output_alphabet():
    allowed = set("abcdefghijklmnopqrstuvwxyz0123456789 ")
    for text in SAMPLES:
        out = normalize_text(text)
        assert set(out) <= allowed
        assert "  " not in out
        assert out == out.strip()


def test_tokenize_drops_stopwords():
    tokens = tokenize("Cerveja de Trigo com Limão e Sal para o churrasco")
    assert tokens == ["cerveja", "trigo", "limao", "sal", "churrasco"]


def test_tokenize_never_returns_stopwords_or_empties():
    for text in SAMPLES + ["de da do das dos para por com sem e a o"]:
        tokens = tokenize(text)
        assert all(t for t in tokens)
        assert not (set(tokens) & STOPWORDS)


def test_tokenize_empty():
    assert tokenize("") == []
    assert tokenize(None) == []
    assert tokenize("de a o") == []


def test_unique_tokens_dedupes():
    assert unique_tokens(["skol", "lata", "skol"]) == frozenset({"skol", "lata"})

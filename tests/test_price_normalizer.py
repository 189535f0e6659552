import math
import pytest
from bookbridge.catalog.utils import fuzzy_match, levenshtein, normalize_price, price_value, shares_word, words_of


@pytest.mark.parametrize("raw,expected", [
    (450, "₹450.00"),
    (199.5, "₹199.50"),
    ("299", "₹299.00"),
    ("Rs. 1,200.50", "₹1200.50"),
    ("₹450.00", "₹450.00"),
    ("free", "₹0.00"),
    (None, "₹0.00"),
    (math.nan, "₹0.00"),
    (math.inf, "₹0.00"),
])
def test_normalize_price(raw, expected):
    assert normalize_price(raw) == expected


def test_normalize_price_is_idempotent():
    for raw in (450, "12.5", "abc", 0, -5, "-12.5", "Rs. 1,200.50", "₹450.00", None, math.nan):
        once = normalize_price(raw)
        assert normalize_price(once) == once


def test_huge_int_becomes_zero():
    assert normalize_price(10 ** 400) == "₹0.00"
    assert price_value(10 ** 400) == 0.0


def test_negative_prices_keep_their_sign():
    assert normalize_price(-5) == "₹-5.00"
    assert normalize_price("-12.5") == "₹-12.50"


def test_price_value_reads_every_form():
    assert price_value("₹450.00") == 450.0
    assert price_value(120) == 120.0
    assert price_value("nothing") == 0.0


def test_levenshtein():
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("", "abc") == 3
    assert levenshtein("same", "same") == 0


def test_fuzzy_match_substring_and_typos():
    assert fuzzy_match("The Alchemist", "alchem")
    assert fuzzy_match("Paulo Coelho", "coelo")
    assert not fuzzy_match("Paulo Coelho", "tolkien")
    assert not fuzzy_match(None, "anything")


def test_fuzzy_match_short_queries_use_edit_distance():
    assert fuzzy_match("ax", "ox")
    assert fuzzy_match("an ox", "ox")
    assert not fuzzy_match("dune", "ox")


def test_shares_word_containment():
    assert shares_word(words_of("Harry Potter"), words_of("Potterverse Guide"))
    assert not shares_word(words_of("Dune"), words_of("Emma"))

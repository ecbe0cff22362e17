from fractions import Fraction

import pytest

from ExactCalc import error as E
from ExactCalc.Tokenizer import Token, tokenize, format_tokens


def test_fraction_literal_is_one_token():
    assert tokenize("1/2 + 3") == [
        Token("number", Fraction(1, 2)),
        Token("op", "+"),
        Token("number", Fraction(3)),
    ]


def test_spaced_slash_is_division():
    assert tokenize("1 / 2") == [
        Token("number", Fraction(1)),
        Token("op", "/"),
        Token("number", Fraction(2)),
    ]


def test_fraction_literal_after_power():
    assert tokenize("2^3/4") == [
        Token("number", Fraction(2)),
        Token("op", "^"),
        Token("number", Fraction(3, 4)),
    ]
    assert [str(token) for token in tokenize("2^3 / 4")] == ["2", "^", "3", "/", "4"]


def test_pi_spellings():
    assert tokenize("PI + π") == [Token("pi"), Token("op", "+"), Token("pi")]


def test_root_sign_and_identifiers_are_lowered():
    assert tokenize("√4")[0] == Token("ident", "sqrt")
    assert tokenize("SIN(X)") == [Token("ident", "sin"), Token("("), Token("ident", "x"), Token(")")]


def test_format_tokens():
    assert format_tokens(tokenize("sin(pi/4)")) == "sin ( π / 4 )"


def test_decimal_point_is_rejected():
    with pytest.raises(E.LexicalError) as info:
        tokenize("1.5")
    assert info.value.code == "3002"


def test_zero_denominator_literal():
    with pytest.raises(E.LexicalError) as info:
        tokenize("1/0")
    assert info.value.code == "3003"


def test_unexpected_character():
    with pytest.raises(E.LexicalError) as info:
        tokenize("1 $ 2")
    assert info.value.code == "3001"
    assert "$" in info.value.message

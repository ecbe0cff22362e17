from fractions import Fraction

import pytest

from ExactCalc import error as E
from ExactCalc.Expression import Rational, Variable, Sin, Power, BinOp, negate
from ExactCalc.Parser import to_postfix, parse
from ExactCalc.Tokenizer import tokenize, format_tokens


def postfix(problem):
    return format_tokens(to_postfix(tokenize(problem)))


def test_precedence_in_postfix():
    assert postfix("1+2*3") == "1 2 3 * +"
    assert postfix("(1+2)*3") == "1 2 + 3 *"
    assert postfix("8-2-1") == "8 2 - 1 -"


def test_power_is_right_associative():
    assert postfix("2^3^2") == "2 3 2 ^ ^"
    assert parse("2^3^2") == Power(Rational(2), 9)


def test_function_is_emitted_after_its_argument():
    assert postfix("sin(pi/6)") == "π 6 / sin"


def test_unary_minus():
    assert parse("-2^2") == negate(Power(Rational(2), 2))
    assert parse("2*-3") == BinOp(Rational(2), '*', negate(Rational(3)))
    assert parse("2^-1") == Power(Rational(2), -1)


def test_unary_plus_is_ignored():
    assert parse("+3") == Rational(3)


def test_unknown_identifier_is_a_variable():
    assert parse("sin(x)") == Sin(Variable("x"))


def test_fraction_exponent_after_parenthesis():
    assert parse("2^(4/2)") == Power(Rational(2), 2)


@pytest.mark.parametrize("problem, code", [
    ("   ", "3000"),
    ("(1+2", "3100"),
    ("1+2)", "3101"),
    ("1 2", "3102"),
    ("1 +", "3102"),
    ("* 2", "3102"),
    ("sin 1", "3103"),
    ("2^(1/2)", "3104"),
    ("2^3/4", "3104"),
    ("2^-3/4", "3104"),
    ("2^x", "3104"),
    ("2^10001", "3105"),
])
def test_syntax_errors(problem, code):
    with pytest.raises(E.MathError) as info:
        parse(problem)
    assert info.value.code == code


def test_nesting_limit():
    with pytest.raises(E.SyntaxError) as info:
        parse("sqrt(" * 250 + "4" + ")" * 250)
    assert info.value.code == "3106"

    with pytest.raises(E.SyntaxError):
        parse("-" * 300 + "1")


def test_fraction_tokens_become_rationals():
    assert parse("3/6") == Rational(Fraction(1, 2))


def test_spaced_slash_after_power_divides():
    assert parse("2^3 / 4") == BinOp(Power(Rational(2), 3), '/', Rational(4))


def test_flat_chains_do_not_count_as_nesting():
    parse("+".join(["1"] * 5000))
    parse("-".join(["x"] * 5000))
    parse("*".join(["x"] * 5000))
    parse("1" + "+x-y" * 2000)

    # Right-nested sums still nest
    with pytest.raises(E.SyntaxError) as info:
        parse("1+(" * 250 + "1" + ")" * 250)
    assert info.value.code == "3106"

    # A quotient chain keeps counting
    with pytest.raises(E.SyntaxError):
        parse("/".join(["x"] * 250))

from fractions import Fraction

from ExactCalc.Canonicalizer import canonicalize, are_equivalent, split_square, key_string
from ExactCalc.Expression import (Rational, Pi, Indefinite, Variable, SquareRoot, BinOp, negate)
from ExactCalc.Formatter import format_pretty
from ExactCalc.Parser import parse

x = Variable("x")
y = Variable("y")


def canonical(problem):
    return canonicalize(parse(problem))


def test_rational_comes_first():
    assert canonical("x + 1") == BinOp(Rational(1), '+', x)


def test_commutative_inputs_agree():
    assert are_equivalent(parse("x + y"), parse("y + x"))
    assert are_equivalent(parse("2*x*y"), parse("y*x*2"))
    assert are_equivalent(parse("pi + sqrt(2) + x + 1"), parse("1 + pi + x + sqrt(2)"))
    assert not are_equivalent(parse("x - y"), parse("y - x"))


def test_terms_sorted_by_rank():
    assert format_pretty(canonical("pi + sqrt(2) + x + 1")) == "1 + x + √2 + π"


def test_like_terms_are_collected():
    assert canonical("x + x") == BinOp(Rational(2), '*', x)
    assert canonical("x - x") == Rational(0)
    # A product ranks after a lone variable
    assert canonical("3*x - x + y") == BinOp(y, '+', BinOp(Rational(2), '*', x))


def test_negative_results_use_negation():
    assert canonical("0 - 2*x") == negate(BinOp(Rational(2), '*', x))
    assert canonical("x*(-3)") == negate(BinOp(Rational(3), '*', x))
    assert canonical("-x + y") == BinOp(negate(x), '+', y)


def test_products():
    assert canonical("0*x") == Rational(0)
    assert canonical("x*1*y") == BinOp(x, '*', y)
    assert canonical("pi*2*x") == BinOp(BinOp(Rational(2), '*', x), '*', Pi())


def test_quotients():
    assert canonical("x / 2") == BinOp(Rational(Fraction(1, 2)), '*', x)
    assert canonical("x / 1") == x
    assert canonical("0 / x") == Rational(0)
    assert canonical("(-x)/y") == negate(BinOp(x, '/', y))
    assert canonical("x/(-y)") == negate(BinOp(x, '/', y))


def test_square_roots():
    assert canonicalize(SquareRoot(Rational(12))) == BinOp(Rational(2), '*', SquareRoot(Rational(3)))
    assert canonicalize(SquareRoot(Rational(Fraction(1, 2)))) == BinOp(Rational(Fraction(1, 2)), '*', SquareRoot(Rational(2)))
    assert canonicalize(SquareRoot(Rational(49))) == Rational(7)


def test_split_square():
    assert split_square(72) == (6, 2)
    assert split_square(1) == (1, 1)
    assert split_square(0) == (0, 1)
    assert split_square(2 * 3 * 5 * 7) == (1, 210)
    assert split_square(10 ** 14) == (10 ** 7, 1)
    assert split_square(10 ** 14 + 1) == (1, 10 ** 14 + 1)


def test_indefinite_absorbs():
    assert canonicalize(BinOp(Indefinite(), '*', x)) == Indefinite()
    assert canonicalize(BinOp(x, '+', Indefinite())) == Indefinite()
    assert canonicalize(BinOp(x, '/', Indefinite())) == Indefinite()


def test_key_string():
    assert key_string(parse("1/2 + x*pi")) == "ADD(R1/2,MUL(VAR(x),PI))"
    assert key_string(parse("sqrt(x)^3")) == "POW(SQRT(VAR(x)),3)"


def test_idempotent_and_deterministic():
    samples = [
        "x + 1", "x / 2", "-x + y", "2*(x/y)", "sqrt(12) + sqrt(3)", "sin(x)*cos(y)*2",
        "(x+1)*(x-1)", "pi/2 - pi", "1/sqrt(8)", "x^2 - 3*x^2", "-(x - y)",
        "sqrt(2)*x*sqrt(6)", "sqrt(x)*y*sqrt(x)", "(sqrt(2)/2)^3",
    ]
    for problem in samples:
        once = canonical(problem)
        assert canonicalize(once) == once, problem
        assert format_pretty(canonical(problem)) == format_pretty(once)


def test_long_chain_does_not_recurse():
    expr = Rational(1)
    for _ in range(5000):
        expr = BinOp(expr, '+', x)
    assert canonicalize(expr) == BinOp(Rational(1), '+', BinOp(Rational(5000), '*', x))


def test_square_root_factors_fold():
    root_two = SquareRoot(Rational(2))
    half_root_two = BinOp(Rational(Fraction(1, 2)), '*', root_two)
    assert canonicalize(BinOp(half_root_two, '*', root_two)) == Rational(1)
    assert canonicalize(BinOp(half_root_two, '*', half_root_two)) == Rational(Fraction(1, 2))
    assert canonical("sqrt(2)*x*sqrt(2)") == BinOp(Rational(2), '*', x)
    assert canonical("sqrt(2)*x*sqrt(6)") == BinOp(BinOp(Rational(2), '*', x), '*', SquareRoot(Rational(3)))
    assert canonical("sqrt(x)*y*sqrt(x)") == BinOp(x, '*', y)


def test_powers_of_scaled_roots():
    assert canonical("(sqrt(2)/2)^2") == Rational(Fraction(1, 2))
    assert canonical("sqrt(3)^3") == BinOp(Rational(3), '*', SquareRoot(Rational(3)))
    assert canonical("(2*sqrt(2))^-1") == BinOp(Rational(Fraction(1, 4)), '*', SquareRoot(Rational(2)))
    assert canonical("(-sqrt(2))^3") == negate(BinOp(Rational(2), '*', SquareRoot(Rational(2))))


def test_long_mixed_chain_key_string():
    expr = x
    for index in range(5000):
        expr = BinOp(expr, '+' if index % 2 else '-', Variable(f"v{index}"))
    text = key_string(expr)
    assert text.startswith("ADD(SUB(ADD(")
    assert text.endswith(",VAR(v4999))")

    product = canonicalize(BinOp(expr, '*', y))
    assert product.left == y

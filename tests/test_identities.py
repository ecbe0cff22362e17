import pytest

from ExactCalc.Expression import Rational, Indefinite, Variable, Sin, Cos, Tan, negate
from ExactCalc.Parser import parse
from ExactCalc.TrigIdentities import rewrite_identities

x = Variable("x")


@pytest.mark.parametrize("problem, expected", [
    # parity
    ("sin(-x)", negate(Sin(x))),
    ("cos(-x)", Cos(x)),
    ("tan(-x)", negate(Tan(x))),
    # shift by π
    ("sin(x + pi)", negate(Sin(x))),
    ("sin(pi + x)", negate(Sin(x))),
    ("cos(x - pi)", negate(Cos(x))),
    ("tan(x + pi)", Tan(x)),
    # shift by 2π
    ("sin(x + 2*pi)", Sin(x)),
    ("cos(x - 2*pi)", Cos(x)),
    # shift by π/2
    ("sin(x + pi/2)", Cos(x)),
    ("sin(x - pi/2)", negate(Cos(x))),
    ("cos(x + pi/2)", negate(Sin(x))),
    ("cos(x - pi/2)", Sin(x)),
    ("tan(x + pi/2)", Indefinite()),
    # reflection
    ("sin(pi - x)", Sin(x)),
    ("cos(pi - x)", negate(Cos(x))),
])
def test_function_rules(problem, expected):
    assert rewrite_identities(parse(problem)) == expected


def test_pythagorean_identity():
    assert rewrite_identities(parse("sin(x)^2 + cos(x)^2")) == Rational(1)
    assert rewrite_identities(parse("cos(x)^2 + sin(x)^2")) == Rational(1)

    different = parse("sin(x)^2 + cos(y)^2")
    assert rewrite_identities(different) == different


def test_quotient_becomes_tangent():
    assert rewrite_identities(parse("sin(x)/cos(x)")) == Tan(x)
    mismatched = parse("sin(x)/cos(y)")
    assert rewrite_identities(mismatched) == mismatched


def test_rules_chain_over_passes():
    # cos(-(x + π)) → cos(x + π) → -cos(x)
    assert rewrite_identities(parse("cos(-(x + pi))")) == negate(Cos(x))


def test_only_literal_shapes_match():
    # π/2 written as 1/2*π is not the literal quotient shape
    expr = parse("sin(x + 1/2*pi)")
    assert rewrite_identities(expr) == expr


def test_pass_bound():
    expr = parse("sin(-x)")
    assert rewrite_identities(expr, max_passes=0) == expr

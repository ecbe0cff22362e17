import math
from fractions import Fraction

from ExactCalc.DecimalEngine import evaluate_decimal
from ExactCalc.Expression import (Rational, Indefinite, Variable, SquareRoot, BinOp, Sin, Cos, Tan,
                                  is_negation, negate)
from ExactCalc.Parser import parse
from ExactCalc.ScientificEngine import (SIN_TABLE, COS_TABLE, TAN_TABLE, reduce_angle,
                                        resolve_special_angle, apply_special_angles)


def square(entry):
    """Exact square of a table value: r, √n, √n/k or 0 - one of those."""
    if is_negation(entry):
        return square(entry.right)
    if isinstance(entry, Rational):
        return entry.value ** 2
    if isinstance(entry, SquareRoot):
        return entry.argument.value
    return entry.left.argument.value / entry.right.value ** 2


def sign(entry):
    if is_negation(entry):
        return -sign(entry.right)
    if isinstance(entry, Rational):
        return (entry.value > 0) - (entry.value < 0)
    return 1


def test_tables_satisfy_pythagoras():
    assert set(SIN_TABLE) == set(COS_TABLE)
    for key in SIN_TABLE:
        assert square(SIN_TABLE[key]) + square(COS_TABLE[key]) == 1, key


def test_tan_table_matches_sin_over_cos():
    for key, value in TAN_TABLE.items():
        if isinstance(value, Indefinite):
            assert square(COS_TABLE[key]) == 0
            continue
        assert square(value) * square(COS_TABLE[key]) == square(SIN_TABLE[key]), key
        assert sign(value) == sign(SIN_TABLE[key]) * sign(COS_TABLE[key]), key


def test_tables_agree_with_floating_point():
    for (k, n), value in SIN_TABLE.items():
        assert abs(float(evaluate_decimal(value, 15)) - math.sin(k * math.pi / n)) < 1e-12
    for (k, n), value in COS_TABLE.items():
        assert abs(float(evaluate_decimal(value, 15)) - math.cos(k * math.pi / n)) < 1e-12


def test_reduce_angle():
    assert reduce_angle(Sin, Fraction(-1, 4)) == (7, 4)
    assert reduce_angle(Cos, Fraction(7, 3)) == (1, 3)
    assert reduce_angle(Tan, Fraction(7, 6)) == (1, 6)
    assert reduce_angle(Sin, Fraction(2)) == (0, 1)
    assert reduce_angle(Cos, Fraction(1, 5)) is None


def test_resolve_special_angle():
    assert resolve_special_angle(Sin, parse("pi/6")) == (Rational(Fraction(1, 2)), "sin(π/6) = 1/2")
    assert resolve_special_angle(Sin, parse("9*pi/4"))[1] == "sin(9π/4) = sin(π/4) = √2/2"
    assert resolve_special_angle(Tan, parse("-pi/6"))[1] == "tan(-π/6) = tan(5π/6) = -√3/3"
    assert resolve_special_angle(Sin, parse("0")) == (Rational(0), "sin(0) = 0")
    assert resolve_special_angle(Tan, parse("pi/2"))[0] == Indefinite()


def test_unrecognized_angles_are_left_alone():
    assert resolve_special_angle(Sin, parse("pi/5")) is None
    assert resolve_special_angle(Sin, parse("1")) is None
    assert resolve_special_angle(Cos, parse("x")) is None

    proof = []
    expr = parse("sin(x) + cos(1)")
    assert apply_special_angles(expr, proof) == expr
    assert proof == []


def test_applied_through_the_whole_tree():
    proof = []
    assert apply_special_angles(parse("sin(pi/6) + cos(pi/3)"), proof) == Rational(1)
    assert proof == ["sin(π/6) = 1/2", "cos(π/3) = 1/2"]


def test_inner_result_feeds_outer_angle():
    proof = []
    assert apply_special_angles(parse("sin(sin(pi/6)*pi)"), proof) == Rational(1)
    assert len(proof) == 2


def test_variable_arguments_survive():
    proof = []
    result = apply_special_angles(parse("x * tan(pi/4)"), proof)
    assert result == Variable("x")
    assert proof == ["tan(π/4) = 1"]


def test_irrational_values_are_quotients():
    half_root_two = BinOp(SquareRoot(Rational(2)), '/', Rational(2))
    assert SIN_TABLE[(1, 4)] == half_root_two
    assert COS_TABLE[(3, 4)] == negate(half_root_two)
    assert TAN_TABLE[(1, 6)] == BinOp(SquareRoot(Rational(3)), '/', Rational(3))
    assert TAN_TABLE[(2, 3)] == negate(SquareRoot(Rational(3)))


def test_table_values_cancel_against_roots():
    assert apply_special_angles(parse("sin(pi/4)*sqrt(2)"), []) == Rational(1)
    assert apply_special_angles(parse("sin(pi/4)*sin(pi/4)"), []) == Rational(Fraction(1, 2))
    assert apply_special_angles(parse("tan(pi/6)*sqrt(3)"), []) == Rational(1)

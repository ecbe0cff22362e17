# ScientificEngine.py
"""""
Special angles: exact sin / cos / tan of rational multiples of π.

The argument must be recognized as c·π (see Expression.coefficient_of_pi). c is reduced
modulo the period (2 for sin/cos, 1 for tan) and must then be k/n with n in {1,2,3,4,6}.
The value comes from a fixed table keyed by (k, n). Anything else is left untouched.
"""""

import fractions

from . import Simplifier
from . import Formatter
from .Expression import (Rational, Indefinite, SquareRoot, BinOp, Sin, Cos, Tan,
                         TRIG_FUNCTIONS, coefficient_of_pi, negate, transform_bottom_up)

# Debug toggle for optional prints in this module
debug = False

ALLOWED_DENOMINATORS = (1, 2, 3, 4, 6)

PERIODS = {
    Sin: 2,
    Cos: 2,
    Tan: 1
}


def _rational(numerator, denominator=1):
    return Rational(fractions.Fraction(numerator, denominator))


def _root_over(radicand, denominator, negative=False):
    """√radicand / denominator, written 0 - (√radicand / denominator) when negative."""
    value = SquareRoot(Rational(radicand))
    if denominator != 1:
        value = BinOp(value, '/', Rational(denominator))
    if negative:
        return negate(value)
    return value


# -----------------------------
# Tables, keyed by (k, n) for the angle kπ/n
# -----------------------------

SIN_TABLE = {
    (0, 1): _rational(0),
    (1, 6): _rational(1, 2),
    (1, 4): _root_over(2, 2),
    (1, 3): _root_over(3, 2),
    (1, 2): _rational(1),
    (2, 3): _root_over(3, 2),
    (3, 4): _root_over(2, 2),
    (5, 6): _rational(1, 2),
    (1, 1): _rational(0),
    (7, 6): _rational(-1, 2),
    (5, 4): _root_over(2, 2, negative=True),
    (4, 3): _root_over(3, 2, negative=True),
    (3, 2): _rational(-1),
    (5, 3): _root_over(3, 2, negative=True),
    (7, 4): _root_over(2, 2, negative=True),
    (11, 6): _rational(-1, 2)
}

COS_TABLE = {
    (0, 1): _rational(1),
    (1, 6): _root_over(3, 2),
    (1, 4): _root_over(2, 2),
    (1, 3): _rational(1, 2),
    (1, 2): _rational(0),
    (2, 3): _rational(-1, 2),
    (3, 4): _root_over(2, 2, negative=True),
    (5, 6): _root_over(3, 2, negative=True),
    (1, 1): _rational(-1),
    (7, 6): _root_over(3, 2, negative=True),
    (5, 4): _root_over(2, 2, negative=True),
    (4, 3): _rational(-1, 2),
    (3, 2): _rational(0),
    (5, 3): _rational(1, 2),
    (7, 4): _root_over(2, 2),
    (11, 6): _root_over(3, 2)
}

# Half a turn is enough, tan has period π
TAN_TABLE = {
    (0, 1): _rational(0),
    (1, 6): _root_over(3, 3),
    (1, 4): _rational(1),
    (1, 3): _root_over(3, 1),
    (1, 2): Indefinite(),
    (2, 3): _root_over(3, 1, negative=True),
    (3, 4): _rational(-1),
    (5, 6): _root_over(3, 3, negative=True)
}

TABLES = {
    Sin: SIN_TABLE,
    Cos: COS_TABLE,
    Tan: TAN_TABLE
}


# -----------------------------
# Lookup
# -----------------------------

def reduce_angle(function, coefficient):
    """Reduce c (angle c·π) into [0, period). Returns (k, n) or None if n is not allowed."""
    reduced = coefficient % PERIODS[function]
    if reduced.denominator not in ALLOWED_DENOMINATORS:
        return None
    return (reduced.numerator % (2 * reduced.denominator), reduced.denominator)


def resolve_special_angle(function, argument):
    """Return (value, proof_line) for function(argument), or None if the angle is not special.

    function is one of the classes Sin, Cos, Tan.
    """
    coefficient = coefficient_of_pi(argument)
    if coefficient is None:
        return None

    key = reduce_angle(function, coefficient)
    if key is None:
        return None

    value = TABLES[function].get(key)
    if value is None:
        return None

    name = function.name
    reduced_text = Formatter.format_coeff_pi(fractions.Fraction(key[0], key[1]))
    original_text = Formatter.format_coeff_pi(coefficient)
    value_text = Formatter.format_exact(value)

    if reduced_text == original_text:
        proof_line = f"{name}({original_text}) = {value_text}"
    else:
        proof_line = f"{name}({original_text}) = {name}({reduced_text}) = {value_text}"

    if debug == True:
        print(proof_line)

    return value, proof_line


def _apply(expr, proof):
    # Children first, so a resolved inner angle can make the outer one special too
    return transform_bottom_up(expr, lambda node: _resolve_node(node, proof))


def _resolve_node(expr, proof):
    if isinstance(expr, TRIG_FUNCTIONS):
        resolved = resolve_special_angle(type(expr), expr.argument)
        if resolved is not None:
            value, proof_line = resolved
            proof.append(proof_line)
            return value

    return expr


def apply_special_angles(expr, proof):
    """Replace every special sin/cos/tan in the tree, append one proof line per match.

    proof is a list of strings that is extended in place. The result is simplified once.
    """
    return Simplifier.simplify(_apply(expr, proof))

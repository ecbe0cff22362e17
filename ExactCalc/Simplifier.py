# Simplifier.py
"""""
Local simplifier: one bottom-up pass of value preserving rewrites.

The result is never larger than the input. Division by the rational zero is kept
as it is, so the decimal stage can report it. Indefinite absorbs every node it
appears in.
"""""

import fractions
import math

from . import error as E
from .Expression import (Rational, Pi, Indefinite, Variable, Function, SquareRoot,
                         Power, BinOp, is_rational, contains_indefinite, transform_bottom_up)

# Largest exact power result (in bits) built by the simplifier
MAX_POWER_BITS = 4_000_000


def exact_square_root(value):
    """Return the exact rational √value, or None if value is not a perfect square ratio."""
    if value < 0:
        return None
    numerator_root = math.isqrt(value.numerator)
    denominator_root = math.isqrt(value.denominator)
    if numerator_root * numerator_root != value.numerator:
        return None
    if denominator_root * denominator_root != value.denominator:
        return None
    return fractions.Fraction(numerator_root, denominator_root)


def _is_positive_integer(expr):
    return isinstance(expr, Rational) and expr.is_integer() and expr.value > 0


def _square_root_of(expr):
    """Return the argument if expr is a SquareRoot node, else None."""
    if isinstance(expr, SquareRoot):
        return expr.argument
    return None


def _root_over(expr):
    """Match √x / k and return (x, k), else None."""
    if isinstance(expr, BinOp) and expr.operator == '/' and isinstance(expr.left, SquareRoot):
        return expr.left.argument, expr.right
    return None


# -----------------------------
# Node rules
# -----------------------------

def _simplify_square_root(argument):
    if isinstance(argument, Indefinite):
        return Indefinite()
    if isinstance(argument, Rational):
        root = exact_square_root(argument.value)
        if root is not None:
            return Rational(root)
    return SquareRoot(argument)


def simplify_power(base, exponent):
    """Power node rule, shared with the canonicalizer."""
    if isinstance(base, Indefinite):
        return Indefinite()
    if exponent == 0:
        return Rational(1)
    if exponent == 1:
        return base
    if isinstance(base, Rational):
        if base.value == 0 and exponent < 0:
            # 0^-n stays symbolic, the decimal stage reports the division by zero
            return Power(base, exponent)
        size = max(base.value.numerator.bit_length(), base.value.denominator.bit_length())
        if size * abs(exponent) > MAX_POWER_BITS:
            raise E.CalculationError(f"Number too large: power with exponent {exponent}", code="3207")
        # Fraction ** int is exact (square-and-multiply on the integer parts)
        return Rational(base.value ** exponent)
    return Power(base, exponent)


def _simplify_add(left, right):
    if isinstance(left, Rational) and isinstance(right, Rational):
        return Rational(left.value + right.value)
    if is_rational(left, 0):
        return right
    if is_rational(right, 0):
        return left
    return BinOp(left, '+', right)


def _simplify_sub(left, right):
    if isinstance(left, Rational) and isinstance(right, Rational):
        return Rational(left.value - right.value)
    if is_rational(right, 0):
        return left
    if left == right:
        return Rational(0)
    # 0 - x is kept as the negation shape
    return BinOp(left, '-', right)


def _simplify_mul(left, right):
    if isinstance(left, Rational) and isinstance(right, Rational):
        return Rational(left.value * right.value)
    if is_rational(left, 0) or is_rational(right, 0):
        return Rational(0)
    if is_rational(left, 1):
        return right
    if is_rational(right, 1):
        return left

    left_root = _square_root_of(left)
    right_root = _square_root_of(right)

    # √x * √x → x
    if left_root is not None and left_root == right_root:
        return left_root

    # √u * √v → √(uv) for non-negative rationals
    if (isinstance(left_root, Rational) and isinstance(right_root, Rational)
            and left_root.value >= 0 and right_root.value >= 0):
        return _simplify_square_root(Rational(left_root.value * right_root.value))

    # (√x/k) * √x → x/k and √x * (√x/k) → x/k
    left_over = _root_over(left)
    right_over = _root_over(right)
    if left_over is not None and right_root is not None and left_over[0] == right_root:
        return _simplify_div(right_root, left_over[1])
    if right_over is not None and left_root is not None and right_over[0] == left_root:
        return _simplify_div(left_root, right_over[1])

    # (√x/k) * (√x/m) → x/(k*m)
    if left_over is not None and right_over is not None and left_over[0] == right_over[0]:
        return _simplify_div(left_over[0], _simplify_mul(left_over[1], right_over[1]))

    return BinOp(left, '*', right)


def _simplify_div(left, right):
    if is_rational(right, 0):
        return BinOp(left, '/', right)
    if isinstance(left, Rational) and isinstance(right, Rational):
        return Rational(left.value / right.value)
    if is_rational(right, 1):
        return left

    left_root = _square_root_of(left)
    right_root = _square_root_of(right)

    # √x / √x → 1 for a nonzero rational x
    if isinstance(left_root, Rational) and left_root == right_root and left_root.value != 0:
        return Rational(1)

    # √u / √v → √(u/v) for positive rationals
    if (isinstance(left_root, Rational) and isinstance(right_root, Rational)
            and left_root.value > 0 and right_root.value > 0):
        return _simplify_square_root(Rational(left_root.value / right_root.value))

    # r / √n → (r/n)·√n
    if isinstance(left, Rational) and _is_positive_integer(right_root):
        return BinOp(Rational(left.value / right_root.value), '*', right)

    return BinOp(left, '/', right)


_BINARY_RULES = {
    '+': _simplify_add,
    '-': _simplify_sub,
    '*': _simplify_mul,
    '/': _simplify_div
}


def _simplify_node(expr):
    """Node rule, applied after the children were simplified."""
    if isinstance(expr, (Rational, Pi, Indefinite, Variable)):
        return expr

    if isinstance(expr, Power):
        return simplify_power(expr.base, expr.exponent)

    if isinstance(expr, SquareRoot):
        return _simplify_square_root(expr.argument)

    if isinstance(expr, Function):
        if isinstance(expr.argument, Indefinite):
            return Indefinite()
        return expr

    if isinstance(expr, BinOp):
        if contains_indefinite(expr.left, expr.right):
            return Indefinite()
        return _BINARY_RULES[expr.operator](expr.left, expr.right)

    raise TypeError(f"Unknown expression node: {expr!r}")


# -----------------------------
# Public entry point
# -----------------------------

def simplify(expr):
    """Return a simplified copy of expr (bottom-up, one traversal)."""
    return transform_bottom_up(expr, _simplify_node)

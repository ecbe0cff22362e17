# Canonicalizer.py
"""""
Canonical normal form.

Structurally equivalent inputs give byte-identical trees (and therefore identical
EXACT strings). Children are canonicalized first, then:

- sums / differences are flattened into signed terms, rationals are folded into one
  term, equal terms are collected, terms are sorted by (rank, key_string)
- products are flattened, the sign and the rational coefficient are pulled out,
  factors are sorted the same way and rebuilt left-associatively
- a negative result is always written 0 - x (never -1*x)
- x / k (k a nonzero rational) becomes (1/k)*x, signs leave the denominator
- √n is written s·√t with t square-free
"""""

import fractions
import math

from . import Simplifier
from .Expression import (Rational, Pi, Indefinite, Variable, Function, SquareRoot, Sin,
                         Cos, Tan, Power, BinOp, negate, is_negation, is_op, is_rational)

# Trial division is only attempted below this radicand
SQUARE_FREE_LIMIT = 10 ** 12

RANKS = {
    Rational: 0,
    Variable: 1,
    SquareRoot: 2,
    Pi: 3,
    Power: 4,
    Sin: 5,
    Cos: 5,
    Tan: 5
}
PRODUCT_RANK = 6
SUM_RANK = 7
INDEFINITE_RANK = 8

KEY_TAGS = {'+': "ADD", '-': "SUB", '*': "MUL", '/': "DIV"}
CHAIN_CLASSES = {'+': ('+', '-'), '-': ('+', '-'), '*': ('*', '/'), '/': ('*', '/')}


# -----------------------------
# Ordering
# -----------------------------

def rank(expr):
    if isinstance(expr, Indefinite):
        return INDEFINITE_RANK
    if isinstance(expr, BinOp):
        return SUM_RANK if expr.operator in ('+', '-') else PRODUCT_RANK
    return RANKS[type(expr)]


def key_string(expr):
    """Canonical serialization of a subtree, used as the secondary sort key."""
    if isinstance(expr, Rational):
        return f"R{expr.value.numerator}/{expr.value.denominator}"
    if isinstance(expr, Variable):
        return f"VAR({expr.name})"
    if isinstance(expr, Pi):
        return "PI"
    if isinstance(expr, Indefinite):
        return "INDEF"
    if isinstance(expr, Function):
        return f"{expr.name.upper()}({key_string(expr.argument)})"
    if isinstance(expr, Power):
        return f"POW({key_string(expr.base)},{expr.exponent})"

    # Walk the left spine of a chain instead of recursing into it
    rights = []
    node = expr
    operators = CHAIN_CLASSES[expr.operator]
    while isinstance(node, BinOp) and node.operator in operators:
        rights.append((KEY_TAGS[node.operator], node.right))
        node = node.left
    # TAG2(TAG1(base,r1),r2): openings outermost first, closings innermost first
    parts = [f"{tag}(" for tag, _ in rights]
    parts.append(key_string(node))
    for _, right in reversed(rights):
        parts.append(f",{key_string(right)})")
    return "".join(parts)


def sort_key(expr):
    return (rank(expr), key_string(expr))


# -----------------------------
# Helpers
# -----------------------------

def split_square(n):
    """Return (s, t) with n == s*s*t and t square-free (trial division).

    Above SQUARE_FREE_LIMIT only perfect squares are recognized.
    """
    if n == 0:
        return 0, 1
    if n > SQUARE_FREE_LIMIT:
        root = math.isqrt(n)
        if root * root == n:
            return root, 1
        return 1, n

    outside = 1
    inside = 1
    remaining = n
    factor = 2
    while factor * factor <= remaining:
        while remaining % (factor * factor) == 0:
            remaining //= factor * factor
            outside *= factor
        if remaining % factor == 0:
            remaining //= factor
            inside *= factor
        factor = 3 if factor == 2 else factor + 2
    return outside, inside * remaining


def _negative(expr):
    if isinstance(expr, Rational):
        return Rational(-expr.value)
    return negate(expr)


def _chain(factors, operator='*'):
    result = factors[0]
    for factor in factors[1:]:
        result = BinOp(result, operator, factor)
    return result


def _product_factors(expr):
    """Flatten a '*' chain into its factors, left to right."""
    factors = []
    stack = [expr]
    while stack:
        node = stack.pop()
        if is_op(node, '*'):
            stack.append(node.right)
            stack.append(node.left)
        else:
            factors.append(node)
    return factors


def _signed_product(coefficient, factors):
    """Rebuild coefficient * factors (factors already sorted)."""
    if not factors:
        return Rational(coefficient)
    magnitude = abs(coefficient)
    items = list(factors)
    if magnitude != 1:
        items.insert(0, Rational(magnitude))
    product = _chain(items)
    if coefficient < 0:
        return negate(product)
    return product


def _split_coefficient(term):
    """Split a canonical non-additive term into (rational coefficient, rest)."""
    if not is_op(term, '*'):
        return fractions.Fraction(1), term
    coefficient = fractions.Fraction(1)
    rest = []
    for factor in _product_factors(term):
        if isinstance(factor, Rational):
            coefficient *= factor.value
        else:
            rest.append(factor)
    return coefficient, _chain(rest)


def _fold_square_roots(coefficient, factors):
    """√a·√b → s√t for non-negative rational radicands, √x·√x → x for any other x.

    Returns (coefficient, factors, released), released being the radicands of the
    folded pairs, still to be multiplied in.
    """
    radicand = None
    unpaired = {}  # key_string(argument) -> SquareRoot factor
    kept = []
    released = []

    for factor in factors:
        if not isinstance(factor, SquareRoot):
            kept.append(factor)
            continue
        argument = factor.argument
        if isinstance(argument, Rational) and argument.value >= 0:
            radicand = argument.value if radicand is None else radicand * argument.value
            continue
        key = key_string(argument)
        if key in unpaired:
            del unpaired[key]
            released.append(argument)
        else:
            unpaired[key] = factor

    kept.extend(unpaired.values())
    if radicand is not None:
        outside, inside = split_square(radicand.numerator * radicand.denominator)
        coefficient *= fractions.Fraction(outside, radicand.denominator)
        if inside != 1:
            kept.append(SquareRoot(Rational(inside)))
    return coefficient, kept, released


def _scaled_root_parts(expr):
    """Match a canonical c·√t (also √t and 0 - c·√t) and return (c, t), else None."""
    sign = 1
    if is_negation(expr):
        sign, expr = -1, expr.right
    coefficient = fractions.Fraction(1)
    if is_op(expr, '*') and isinstance(expr.left, Rational):
        coefficient, expr = expr.left.value, expr.right
    if isinstance(expr, SquareRoot) and isinstance(expr.argument, Rational) and expr.argument.value > 0:
        return sign * coefficient, expr.argument.value
    return None


# -----------------------------
# Node rules
# -----------------------------

def _canonical_sum(expr):
    rational_total = fractions.Fraction(0)
    grouped = {}  # key_string(rest) -> [coefficient, rest]
    stack = [(1, expr, False)]

    while stack:
        sign, node, done = stack.pop()

        if is_op(node, '+') or is_op(node, '-'):
            right_sign = sign if node.operator == '+' else -sign
            stack.append((right_sign, node.right, done))
            stack.append((sign, node.left, done))
            continue

        if not done:
            node = canonicalize(node)
            if is_op(node, '+') or is_op(node, '-'):
                stack.append((sign, node, True))
                continue

        if isinstance(node, Indefinite):
            return Indefinite()
        if isinstance(node, Rational):
            rational_total += sign * node.value
            continue

        coefficient, rest = _split_coefficient(node)
        key = key_string(rest)
        if key in grouped:
            grouped[key][0] += sign * coefficient
        else:
            grouped[key] = [sign * coefficient, rest]

    terms = []
    for coefficient, rest in grouped.values():
        if coefficient != 0:
            term = _signed_product(abs(coefficient), _product_factors(rest))
            terms.append((1 if coefficient > 0 else -1, term))
    terms.sort(key=lambda item: sort_key(item[1]))

    if rational_total != 0:
        terms.insert(0, (1 if rational_total > 0 else -1, Rational(abs(rational_total))))

    if not terms:
        return Rational(0)

    first_sign, result = terms[0]
    if first_sign < 0:
        result = _negative(result)
    for sign, term in terms[1:]:
        result = BinOp(result, '+' if sign > 0 else '-', term)
    return result


def _canonical_product(items):
    """items: list of (node, already_canonical) to be multiplied together."""
    coefficient = fractions.Fraction(1)
    factors = []
    indefinite = False
    stack = list(reversed(items))

    while stack:
        node, done = stack.pop()

        if is_op(node, '*'):
            stack.append((node.right, done))
            stack.append((node.left, done))
            continue

        if not done:
            node = canonicalize(node)
            if is_op(node, '*') or is_negation(node):
                stack.append((node, True))
                continue

        if is_negation(node):
            coefficient = -coefficient
            stack.append((node.right, True))
        elif isinstance(node, Indefinite):
            indefinite = True
        elif isinstance(node, Rational):
            coefficient *= node.value
        else:
            factors.append(node)

    if indefinite:
        return Indefinite()

    coefficient, factors, released = _fold_square_roots(coefficient, factors)
    if released:
        items = [(Rational(coefficient), True)]
        items.extend((factor, True) for factor in factors + released)
        return _canonical_product(items)

    if coefficient == 0:
        return Rational(0)

    factors.sort(key=sort_key)
    return _signed_product(coefficient, factors)


def _canonical_quotient(left, right):
    if isinstance(left, Indefinite) or isinstance(right, Indefinite):
        return Indefinite()
    if is_rational(right, 1):
        return left
    if is_rational(left, 0) and not is_rational(right, 0):
        return Rational(0)
    if isinstance(right, Rational) and right.value != 0:
        # x / k → (1/k)*x
        return _canonical_product([(Rational(1 / right.value), True), (left, True)])

    # Move every sign in front of the quotient
    sign = 1
    if is_negation(left):
        sign, left = -sign, left.right
    elif isinstance(left, Rational) and left.value < 0:
        sign, left = -sign, Rational(-left.value)
    if is_negation(right):
        sign, right = -sign, right.right

    quotient = BinOp(left, '/', right)
    if sign < 0:
        return negate(quotient)
    return quotient


def _canonical_power(base, exponent):
    if isinstance(base, Indefinite):
        return Indefinite()

    parts = _scaled_root_parts(base)
    if parts is not None:
        # (c√t)^e = (c²t)^(e div 2) · (c√t)^(e mod 2)
        coefficient, radicand = parts
        square = Simplifier.simplify_power(Rational(coefficient * coefficient * radicand), exponent // 2)
        if exponent % 2 == 0:
            return square
        return _canonical_product([(square, True), (base, True)])

    return Simplifier.simplify_power(base, exponent)


def _canonical_square_root(argument):
    if isinstance(argument, Indefinite):
        return Indefinite()
    if isinstance(argument, Rational) and argument.value >= 0:
        value = argument.value
        # √(p/q) = √(p·q)/q
        outside, inside = split_square(value.numerator * value.denominator)
        coefficient = fractions.Fraction(outside, value.denominator)
        if inside == 1:
            return Rational(coefficient)
        return _signed_product(coefficient, [SquareRoot(Rational(inside))])
    return SquareRoot(argument)


# -----------------------------
# Public entry points
# -----------------------------

def canonicalize(expr):
    """Return the canonical form of expr. Deterministic and idempotent."""
    if isinstance(expr, (Rational, Pi, Indefinite, Variable)):
        return expr

    if is_op(expr, '+') or is_op(expr, '-'):
        return _canonical_sum(expr)

    if is_op(expr, '*'):
        return _canonical_product([(expr, False)])

    if is_op(expr, '/'):
        return _canonical_quotient(canonicalize(expr.left), canonicalize(expr.right))

    if isinstance(expr, Power):
        return _canonical_power(canonicalize(expr.base), expr.exponent)

    if isinstance(expr, SquareRoot):
        return _canonical_square_root(canonicalize(expr.argument))

    if isinstance(expr, Function):
        argument = canonicalize(expr.argument)
        if isinstance(argument, Indefinite):
            return Indefinite()
        return expr.rebuild(argument)

    raise TypeError(f"Unknown expression node: {expr!r}")


def are_equivalent(first, second):
    """Structural equality of the canonical forms."""
    return canonicalize(first) == canonicalize(second)

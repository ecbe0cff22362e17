# DecimalEngine.py
"""""
Decimal reading of a canonical Expression, without any floating point.

Every value is an int scaled by 10^(digits + GUARD_DIGITS). Results are truncated
toward zero (never rounded): first while computing, then once more when the guard
digits are dropped.

- π:  Machin's formula 16·atan(1/5) − 4·atan(1/239), cached per digit count
- √:  integer Newton iteration with a final floor adjustment
- sin / cos / tan: through the exact special-angle value, other angles are an error
"""""

import threading

from . import error as E
from . import Simplifier
from . import ScientificEngine
from . import Canonicalizer
from .Expression import (Rational, Pi, Indefinite, Variable, SquareRoot, Power, BinOp,
                         TRIG_FUNCTIONS, is_op)

# Debug toggle for optional prints in this module
debug = False

MAX_DIGITS = 200
GUARD_DIGITS = 10

# digits -> π·10^digits (truncated). Append-only, guarded by _pi_lock.
_pi_cache = {}
_pi_lock = threading.Lock()


def clamp_digits(digits):
    return max(0, min(MAX_DIGITS, int(digits)))


# -----------------------------
# Scaled integer helpers
# -----------------------------

def truncating_div(numerator, denominator):
    """Integer division rounding toward zero (Python's // rounds toward -inf)."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def rational_scaled(value, scale):
    """value·scale truncated, value being a Fraction."""
    return truncating_div(value.numerator * scale, value.denominator)


def scaled_to_decimal(value, digits):
    """Render value / 10^digits as a decimal string, e.g. (-1414, 3) → '-1.414'."""
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if digits == 0:
        return f"{sign}{magnitude}"
    integer_part, fraction_part = divmod(magnitude, 10 ** digits)
    return f"{sign}{integer_part}.{fraction_part:0{digits}d}"


def integer_sqrt(n):
    """floor(√n) by Newton's iteration, n being a non-negative int."""
    if n < 2:
        return n
    # Start above the root so the iteration decreases monotonically
    y = 1 << ((n.bit_length() + 1) // 2)
    while True:
        next_y = (y + n // y) // 2
        if next_y >= y:
            break
        y = next_y
    # Final floor adjustment
    while y * y > n:
        y -= 1
    while (y + 1) * (y + 1) <= n:
        y += 1
    return y


def rational_sqrt_scaled(value, scale):
    """√value·scale (floor), value being a non-negative Fraction."""
    return integer_sqrt(value.numerator * scale * scale // value.denominator)


# -----------------------------
# π
# -----------------------------

def arctan_inverse_scaled(q, scale):
    """atan(1/q)·scale via z - z^3/3 + z^5/5 - ..., stops once a term is zero."""
    total = 0
    power = scale // q
    q_squared = q * q
    n = 1
    sign = 1
    while power != 0:
        term = power // n
        if term == 0:
            break
        total += sign * term
        power //= q_squared
        n += 2
        sign = -sign
    return total


def compute_pi_scaled(digits):
    """π·10^digits truncated, computed with GUARD_DIGITS extra digits."""
    scale = 10 ** (digits + GUARD_DIGITS)
    pi_value = 16 * arctan_inverse_scaled(5, scale) - 4 * arctan_inverse_scaled(239, scale)
    return pi_value // 10 ** GUARD_DIGITS


def pi_scaled(digits):
    """Cached π·10^digits. The lookup-or-compute-and-insert runs under one lock."""
    with _pi_lock:
        cached = _pi_cache.get(digits)
        if cached is None:
            if debug == True:
                print(f"Computing π with {digits} digits")
            cached = compute_pi_scaled(digits)
            _pi_cache[digits] = cached
        return cached


# -----------------------------
# Evaluation
# -----------------------------

def _evaluate_sum(expr, working, scale):
    rights = []
    node = expr
    while is_op(node, '+') or is_op(node, '-'):
        rights.append((node.operator, node.right))
        node = node.left

    total = _evaluate(node, working, scale)
    for operator, right in reversed(rights):
        value = _evaluate(right, working, scale)
        total = total + value if operator == '+' else total - value
    return total


def _evaluate_product(expr, working, scale):
    rights = []
    node = expr
    while is_op(node, '*') or is_op(node, '/'):
        rights.append((node.operator, node.right))
        node = node.left

    result = _evaluate(node, working, scale)
    for operator, right in reversed(rights):
        if isinstance(right, Rational):
            # Exact rational factors: multiply / divide by numerator and denominator directly
            numerator, denominator = right.value.numerator, right.value.denominator
            if operator == '/':
                numerator, denominator = denominator, numerator
            if denominator == 0:
                raise E.CalculationError("Division by zero", code="3200")
            result = truncating_div(result * numerator, denominator)
            continue

        value = _evaluate(right, working, scale)
        if operator == '*':
            result = truncating_div(result * value, scale)
        else:
            if value == 0:
                raise E.CalculationError("Division by zero", code="3200")
            result = truncating_div(result * scale, value)
    return result


def _evaluate_power(expr, scale):
    base = expr.base
    if not isinstance(base, Rational):
        raise E.CalculationError("Decimal reading of a power needs a rational base (not yet supported).", code="3203")
    if base.value == 0 and expr.exponent < 0:
        raise E.CalculationError("Division by zero", code="3200")
    return rational_scaled(Simplifier.simplify_power(base, expr.exponent).value, scale)


def _evaluate_square_root(expr, scale):
    argument = Simplifier.simplify(expr.argument)
    if not isinstance(argument, Rational):
        raise E.CalculationError("Decimal reading of √ needs a rational argument (not yet supported).", code="3202")
    if argument.value < 0:
        raise E.CalculationError(f"Square root of a negative number: {argument.value}", code="3204")
    return rational_sqrt_scaled(argument.value, scale)


def _has_trig_or_variable(expr):
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, (Variable,) + TRIG_FUNCTIONS):
            return True
        stack.extend(node.children())
    return False


def _evaluate_trig(expr, working, scale):
    # The exact value of a special angle, in canonical form (√2/2 becomes 1/2*√2)
    reduced = Canonicalizer.canonicalize(ScientificEngine.apply_special_angles(expr, []))
    if isinstance(reduced, Indefinite):
        raise E.CalculationError("Undefined value (indéfini).", code="3206")
    if not _has_trig_or_variable(reduced):
        return _evaluate(reduced, working, scale)
    raise E.CalculationError(f"{expr.name}: angle not recognized (special angles only).", code="3201")


def _evaluate(expr, working, scale):
    if isinstance(expr, Rational):
        return rational_scaled(expr.value, scale)
    if isinstance(expr, Pi):
        return pi_scaled(working)
    if isinstance(expr, Variable):
        raise E.CalculationError(f"Variable '{expr.name}' has no value.", code="3205")
    if isinstance(expr, Indefinite):
        raise E.CalculationError("Undefined value (indéfini).", code="3206")
    if isinstance(expr, SquareRoot):
        return _evaluate_square_root(expr, scale)
    if isinstance(expr, TRIG_FUNCTIONS):
        return _evaluate_trig(expr, working, scale)
    if isinstance(expr, Power):
        return _evaluate_power(expr, scale)
    if is_op(expr, '+') or is_op(expr, '-'):
        return _evaluate_sum(expr, working, scale)
    if isinstance(expr, BinOp):
        return _evaluate_product(expr, working, scale)
    raise TypeError(f"Unknown expression node: {expr!r}")


def evaluate_scaled(expr, digits):
    """expr·10^digits truncated toward zero."""
    working = digits + GUARD_DIGITS
    value = _evaluate(expr, working, 10 ** working)
    return truncating_div(value, 10 ** GUARD_DIGITS)


def evaluate_decimal(expr, digits):
    """Decimal string of expr with `digits` digits after the point (truncated)."""
    digits = clamp_digits(digits)
    return scaled_to_decimal(evaluate_scaled(expr, digits), digits)

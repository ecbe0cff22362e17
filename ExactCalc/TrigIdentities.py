# TrigIdentities.py
"""""
Identity rewriter: a small fixed set of always-valid trigonometric identities.

Patterns only match literal shapes (a Pi leaf added to / subtracted from the argument,
the product 2*π, the quotient π/2, the negation 0 - x), nothing is expanded.
Passes are repeated until nothing changes, the complexity score (node count, depth)
would grow, or MAX_PASSES is reached.
"""""

from .Expression import (Rational, Pi, Indefinite, Power, Sin, Cos, Tan, negate,
                         is_negation, is_op, is_rational, complexity, transform_bottom_up)

# Debug toggle for optional prints in this module
debug = False

MAX_PASSES = 6


# -----------------------------
# Argument shapes
# -----------------------------

def _is_pi(expr):
    return isinstance(expr, Pi)


def _is_two_pi(expr):
    return is_op(expr, '*') and (
        (is_rational(expr.left, 2) and _is_pi(expr.right)) or
        (_is_pi(expr.left) and is_rational(expr.right, 2)))


def _is_half_pi(expr):
    return is_op(expr, '/') and _is_pi(expr.left) and is_rational(expr.right, 2)


def _shifted(argument, is_shift):
    """Match x + s, s + x (returns (x, +1)) or x - s (returns (x, -1)) for a shift s."""
    if is_op(argument, '+'):
        if is_shift(argument.right):
            return argument.left, 1
        if is_shift(argument.left):
            return argument.right, 1
    if is_op(argument, '-') and is_shift(argument.right):
        return argument.left, -1
    return None


def _reflected(argument):
    """Match π - x and return x."""
    if is_op(argument, '-') and _is_pi(argument.left):
        return argument.right
    return None


# -----------------------------
# Rules per function
# -----------------------------

def _rewrite_sin(argument):
    if is_negation(argument):
        return negate(Sin(argument.right))

    match = _shifted(argument, _is_pi)
    if match:
        return negate(Sin(match[0]))

    match = _shifted(argument, _is_two_pi)
    if match:
        return Sin(match[0])

    match = _shifted(argument, _is_half_pi)
    if match:
        x, sign = match
        return Cos(x) if sign > 0 else negate(Cos(x))

    x = _reflected(argument)
    if x is not None:
        return Sin(x)
    return None


def _rewrite_cos(argument):
    if is_negation(argument):
        return Cos(argument.right)

    match = _shifted(argument, _is_pi)
    if match:
        return negate(Cos(match[0]))

    match = _shifted(argument, _is_two_pi)
    if match:
        return Cos(match[0])

    match = _shifted(argument, _is_half_pi)
    if match:
        x, sign = match
        return negate(Sin(x)) if sign > 0 else Sin(x)

    x = _reflected(argument)
    if x is not None:
        return negate(Cos(x))
    return None


def _rewrite_tan(argument):
    if is_negation(argument):
        return negate(Tan(argument.right))

    match = _shifted(argument, _is_pi)
    if match:
        return Tan(match[0])

    if _shifted(argument, _is_half_pi):
        return Indefinite()
    return None


def _squared(expr, function):
    """Return x if expr is function(x)^2, else None."""
    if isinstance(expr, Power) and expr.exponent == 2 and isinstance(expr.base, function):
        return expr.base.argument
    return None


def _rewrite_pythagorean(left, right):
    """sin(x)^2 + cos(x)^2 → 1, in either order."""
    for first, second in ((left, right), (right, left)):
        x = _squared(first, Sin)
        if x is not None and x == _squared(second, Cos):
            return Rational(1)
    return None


def _rewrite_quotient(expr):
    """sin(x)/cos(x) → tan(x), only when that lowers the complexity score."""
    if isinstance(expr.left, Sin) and isinstance(expr.right, Cos) and expr.left.argument == expr.right.argument:
        candidate = Tan(expr.left.argument)
        if complexity(candidate) < complexity(expr):
            return candidate
    return None


_FUNCTION_RULES = {
    Sin: _rewrite_sin,
    Cos: _rewrite_cos,
    Tan: _rewrite_tan
}


def _rewrite_node(expr):
    rewritten = None
    rule = _FUNCTION_RULES.get(type(expr))
    if rule is not None:
        rewritten = rule(expr.argument)
    elif is_op(expr, '+'):
        rewritten = _rewrite_pythagorean(expr.left, expr.right)
    elif is_op(expr, '/'):
        rewritten = _rewrite_quotient(expr)

    if rewritten is None:
        return expr
    return rewritten


def _rewrite_once(expr):
    """One full pass, children first."""
    return transform_bottom_up(expr, _rewrite_node)


# -----------------------------
# Public entry point
# -----------------------------

def rewrite_identities(expr, max_passes=MAX_PASSES):
    """Apply the identity rules until a fixed point, a score increase or max_passes."""
    current = expr
    score = complexity(current)

    for iteration in range(max_passes):
        candidate = _rewrite_once(current)
        if candidate == current:
            break

        candidate_score = complexity(candidate)
        if candidate_score > score:
            if debug == True:
                print(f"Identity pass {iteration + 1} rejected: score {candidate_score} > {score}")
            break

        if debug == True:
            print(f"Identity pass {iteration + 1}: {candidate!r}")
        current, score = candidate, candidate_score

    return current

# Formatter.py
"""""
Formatter: renders Expression trees as display text.

- format_pretty(expr):  generic renderer with minimal parentheses
- format_exact(expr):   EXACT line, prints rational multiples of π as kπ/d
- format_coeff_pi(c):   'π', '-π', '3π', 'π/4', '-5π/6', ...
"""""

from .Expression import (Rational, Pi, Indefinite, Variable, Function, SquareRoot, Power,
                         BinOp, INDEFINITE_TEXT, coefficient_of_pi, is_negation, is_op)

# Precedence levels used to decide on parentheses
SUM = 1
PRODUCT = 2
POWER = 3
ATOM = 4

_SPACED = {'+': " + ", '-': " - ", '*': "*", '/': "/"}


def format_rational(value):
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def format_coeff_pi(coefficient):
    """Render coefficient·π (coefficient is a Fraction)."""
    if coefficient == 0:
        return "0"
    numerator = coefficient.numerator
    if numerator == 1:
        text = "π"
    elif numerator == -1:
        text = "-π"
    else:
        text = f"{numerator}π"
    if coefficient.denominator != 1:
        text += f"/{coefficient.denominator}"
    return text


def _wrap(rendered, minimum, strict=False, leftmost=False):
    """Parenthesize rendered = (text, level) when its level is too low or it starts with '-'.

    A leading minus needs no parentheses on the far left of a chain.
    """
    text, level = rendered
    if level < minimum or (strict and level == minimum) or (not leftmost and text.startswith("-")):
        return f"({text})"
    return text


def _is_integer_root(expr):
    return (isinstance(expr, SquareRoot) and isinstance(expr.argument, Rational)
            and expr.argument.is_integer() and expr.argument.value >= 0)


def _render_scaled_root(coefficient, root):
    """p√n/q for a rational coefficient times √n."""
    numerator = coefficient.numerator
    if numerator == 1:
        text = f"√{root}"
    elif numerator == -1:
        text = f"-√{root}"
    else:
        text = f"{numerator}√{root}"
    if coefficient.denominator != 1:
        text += f"/{coefficient.denominator}"
    return text


def _render_chain(expr, operators, level):
    """Render a left-leaning chain of operators in `operators` without recursing on the spine."""
    rights = []
    node = expr
    while isinstance(node, BinOp) and node.operator in operators and not is_negation(node):
        rights.append((node.operator, node.right))
        node = node.left

    text = _wrap(_render(node), level, leftmost=True)
    for operator, right in reversed(rights):
        strict = operator in ('-', '/')
        text += _SPACED[operator] + _wrap(_render(right), level, strict)
    return text


def _render(expr):
    """Return (text, level) for expr."""
    if isinstance(expr, Rational):
        if expr.is_integer():
            return format_rational(expr.value), ATOM
        return format_rational(expr.value), PRODUCT

    if isinstance(expr, Pi):
        return "π", ATOM

    if isinstance(expr, Indefinite):
        return INDEFINITE_TEXT, ATOM

    if isinstance(expr, Variable):
        return expr.name, ATOM

    if isinstance(expr, SquareRoot):
        if _is_integer_root(expr):
            return f"√{expr.argument.value.numerator}", ATOM
        return f"√({format_pretty(expr.argument)})", ATOM

    if isinstance(expr, Function):
        return f"{expr.name}({format_pretty(expr.argument)})", ATOM

    if isinstance(expr, Power):
        base = _wrap(_render(expr.base), ATOM)
        if expr.exponent < 0:
            return f"{base}^({expr.exponent})", POWER
        return f"{base}^{expr.exponent}", POWER

    if isinstance(expr, BinOp):
        if is_negation(expr):
            inner = _render(expr.right)
            if inner[1] == SUM:
                return f"-({inner[0]})", PRODUCT
            if inner[0].startswith("-"):
                return f"-({inner[0]})", PRODUCT
            return "-" + inner[0], PRODUCT

        if is_op(expr, '*') and isinstance(expr.left, Rational):
            coefficient = expr.left.value
            if _is_integer_root(expr.right):
                return _render_scaled_root(coefficient, expr.right.argument.value.numerator), PRODUCT
            if coefficient.denominator != 1:
                # p/q * X → p*X/q
                factor = _wrap(_render(expr.right), PRODUCT)
                if coefficient.numerator == 1:
                    text = factor
                elif coefficient.numerator == -1:
                    text = "-" + factor
                else:
                    text = f"{coefficient.numerator}*{factor}"
                return f"{text}/{coefficient.denominator}", PRODUCT

        if expr.operator in ('+', '-'):
            return _render_chain(expr, ('+', '-'), SUM), SUM
        return _render_chain(expr, ('*', '/'), PRODUCT), PRODUCT

    raise TypeError(f"Unknown expression node: {expr!r}")


def format_pretty(expr):
    """Generic renderer: n, n/d, π, √n, p√n/q, unary minus, minimal parentheses."""
    return _render(expr)[0]


def format_exact(expr):
    """EXACT line: 'indéfini', a kπ/d form for rational multiples of π, or format_pretty."""
    if isinstance(expr, Indefinite):
        return INDEFINITE_TEXT
    if not isinstance(expr, Rational):
        coefficient = coefficient_of_pi(expr)
        if coefficient is not None:
            return format_coeff_pi(coefficient)
    return format_pretty(expr)

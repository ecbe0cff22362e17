# Expression.py
"""""
AST node types for the exact calculator.

Every node is a value: it is never mutated after construction, two nodes compare
equal when their whole subtrees are structurally equal, and a rewrite always
builds new nodes. Parentheses only exist while parsing, they never become nodes.

Node types
----------
- Rational(value)            exact fraction (always reduced, denominator > 0)
- Pi                         the symbol π
- Indefinite                 absorbing "undefined" value (e.g. tan(π/2))
- Variable(name)             opaque symbol, blocks the decimal reading
- SquareRoot / Sin / Cos / Tan(argument)
- Power(base, exponent)      exponent is a plain int
- BinOp(left, operator, right) with operator in + - * /
"""""

import fractions

# Bounds for the explicit-stack walks below
MAX_STACK = 8192
MAX_NODES = 200000

INDEFINITE_TEXT = "indéfini"


# -----------------------------
# AST node types
# -----------------------------

class Expression:
    """Common base: structural equality and hashing over the whole subtree.

    label() holds the node's own data, children() its subtrees. Both walks use an
    explicit stack, long operator chains never hit the recursion limit.
    """

    def label(self):
        return ()

    def children(self):
        return ()

    def __eq__(self, other):
        pairs = [(self, other)]
        while pairs:
            first, second = pairs.pop()
            if first is second:
                continue
            if type(first) is not type(second) or first.label() != second.label():
                return False
            pairs.extend(zip(first.children(), second.children()))
        return True

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        labels = []
        stack = [self]
        while stack:
            node = stack.pop()
            labels.append((type(node).__name__,) + node.label())
            stack.extend(node.children())
        return hash(tuple(labels))


class Rational(Expression):
    """AST node for an exact rational literal backed by fractions.Fraction."""
    def __init__(self, value):
        # Fraction normalizes sign and reduces on construction
        self.value = fractions.Fraction(value)

    def label(self):
        return (self.value,)

    def is_integer(self):
        return self.value.denominator == 1

    def __repr__(self):
        return f"Rational({self.value})"


class Pi(Expression):
    def __repr__(self):
        return "Pi()"


class Indefinite(Expression):
    def __repr__(self):
        return "Indefinite()"


class Variable(Expression):
    """AST node representing a free symbol. It is never bound to a value."""
    def __init__(self, name):
        self.name = name

    def label(self):
        return (self.name,)

    def __repr__(self):
        return f"Variable('{self.name}')"


class Function(Expression):
    """Unary function node; subclasses only set the function name."""
    name = None

    def __init__(self, argument):
        self.argument = argument

    def children(self):
        return (self.argument,)

    def rebuild(self, argument):
        return type(self)(argument)

    def __repr__(self):
        return f"{type(self).__name__}({self.argument!r})"


class SquareRoot(Function):
    name = "sqrt"


class Sin(Function):
    name = "sin"


class Cos(Function):
    name = "cos"


class Tan(Function):
    name = "tan"


FUNCTIONS = {
    "sqrt": SquareRoot,
    "sin": Sin,
    "cos": Cos,
    "tan": Tan
}

TRIG_FUNCTIONS = (Sin, Cos, Tan)


class Power(Expression):
    """AST node for base ^ exponent, exponent being an int."""
    def __init__(self, base, exponent):
        self.base = base
        self.exponent = int(exponent)

    def label(self):
        return (self.exponent,)

    def children(self):
        return (self.base,)

    def __repr__(self):
        return f"Power({self.base!r}, {self.exponent})"


class BinOp(Expression):
    """AST node for a binary operation: left <operator> right."""
    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def label(self):
        return (self.operator,)

    def children(self):
        return (self.left, self.right)

    def __repr__(self):
        return f"BinOp({self.operator!r}, left={self.left}, right={self.right})"


# -----------------------------
# Predicates
# -----------------------------


def is_rational(expr, value=None):
    """True if expr is a Rational leaf (optionally with the given value)."""
    if not isinstance(expr, Rational):
        return False
    return value is None or expr.value == value


def is_op(expr, operator):
    return isinstance(expr, BinOp) and expr.operator == operator


def negate(expr):
    """Return the canonical negation shape 0 - expr."""
    return BinOp(Rational(0), '-', expr)


def is_negation(expr):
    return is_op(expr, '-') and is_rational(expr.left, 0)


def contains_indefinite(*operands):
    return any(isinstance(operand, Indefinite) for operand in operands)


# -----------------------------
# Rational multiples of π
# -----------------------------

def coefficient_of_pi(expr):
    """Return c such that expr == c·π exactly, or None.

    Linear extraction over + - * / whose leaves are π and rationals. A product needs
    a rational literal on one side, a quotient a nonzero rational literal below.
    A lone nonzero rational is not a multiple of π, zero is 0·π. The walk uses an
    explicit stack and gives up (None) when MAX_STACK / MAX_NODES are exceeded.
    """
    stack = [("node", expr)]
    values = []
    visited = 0

    while stack:
        kind, item = stack.pop()

        if kind == "scale":
            values.append(values.pop() * item)
            continue
        if kind in ("+", "-"):
            right = values.pop()
            left = values.pop()
            values.append(left + right if kind == "+" else left - right)
            continue

        visited += 1
        if visited > MAX_NODES or len(stack) > MAX_STACK:
            return None

        node = item
        if isinstance(node, Pi):
            values.append(fractions.Fraction(1))
        elif isinstance(node, Rational):
            if node.value != 0:
                return None
            values.append(fractions.Fraction(0))
        elif is_op(node, '*'):
            if isinstance(node.left, Rational):
                stack.append(("scale", node.left.value))
                stack.append(("node", node.right))
            elif isinstance(node.right, Rational):
                stack.append(("scale", node.right.value))
                stack.append(("node", node.left))
            else:
                return None
        elif is_op(node, '/'):
            if isinstance(node.right, Rational) and node.right.value != 0:
                stack.append(("scale", 1 / node.right.value))
                stack.append(("node", node.left))
            else:
                return None
        elif is_op(node, '+') or is_op(node, '-'):
            # Left is evaluated first, so its value sits below the right one
            stack.append((node.operator, None))
            stack.append(("node", node.right))
            stack.append(("node", node.left))
        else:
            return None

    return values[0]


# -----------------------------
# Complexity score
# -----------------------------

def complexity(expr):
    """Return (node count, depth) for expr, compared lexicographically."""
    count = 0
    max_depth = 0
    stack = [(expr, 1)]
    while stack:
        node, level = stack.pop()
        count += 1
        if level > max_depth:
            max_depth = level
        for child in node.children():
            stack.append((child, level + 1))
    return (count, max_depth)


def transform_bottom_up(expr, rule):
    """Rebuild expr children first and call rule on every rebuilt node.

    The left spine of a BinOp chain is walked in a loop, only right operands,
    function arguments and power bases recurse.
    """
    spine = []
    node = expr
    while isinstance(node, BinOp):
        spine.append(node)
        node = node.left

    if isinstance(node, Function):
        node = node.rebuild(transform_bottom_up(node.argument, rule))
    elif isinstance(node, Power):
        node = Power(transform_bottom_up(node.base, rule), node.exponent)
    result = rule(node)

    for parent in reversed(spine):
        right = transform_bottom_up(parent.right, rule)
        result = rule(BinOp(result, parent.operator, right))
    return result

# Parser.py
"""""
Parser: token list → postfix (shunting-yard) → Expression tree.

Precedence: '^' > '* /' > '+ -'. '^' is right-associative, the others are left-associative.
Functions (sin, cos, tan, sqrt) sit on the operator stack and are emitted right after
their closing ')'. A '-' where a value is expected is unary and becomes '0 - x'.
"""""

import fractions

from . import error as E
from . import Simplifier
from . import Formatter
from .Expression import (Rational, Pi, Variable, Power, BinOp, FUNCTIONS)
from .Tokenizer import Token, tokenize, format_tokens

# Debug toggle for optional prints in this module
debug = False

PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3}

# Unary minus binds tighter than '* /' but looser than '^' (-2^2 = -(2^2))
NEGATION_PRECEDENCE = 2.5

MAX_EXPONENT = 10000
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

# Tree depth limit, keeps every recursive stage far below the interpreter's recursion limit
MAX_NESTING = 200

# A left operand of the same family continues a flat chain. Every stage walks
# such a spine in a loop, so growing it does not count as nesting.
CHAIN_FAMILIES = {"+": ("+", "-"), "-": ("+", "-"), "*": ("*",)}


def _precedence(token):
    if token.kind == "neg":
        return NEGATION_PRECEDENCE
    return PRECEDENCE[token.value]


def _is_function(token):
    return token.kind == "ident" and token.value in FUNCTIONS


def _binop_depth(left, left_depth, operator, right_depth):
    if isinstance(left, BinOp) and left.operator in CHAIN_FAMILIES.get(operator, ()):
        return max(left_depth, right_depth + 1)
    return max(left_depth, right_depth) + 1


# -----------------------------
# Infix → postfix
# -----------------------------

def to_postfix(tokens):
    """Shunting-yard conversion. Returns the postfix token list."""
    output = []
    stack = []
    expect_value = True  # start of input, after '(' / an operator / a function

    for index, token in enumerate(tokens):

        # --- Values ---
        if token.kind in ("number", "pi"):
            if not expect_value:
                raise E.SyntaxError(f"Missing operator before '{token}'", code="3102")
            output.append(token)
            expect_value = False

        # --- Functions and variables ---
        elif token.kind == "ident":
            if not expect_value:
                raise E.SyntaxError(f"Missing operator before '{token}'", code="3102")
            if _is_function(token):
                if index + 1 >= len(tokens) or tokens[index + 1].kind != "(":
                    raise E.SyntaxError(f"Function without argument: {token.value}", code="3103")
                stack.append(token)
                expect_value = True
            else:
                output.append(token)
                expect_value = False

        # --- Operators ---
        elif token.kind == "op":
            if expect_value and token.value == "-":
                # Unary minus: 0 - x. Nothing is popped, the operand is still to come.
                output.append(Token("number", fractions.Fraction(0)))
                stack.append(Token("neg", "-"))
                continue
            if expect_value and token.value == "+":
                # Unary plus is a no-op
                continue
            if expect_value:
                raise E.SyntaxError(f"Missing number before '{token.value}'", code="3102")

            while stack and stack[-1].kind in ("op", "neg"):
                top = _precedence(stack[-1])
                current = _precedence(token)
                if top > current or (top == current and token.value != "^"):
                    output.append(Token("op", stack.pop().value))
                else:
                    break
            stack.append(token)
            expect_value = True

        # --- Parentheses ---
        elif token.kind == "(":
            if not expect_value:
                raise E.SyntaxError("Missing operator before '('", code="3102")
            stack.append(token)
            expect_value = True

        elif token.kind == ")":
            while stack and stack[-1].kind != "(":
                output.append(Token("op", stack.pop().value))
            if not stack:
                raise E.SyntaxError("Missing opening parenthesis '('", code="3101")
            stack.pop()
            if stack and _is_function(stack[-1]):
                output.append(stack.pop())
            expect_value = False

    while stack:
        top = stack.pop()
        if top.kind == "(":
            raise E.SyntaxError("Missing closing parenthesis ')'", code="3100")
        if top.kind == "ident":
            output.append(top)
        else:
            output.append(Token("op", top.value))

    if debug == True:
        print("Postfix: " + format_tokens(output))

    return output


# -----------------------------
# Postfix → tree
# -----------------------------

def _exponent_value(exponent):
    """Reduce an exponent subtree to a plain int or raise."""
    reduced = Simplifier.simplify(exponent)
    if not isinstance(reduced, Rational) or not reduced.is_integer():
        raise E.SyntaxError(f"Exponent must be an integer: {Formatter.format_pretty(exponent)}", code="3104")

    value = reduced.value.numerator
    if value < INT64_MIN or value > INT64_MAX or abs(value) > MAX_EXPONENT:
        raise E.SyntaxError(f"Exponent too large: {value} (max. {MAX_EXPONENT})", code="3105")
    return value


def from_postfix(postfix):
    """Build the Expression tree from postfix tokens using a value stack."""
    stack = []  # (node, depth)

    for token in postfix:
        if token.kind == "number":
            stack.append((Rational(token.value), 1))

        elif token.kind == "pi":
            stack.append((Pi(), 1))

        elif token.kind == "ident":
            if token.value in FUNCTIONS:
                if not stack:
                    raise E.SyntaxError(f"Function without argument: {token.value}", code="3103")
                argument, depth = stack.pop()
                stack.append((FUNCTIONS[token.value](argument), depth + 1))
            else:
                stack.append((Variable(token.value), 1))

        elif token.kind == "op":
            if len(stack) < 2:
                raise E.SyntaxError(f"Missing operand for '{token.value}'", code="3102")
            right, right_depth = stack.pop()
            left, left_depth = stack.pop()

            if token.value == "^":
                stack.append((Power(left, _exponent_value(right)), left_depth + 1))
            else:
                depth = _binop_depth(left, left_depth, token.value, right_depth)
                stack.append((BinOp(left, token.value, right), depth))

        else:
            raise E.SyntaxError(f"Unexpected token: {token}", code="3102")

        if stack[-1][1] > MAX_NESTING:
            raise E.SyntaxError(f"Expression nested too deeply (max. depth {MAX_NESTING})", code="3106")

    if len(stack) != 1:
        raise E.SyntaxError("Malformed expression.", code="3102")

    if debug == True:
        print("Tree: " + repr(stack[0][0]))

    return stack[0][0]


def parse(problem):
    """Tokenize and parse a string into an Expression tree."""
    if problem.strip() == "":
        raise E.SyntaxError("Empty input.", code="3000")
    return from_postfix(to_postfix(tokenize(problem)))

# Tokenizer.py
"""""
Lexer: converts a raw input string into a flat list of Token objects.

- Integers are read greedily. '<int>/<int>' written without spaces is a single
  rational literal ('1/2'), any other '/' is a division operator.
- 'π' and the word 'pi' (any case) are the constant π, '√' is the function sqrt.
- Identifiers are lower-cased. Anything else is a LexicalError.
"""""

import fractions

from . import error as E

# Debug toggle for optional prints in this module
debug = False

OPERATORS = ["+", "-", "*", "/", "^"]
DIGITS = "0123456789"


class Token:
    """One lexical unit. kind is one of: number, pi, ident, op, (, )"""
    def __init__(self, kind, value=None):
        self.kind = kind
        self.value = value

    def is_op(self, operator=None):
        return self.kind == "op" and (operator is None or self.value == operator)

    def __eq__(self, other):
        return isinstance(other, Token) and (self.kind, self.value) == (other.kind, other.value)

    def __hash__(self):
        return hash((self.kind, self.value))

    def __str__(self):
        if self.kind == "number":
            return str(self.value)
        if self.kind == "pi":
            return "π"
        if self.kind in ("(", ")"):
            return self.kind
        return str(self.value)

    def __repr__(self):
        return f"Token({self.kind!r}, {self.value!r})"


def _read_digits(problem, b):
    """Return (digit_string, index after the last digit)."""
    start = b
    while b < len(problem) and problem[b] in DIGITS:
        b += 1
    return problem[start:b], b


def _is_identifier_start(current_char):
    return current_char.isascii() and (current_char.isalpha() or current_char == "_")


def _is_identifier_part(current_char):
    return current_char.isascii() and (current_char.isalnum() or current_char == "_")


def tokenize(problem):
    """Convert raw input string into a token list (numbers, π, identifiers, operators, parens)."""
    tokens = []
    b = 0

    while b < len(problem):
        current_char = problem[b]

        # --- Whitespace (ignored) ---
        if current_char.isspace():
            b += 1

        # --- Numbers: integer, or literal fraction n/d ---
        elif current_char in DIGITS:
            numerator, b = _read_digits(problem, b)

            if b < len(problem) and problem[b] == ".":
                raise E.LexicalError(f"Invalid number: '{numerator}.' (decimal points are not supported, write a fraction)", code="3002")

            # A fraction literal needs the denominator right after '/'
            if b + 1 < len(problem) and problem[b] == "/" and problem[b + 1] in DIGITS:
                denominator, b = _read_digits(problem, b + 1)
                if int(denominator) == 0:
                    raise E.LexicalError(f"Division by zero in the fraction {numerator}/{denominator}", code="3003")
                tokens.append(Token("number", fractions.Fraction(int(numerator), int(denominator))))
            else:
                tokens.append(Token("number", fractions.Fraction(int(numerator))))

        # --- Operators ---
        elif current_char in OPERATORS:
            tokens.append(Token("op", current_char))
            b += 1

        # --- Parentheses ---
        elif current_char == "(" or current_char == ")":
            tokens.append(Token(current_char))
            b += 1

        # --- Constant π and the root sign ---
        elif current_char == "π":
            tokens.append(Token("pi"))
            b += 1
        elif current_char == "√":
            tokens.append(Token("ident", "sqrt"))
            b += 1

        # --- Identifiers (functions, pi, variables) ---
        elif _is_identifier_start(current_char):
            start = b
            while b < len(problem) and _is_identifier_part(problem[b]):
                b += 1
            word = problem[start:b].lower()
            if word == "pi":
                tokens.append(Token("pi"))
            else:
                tokens.append(Token("ident", word))

        else:
            raise E.LexicalError(f"Unexpected character: '{current_char}'", code="3001")

    if debug == True:
        print("Tokens: " + format_tokens(tokens))

    return tokens


def format_tokens(tokens):
    """Space separated dump of a token list, used by the derivation."""
    return " ".join(str(token) for token in tokens)

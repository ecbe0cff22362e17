# MathEngine.py
"""""
Core calculation engine for the exact calculator.

Pipeline
--------
1) Tokenizer: converts a raw input string into a flat list of tokens.
2) Parser: shunting-yard to postfix, then postfix to an Expression tree.
3) Simplifier: local, value preserving rewrites.
4) ScientificEngine: exact sin/cos/tan of special angles (with a proof line per match).
5) TrigIdentities: bounded rewriting with a few safe identities.
6) Canonicalizer: unique normal form.
7) Formatter: EXACT string.
8) DecimalEngine: truncated decimal reading, unless the result is indéfini or has a variable.
"""""

from . import config_manager as config_manager
from . import error as E
from . import Tokenizer
from . import Parser
from . import Simplifier
from . import ScientificEngine
from . import TrigIdentities
from . import Canonicalizer
from . import Formatter
from . import DecimalEngine
from .Expression import Indefinite, Variable, MAX_STACK, MAX_NODES

# Debug toggle for optional prints in this module
debug = False

PIPELINE_NOTE = ("Pipeline: tokens → postfix → tree → simplify → special angles → re-simplify"
                 " → trig identities → re-simplify → canonical form → EXACT → decimal reading.")


class Derivation:
    """Human readable trace of one calculation. Display only, never parsed back."""
    def __init__(self, tokens="", postfix="", before="", after="", pipeline=PIPELINE_NOTE, proof=""):
        self.tokens = tokens
        self.postfix = postfix
        self.before = before
        self.after = after
        self.pipeline = pipeline
        self.proof = proof

    def as_text(self):
        lines = [
            f"Tokens:  {self.tokens}",
            f"Postfix: {self.postfix}",
            f"Before:  {self.before}",
            f"After:   {self.after}",
            self.pipeline
        ]
        if self.proof:
            lines.append("Proof:")
            lines.append(self.proof)
        return "\n".join(lines)

    def __repr__(self):
        return (f"Derivation(tokens={self.tokens!r}, postfix={self.postfix!r}, before={self.before!r}, "
                f"after={self.after!r}, proof={self.proof!r})")


# -----------------------------
# Free variable detection
# -----------------------------

def contains_variable(expr):
    """True if a Variable leaf exists. Explicit stack; too large a tree counts as True."""
    stack = [expr]
    visited = 0

    while stack:
        node = stack.pop()
        visited += 1
        if visited > MAX_NODES or len(stack) > MAX_STACK:
            # Too big to be sure: block the decimal reading
            return True
        if isinstance(node, Variable):
            return True
        stack.extend(node.children())

    return False


# -----------------------------
# Public entry point
# -----------------------------

def calculate(problem, digits=None):
    """Main API: returns (exact, decimal or None, Derivation). Raises E.MathError on failure."""
    if digits is None:
        digits = config_manager.load_setting_value("decimal_places")
    digits = DecimalEngine.clamp_digits(digits)

    try:
        text = problem.strip()
        if text == "":
            raise E.SyntaxError("Empty input.", code="3000")

        # --- 1. Tokens and postfix ---
        tokens = Tokenizer.tokenize(text)
        postfix = Parser.to_postfix(tokens)

        # --- 2. Tree ---
        tree = Parser.from_postfix(postfix)

        # --- 3. Simplify, special angles (re-simplified inside), identities ---
        proof = []
        expr = Simplifier.simplify(tree)
        expr = ScientificEngine.apply_special_angles(expr, proof)
        expr = Simplifier.simplify(TrigIdentities.rewrite_identities(expr))

        # --- 4. Canonical form and EXACT ---
        canonical = Canonicalizer.canonicalize(expr)
        exact = Formatter.format_exact(canonical)

        if debug == True:
            print("Canonical: " + repr(canonical))

        # --- 5. Decimal reading ---
        if isinstance(canonical, Indefinite) or contains_variable(canonical):
            decimal = None
        else:
            decimal = DecimalEngine.evaluate_decimal(canonical, digits)

        derivation = Derivation(
            tokens=Tokenizer.format_tokens(tokens),
            postfix=Tokenizer.format_tokens(postfix),
            before=Formatter.format_pretty(tree),
            after=Formatter.format_pretty(canonical),
            proof="\n".join(proof)
        )
        return exact, decimal, derivation

    # Pathological nesting that still got through the parser's depth limit
    except RecursionError:
        raise E.CalculationError("Expression nested too deeply.", code="3106", equation=problem)
    # Re-raise our domain errors after attaching the source equation
    except E.MathError as e:
        e.equation = problem
        raise e
    # Convert unexpected Python exceptions to our unified error type
    except Exception as e:
        raise E.MathError(message=f"{type(e).__name__}: {e}", code="9999", equation=problem)


def test_main():
    """Simple REPL-like runner for manual testing of the engine."""
    print("Enter the problem: ")
    problem = input()
    try:
        exact, decimal, derivation = calculate(problem)
    except E.MathError as e:
        print(f"Error {e.code}: {E.ERROR_MESSAGES.get(e.code, '')}{e.message}")
        return
    print("EXACT: " + exact)
    print("Decimal: " + (decimal if decimal is not None else "-"))
    print(derivation.as_text())


if __name__ == "__main__":
    # Allow running this module directly for quick CLI tests:
    #   python -m ExactCalc.MathEngine
    test_main()

# ui_state.py
"""""
State of the calculator window, without any Qt code.

Holds the entry text, the displayed results and the precision. The window (UI.py) only
calls these actions and redraws. No mathematics happens here apart from handing the
entry to MathEngine.calculate in evaluate().

Buttons
-------
- C   : clear_entry    (entry only)
- CLR : clear_results  (EXACT, decimal, error, derivation)
- AC  : reset          (everything, precision back to the default)
"""""

from . import config_manager as config_manager
from . import error as E
from . import MathEngine as MathEngine
from .DecimalEngine import clamp_digits

# Kinds accepted by CalculatorState.insert
DIGIT = "digit"
WORD = "word"
FUNC = "func"
OP = "op"
OPEN_PAREN = "open_paren"
CLOSE_PAREN = "close_paren"

# Removed in one go by the smart backspace
BACKSPACE_TOKENS = ["sqrt(", "sin(", "cos(", "tan(", "pi"]


def default_digits():
    value = config_manager.load_setting_value("decimal_places")
    try:
        return clamp_digits(value)
    except (TypeError, ValueError):
        return 20


class CalculatorState:

    def __init__(self, digits=None):
        self.entry = ""
        self.exact = ""
        self.decimal = ""
        self.error = ""
        self.decimal_available = False
        self.derivation = MathEngine.Derivation(pipeline="")
        self.digits = default_digits() if digits is None else clamp_digits(digits)

    # --- Buttons ---

    def reset(self):
        """AC: clear everything, precision back to the default."""
        self.entry = ""
        self.clear_results()
        self.digits = default_digits()

    def clear_entry(self):
        """C: only the entry."""
        self.entry = ""

    def clear_results(self):
        """CLR: results, error and derivation. The entry stays."""
        self.exact = ""
        self.decimal = ""
        self.error = ""
        self.decimal_available = False
        self.derivation = MathEngine.Derivation(pipeline="")

    def set_error(self, message):
        # The last EXACT stays visible, the decimal reading and the derivation are no longer valid
        self.error = message
        self.decimal = ""
        self.decimal_available = False
        self.derivation = MathEngine.Derivation(pipeline="")

    def set_results(self, exact, decimal, derivation):
        self.error = ""
        self.exact = exact
        self.derivation = derivation
        if decimal is not None:
            self.decimal_available = True
            self.decimal = decimal
        else:
            self.decimal_available = False
            self.decimal = ""

    def set_digits(self, digits):
        self.digits = clamp_digits(digits)

    # --- Editing the entry ---

    def _last_visible_char(self):
        stripped = self.entry.rstrip()
        return stripped[-1] if stripped else ""

    def insert(self, text, kind):
        """Append text to the entry with the spacing rules of its kind."""
        if kind == CLOSE_PAREN:
            self.entry = self.entry.rstrip(" ") + text

        elif kind == OPEN_PAREN or kind == FUNC:
            last = self._last_visible_char()
            if last and ((last.isascii() and last.isalnum()) or last == ")"):
                self.entry += " "
            self.entry += text

        elif kind == OP:
            self.entry = self.entry.rstrip(" ")
            if self.entry:
                self.entry += " "
            self.entry += text + " "

        elif kind == DIGIT:
            self.entry += text

        elif kind == WORD:
            if self.entry and not self.entry[-1].isspace():
                last = self._last_visible_char()
                if (last.isascii() and last.isdigit()) or last == ")":
                    self.entry += " "
            self.entry += text

        else:
            raise ValueError(f"Unknown insert kind: {kind}")

    def backspace(self):
        """Remove the last character, or a whole 'sqrt(' / 'sin(' / 'cos(' / 'tan(' / 'pi'."""
        if not self.entry:
            return
        self.entry = self.entry.rstrip(" ")

        for token in BACKSPACE_TOKENS:
            if self.entry.endswith(token):
                self.entry = self.entry[:-len(token)].rstrip(" ")
                return

        self.entry = self.entry[:-1].rstrip(" ")

    # --- Evaluation ---

    def evaluate(self):
        """Run the entry through MathEngine and store the outcome. Returns True on success."""
        problem = self.entry.strip()
        if problem == "":
            self.set_error(E.ERROR_MESSAGES["4000"])
            return False

        try:
            exact, decimal, derivation = MathEngine.calculate(problem, self.digits)
        except E.MathError as e:
            self.set_error(str(e))
            return False

        self.set_results(exact, decimal, derivation)
        return True

    def apply_result(self, result):
        """Store a result coming back from the worker thread: a tuple or an E.MathError."""
        if isinstance(result, E.MathError):
            self.set_error(str(result))
            return False
        exact, decimal, derivation = result
        self.set_results(exact, decimal, derivation)
        return True

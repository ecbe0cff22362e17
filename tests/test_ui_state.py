import pytest

from ExactCalc import error as E
from ExactCalc import ui_state
from ExactCalc.ui_state import (CalculatorState, DIGIT, WORD, FUNC, OP, OPEN_PAREN, CLOSE_PAREN,
                                default_digits)


@pytest.fixture
def settings(monkeypatch):
    values = {"decimal_places": 12}
    monkeypatch.setattr(ui_state.config_manager, "load_setting_value", lambda key: values.get(key, 0))
    return values


def test_default_digits_from_settings(settings):
    assert CalculatorState().digits == 12
    settings["decimal_places"] = 999
    assert default_digits() == 200
    settings["decimal_places"] = "many"
    assert default_digits() == 20


def test_insert_spacing():
    state = CalculatorState(digits=5)
    state.insert("1", DIGIT)
    state.insert("2", DIGIT)
    state.insert("+", OP)
    assert state.entry == "12 + "
    state.insert("sin(", FUNC)
    state.insert("pi", WORD)
    state.insert("/", OP)
    state.insert("4", DIGIT)
    state.insert(")", CLOSE_PAREN)
    assert state.entry == "12 + sin(pi / 4)"


def test_insert_separates_words_and_calls():
    state = CalculatorState(digits=5)
    state.insert("2", DIGIT)
    state.insert("pi", WORD)
    assert state.entry == "2 pi"
    state.insert("(", OPEN_PAREN)
    assert state.entry == "2 pi ("

    state = CalculatorState(digits=5)
    state.insert("-", OP)
    state.insert("3", DIGIT)
    assert state.entry == "- 3"


def test_insert_unknown_kind():
    with pytest.raises(ValueError):
        CalculatorState(digits=5).insert("?", "mystery")


def test_backspace_removes_whole_tokens():
    state = CalculatorState(digits=5)
    state.entry = "1 + sin("
    state.backspace()
    assert state.entry == "1 +"
    state.backspace()
    assert state.entry == "1"
    state.backspace()
    assert state.entry == ""
    state.backspace()
    assert state.entry == ""

    state.entry = "2*pi"
    state.backspace()
    assert state.entry == "2*"


def test_evaluate_success():
    state = CalculatorState(digits=5)
    state.entry = "1/2 + 1/3"
    assert state.evaluate()
    assert state.exact == "5/6"
    assert state.decimal == "0.83333"
    assert state.decimal_available
    assert state.error == ""
    assert state.derivation.after == "5/6"


def test_evaluate_indefinite():
    state = CalculatorState(digits=5)
    state.entry = "tan(pi/2)"
    assert state.evaluate()
    assert state.exact == "indéfini"
    assert not state.decimal_available
    assert state.decimal == ""


def test_error_keeps_previous_exact():
    state = CalculatorState(digits=5)
    state.entry = "1/2"
    state.evaluate()
    state.entry = "1 $"
    assert not state.evaluate()
    assert state.exact == "1/2"
    assert state.error == "Unexpected character: '$'"
    assert state.decimal == ""
    assert not state.decimal_available
    assert state.derivation.tokens == ""


def test_empty_entry():
    state = CalculatorState(digits=5)
    state.entry = "   "
    assert not state.evaluate()
    assert state.error == E.ERROR_MESSAGES["4000"]


def test_clear_buttons(settings):
    state = CalculatorState(digits=5)
    state.entry = "sqrt(2)"
    state.evaluate()

    state.clear_entry()
    assert state.entry == ""
    assert state.exact == "√2"

    state.entry = "x"
    state.clear_results()
    assert state.entry == "x"
    assert state.exact == ""
    assert state.decimal == ""

    state.set_digits(3)
    state.reset()
    assert state.entry == ""
    assert state.digits == 12


def test_set_digits_is_clamped():
    state = CalculatorState(digits=5)
    state.set_digits(500)
    assert state.digits == 200
    state.set_digits(-1)
    assert state.digits == 0


def test_apply_result_from_worker():
    state = CalculatorState(digits=5)
    error = E.CalculationError("Division by zero", code="3200", equation="1 / 0")
    assert not state.apply_result(error)
    assert state.error == "Division by zero"

    derivation = ui_state.MathEngine.Derivation(after="2")
    assert state.apply_result(("2", "2.00000", derivation))
    assert state.exact == "2"
    assert state.decimal == "2.00000"
    assert state.error == ""

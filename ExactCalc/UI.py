# UI.py
"""""PySide6 user interface for the exact calculator.

Structure
---------
- CalculatorWindow: entry line, button pad, precision box, EXACT / decimal / derivation panes
- SettingsDialog: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Forward every button to ui_state.CalculatorState (no mathematics in this file)
- Dispatch the entry to MathEngine in a worker thread
- Render results and show MathEngine errors as dialogs
- Clipboard copy of the EXACT result (pyperclip)


Responsibilities (Settings)
---------------------------
- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input (decimal places between 0 and 200)
- Save and apply theme changes immediately


Threading Note
--------------
Evaluation is executed off the UI thread in Worker(QObject), so the UI can still handle events like resizing.
Results (or errors) are emitted via a Qt signal and handled back in the UI.
"""""

from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QObject, Signal
import sys
import threading
import pyperclip
from . import error as E  # Imports error.py as a module
from . import config_manager as config_manager  # Imports config_manager.py as a module
from . import MathEngine as MathEngine  # Imports MathEngine.py as a module
from . import ui_state
from .DecimalEngine import MAX_DIGITS


class Worker(QObject):
    """""

    This Class is always a seperate thread, responsible for transmitting the problem to MathEngine.py
    and emits a Signal when the calculation is done / failed back to the Calculator UI for processing

    """""

    job_finished = Signal(object, str)

    def __init__(self, problem, digits):
        super().__init__()
        self.data = problem
        self.digits = digits

    def run_Calc(self):

        try:
            # --- 1. Start Calculation ---
            result = MathEngine.calculate(self.data, self.digits)

            # --- 2. Send Success Signal ---
            self.job_finished.emit(result, self.data)

        except E.MathError as e:
            # --- 3. Send Math Error Signal ---
            self.job_finished.emit(e, self.data)

        except Exception as e:
            # --- 4. Send Critical Error Signal ---
            critical_error = E.MathError(
                message=f"Unexpected crash: {e}",
                code="9999",
                equation=self.data
            )
            self.job_finished.emit(critical_error, self.data)


class SettingsDialog(QtWidgets.QDialog):
    """""

    Settings window. Boolean settings become checkboxes, integer settings become input fields.

    """""

    settings_saved = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        # --- 1. Window Setup ---
        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(320, 180)
        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            # --- 3a. Checkbox Builder (for Boolean settings) ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- 3b. Input Field Builder (for Integer settings) ---
            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(f"{description} (0-{MAX_DIGITS}):")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))
                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            # --- 1. Handle Checkboxes ---
            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            # --- 2. Handle Input Fields (like 'decimal_places') ---
            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()
                if new_value_str == "":
                    continue

                try:
                    new_value_int = int(new_value_str)
                    if key_value == "decimal_places" and not 0 <= new_value_int <= MAX_DIGITS:
                        raise ValueError(f"'{new_value_int}' is out of range (0-{MAX_DIGITS}).")
                except ValueError as e:
                    QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                                   f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                    return  # Stop saving!

                setting_value_list[key_value] = new_value_int

        # --- 3. Write to File ---
        try:
            config_manager.save_setting(setting_value_list)
        except E.ConfigError as e:
            QtWidgets.QMessageBox.critical(self, "Error",
                                           f"Error {e.code}: {E.ERROR_MESSAGES.get(e.code, '')}{e.message}")
            return

        self.settings_saved.emit()
        self.accept()

    def update_darkmode(self):
        if self.setting_value_list.get("darkmode") == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class CalculatorWindow(QtWidgets.QWidget):

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")

        # --- 2. Instance State ---
        self.state = ui_state.CalculatorState()
        self.thread_active = False
        self.button_objects = {}

        # --- 3. Window Setup ---
        self.setWindowTitle("Exact Calculator")
        self.resize(520, 640)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        # --- 4. Entry ---
        self.entry = QtWidgets.QLineEdit()
        self.entry.setPlaceholderText("e.g. sin(pi/4) + 1/3")
        font = self.entry.font()
        font.setPointSize(18)
        self.entry.setFont(font)
        self.entry.textEdited.connect(self.handle_text_edited)
        self.entry.returnPressed.connect(self.start_calculation)
        main_v_layout.addWidget(self.entry)

        # --- 5. Button Grid ---
        button_grid = QtWidgets.QGridLayout()
        main_v_layout.addLayout(button_grid)

        # (label, text to insert, kind, row, column)
        self.buttons = [
            ('⚙️', None, None, 0, 0), ('📋', None, None, 0, 1), ('C', None, None, 0, 2), ('CLR', None, None, 0, 3), ('AC', None, None, 0, 4),
            ('π', "pi", ui_state.WORD, 1, 0), ('√', "sqrt(", ui_state.FUNC, 1, 1), ('(', "(", ui_state.OPEN_PAREN, 1, 2), (')', ")", ui_state.CLOSE_PAREN, 1, 3), ('<', None, None, 1, 4),
            ('sin', "sin(", ui_state.FUNC, 2, 0), ('7', "7", ui_state.DIGIT, 2, 1), ('8', "8", ui_state.DIGIT, 2, 2), ('9', "9", ui_state.DIGIT, 2, 3), ('/', "/", ui_state.OP, 2, 4),
            ('cos', "cos(", ui_state.FUNC, 3, 0), ('4', "4", ui_state.DIGIT, 3, 1), ('5', "5", ui_state.DIGIT, 3, 2), ('6', "6", ui_state.DIGIT, 3, 3), ('*', "*", ui_state.OP, 3, 4),
            ('tan', "tan(", ui_state.FUNC, 4, 0), ('1', "1", ui_state.DIGIT, 4, 1), ('2', "2", ui_state.DIGIT, 4, 2), ('3', "3", ui_state.DIGIT, 4, 3), ('-', "-", ui_state.OP, 4, 4),
            ('x', "x", ui_state.WORD, 5, 0), ('y', "y", ui_state.WORD, 5, 1), ('0', "0", ui_state.DIGIT, 5, 2), ('^', "^", ui_state.OP, 5, 3), ('+', "+", ui_state.OP, 5, 4),
            ('⏎', None, None, 6, 4)
        ]

        for label, to_insert, kind, row, col in self.buttons:
            button = QtWidgets.QPushButton(label)
            button.clicked.connect(lambda checked=False, l=label, t=to_insert, k=kind: self.handle_button_press(l, t, k))
            button_grid.addWidget(button, row, col)
            self.button_objects[label] = button

        self.button_objects['⏎'].setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")

        # --- 6. Precision ---
        precision_row = QtWidgets.QHBoxLayout()
        precision_row.addWidget(QtWidgets.QLabel("Decimal places:"))
        self.digits_box = QtWidgets.QSpinBox()
        self.digits_box.setRange(0, MAX_DIGITS)
        self.digits_box.setValue(self.state.digits)
        self.digits_box.valueChanged.connect(self.state.set_digits)
        precision_row.addWidget(self.digits_box)
        precision_row.addStretch(1)
        button_grid.addLayout(precision_row, 6, 0, 1, 4)

        # --- 7. Results ---
        self.exact_label = QtWidgets.QLabel()
        self.exact_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        exact_font = self.exact_label.font()
        exact_font.setPointSize(20)
        exact_font.setBold(True)
        self.exact_label.setFont(exact_font)

        self.decimal_label = QtWidgets.QLabel()
        self.decimal_label.setWordWrap(True)
        self.decimal_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)

        self.error_label = QtWidgets.QLabel()
        self.error_label.setStyleSheet("color: #d9534f;")

        self.derivation_view = QtWidgets.QPlainTextEdit()
        self.derivation_view.setReadOnly(True)
        self.derivation_view.setFont(QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.SystemFont.FixedFont))

        main_v_layout.addWidget(QtWidgets.QLabel("EXACT"))
        main_v_layout.addWidget(self.exact_label)
        main_v_layout.addWidget(QtWidgets.QLabel("Decimal reading (truncated)"))
        main_v_layout.addWidget(self.decimal_label)
        main_v_layout.addWidget(self.error_label)
        main_v_layout.addWidget(self.derivation_view, 1)

        self.update_darkmode()
        self.refresh()

    # --- Input ---

    def handle_text_edited(self, text):
        self.state.entry = text

    def handle_button_press(self, label, to_insert, kind):
        if to_insert is not None:
            self.state.insert(to_insert, kind)
        elif label == 'C':
            self.state.clear_entry()
        elif label == 'CLR':
            self.state.clear_results()
        elif label == 'AC':
            self.state.reset()
            self.digits_box.setValue(self.state.digits)
        elif label == '<':
            self.state.backspace()
        elif label == '📋':
            if self.state.exact:
                pyperclip.copy(self.state.exact)
        elif label == '⚙️':
            self.open_settings()
        elif label == '⏎':
            self.start_calculation()
            return
        self.refresh()
        self.entry.setFocus()

    # --- Calculation ---

    def start_calculation(self):
        if self.thread_active:
            print("ERROR: A calculation is already running!")  # 4001
            return

        problem = self.state.entry.strip()
        if problem == "":
            self.state.set_error(E.ERROR_MESSAGES["4000"])
            self.refresh()
            return

        self.thread_active = True
        self.update_return_button()
        QtWidgets.QApplication.processEvents()  # Force UI update *before* starting thread

        worker_instance = Worker(problem, self.state.digits)
        worker_instance.job_finished.connect(self.Calc_result)
        my_thread = threading.Thread(target=worker_instance.run_Calc)
        my_thread.start()

    def Calc_result(self, result, equation):
        self.thread_active = False
        self.update_return_button()

        self.state.apply_result(result)
        self.refresh()

        if isinstance(result, E.MathError):
            error_box = QtWidgets.QMessageBox(self)
            error_box.setIcon(QtWidgets.QMessageBox.Critical)
            error_box.setWindowTitle("Calculation error")
            error_box.setText(f"Error {result.code}: {E.ERROR_MESSAGES.get(result.code, 'Unknown error')}")
            error_box.setInformativeText(f"Details: {result.message}\nEquation: {result.equation}")
            error_box.setStandardButtons(QtWidgets.QMessageBox.Ok)
            error_box.setStyleSheet(self.get_message_box_stylesheet())
            error_box.exec()

    # --- Rendering ---

    def refresh(self):
        if self.entry.text() != self.state.entry:
            self.entry.setText(self.state.entry)
        self.exact_label.setText(self.state.exact)
        self.decimal_label.setText(self.state.decimal if self.state.decimal_available else "-")
        self.error_label.setText(self.state.error)

        if self.setting_value_list.get("show_derivation") == True:
            derivation = self.state.derivation
            self.derivation_view.setPlainText(derivation.as_text() if derivation.tokens else "")
            self.derivation_view.show()
        else:
            self.derivation_view.hide()

    def update_return_button(self):
        return_button = self.button_objects.get('⏎')
        if not return_button:
            return
        if self.thread_active == True:
            return_button.setStyleSheet("background-color: #FF0000; color: white; font-weight: bold;")
            return_button.setText("X")
        else:
            return_button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
            return_button.setText("⏎")
        return_button.update()

    def update_darkmode(self):
        if self.setting_value_list.get("darkmode") == True:
            for text, button in self.button_objects.items():
                if text != '⏎':
                    button.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
            self.setStyleSheet("background-color: #121212; color: white;")
            self.entry.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
        else:
            for text, button in self.button_objects.items():
                if text != '⏎':
                    button.setStyleSheet("font-weight: normal;")
            self.setStyleSheet("")
            self.entry.setStyleSheet("font-weight: bold;")
        self.update_return_button()

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()

        # Reload settings after the dialog closes, so darkmode / derivation changes apply
        self.setting_value_list = config_manager.load_setting_value("all")
        self.update_darkmode()

    def get_message_box_stylesheet(self):
        if self.setting_value_list.get("darkmode") == True:
            return """
                QMessageBox {
                    background-color: #121212;
                    color: white;
                }
                QLabel {
                    color: white;
                }
                QPushButton {
                    background-color: #2e2e2e;
                    color: white;
                    border: 1px solid #444444;
                    padding: 5px 15px;
                }
            """
        else:
            return ""


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

# Main.py
""""" Entry point for the Exact Calculator.

   Responsibilities:
   - Detect run mode (script vs PyInstaller.exe)
   - Verify required files exist in development mode
   - Load configuration, apply the debug toggle and start the Qt GUI

"""""
import sys
from pathlib import Path
from ExactCalc import config_manager as config_manager


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent

REQUIRED_MODULES = [
    "UI.py",
    "ui_state.py",
    "MathEngine.py",
    "Tokenizer.py",
    "Parser.py",
    "Expression.py",
    "Simplifier.py",
    "ScientificEngine.py",
    "TrigIdentities.py",
    "Canonicalizer.py",
    "Formatter.py",
    "DecimalEngine.py",
    "config_manager.py",
    "error.py",
    "config.json",
    "ui_strings.json"
]


def check_files_exist():

    """
      Fail fast in development if required files are missing / moved / renamed.

      In production (.exe) the files are embedded by the bundler, so this check is skipped.
    """

    package_dir = PROJECT_ROOT / "ExactCalc"

    missing_files = []
    for file_name in REQUIRED_MODULES:
        if not (package_dir / file_name).exists():
            missing_files.append(file_name)

    if missing_files:
        print("Error: The following files are missing or in the wrong location:")
        for file_name in missing_files:
            print(f"- {file_name}")
        sys.exit(1)


def apply_debug_setting(enabled):
    """Switch the print tracing of every engine module on or off."""
    from ExactCalc import Tokenizer, Parser, ScientificEngine, TrigIdentities, DecimalEngine, MathEngine

    for module in (Tokenizer, Parser, ScientificEngine, TrigIdentities, DecimalEngine, MathEngine):
        module.debug = enabled


def main():

    """
    Load configuration and start the GUI.
    - Keep this thin: no business logic here.
    """

    all_settings = config_manager.load_setting_value("all")
    print("Config loaded:", all_settings)
    apply_debug_setting(all_settings.get("debug") == True)

    # Imported here so a missing PySide6 fails after the file check, not before
    from ExactCalc import UI as UI

    # Delegate control to the UI layer; the UI owns the event loop.
    UI.main()


if __name__ == "__main__":
    # Two explicit modes aid debugging & packaging clarity.
    is_running_as_exe = getattr(sys, 'frozen', False)

    if not is_running_as_exe:
        print("Developer Mode: Checking file paths...")
        check_files_exist()
    else:
        print("Production mode (.exe) is starting...")
    main()

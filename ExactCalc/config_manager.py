# config_manager.py
import json
from pathlib import Path

from . import error as E

config_json = Path(__file__).resolve().parent / "config.json"
ui_strings = Path(__file__).resolve().parent / "ui_strings.json"

# Used whenever config.json is missing a key or cannot be read at all
DEFAULT_SETTINGS = {
    "decimal_places": 20,
    "darkmode": False,
    "show_derivation": True,
    "debug": False
}


def _read_json(path):
    try:
        with open(path, 'r', encoding= 'utf-8') as f:
            return json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def load_setting_value(key_value):
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_json(config_json))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value):
    settings_dict = _read_json(ui_strings)

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, "")


def save_setting(settings_dict):
    """Write the full settings dict back to config.json and return it."""
    try:
        with open (config_json, 'w', encoding= 'utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except OSError as e:
        raise E.ConfigError(f"{config_json}: {e}", code="5001")




if __name__ == "__main__":
    print(load_setting_value("decimal_places"))
    print(load_setting_value("all"))
    print(load_setting_description("all"))

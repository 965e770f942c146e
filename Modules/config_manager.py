# config_manager.py
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent.parent / "config.json"
ui_strings = Path(__file__).resolve().parent.parent / "ui_strings.json"

# Used whenever config.json is missing a key (or missing entirely)
DEFAULT_SETTINGS = {
    "angle_mode": "radians",
    "graphing": True,
    "darkmode": False,
    "max_nesting_depth": 64,
    "debug": False,
}


def load_setting_value(key_value):
    try:
        with open(config_json, 'r', encoding= 'utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", config_json, e)
        return {}


    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_settings():
    """Return the full settings dict, with DEFAULT_SETTINGS filling in missing keys."""
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(load_setting_value("all"))
    return settings_dict


def load_setting_description(key_value):
    try:
        with open(ui_strings, 'r', encoding= 'utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", ui_strings, e)
        return {}


    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)




def save_setting(settings_dict):
    try:
        # Serialize before opening: a failed dump must leave config.json intact
        content = json.dumps(settings_dict, indent=4)
        with open (config_json, 'w', encoding= 'utf-8') as f:
            f.write(content)
            return settings_dict

    except (OSError, TypeError, ValueError) as e:
        logger.error("Settings could not be saved: %s", e)
        return{}

import json
from ww.common.logger import log
from ww.common.setup import PATHS
from ww.core.access import Role
from ww.util.misc import now_iso


_SCHEMA_VERSION = 1

#region === Helpers and Paths ===

SETTINGS_PATH = PATHS.current / "settings.json"
# Stand-in for browser local storage, holds the persisted work timer among others
STORAGE_PATH = PATHS.current / "local_storage.json"
# Local copy of the records the app reads and books into
RECORDS_PATH = PATHS.current / "records.json"

# Default values for the settings section.
_SETTINGS_DEFAULTS = {
    "always_on_top": True,
    "confirm_reset": True,
    "start_open": True,
}
# Default values for the signed in profile.
_PROFILE_DEFAULTS = {
    "id": "local-user",
    "name": "Medewerker",
    "email": "",
    "role": Role.FIELD_WORKER.value,
}
# Helper to return a truly fresh, default config.
def build_default_config():
    return {
        "meta": {
            "schema_version": _SCHEMA_VERSION,
            "saved_at": now_iso(),
        },
        "settings": dict(_SETTINGS_DEFAULTS),
        "profile": dict(_PROFILE_DEFAULTS),
    }

# Fills every key of `defaults` missing from section[name], or the whole section if it isn't a dict. Records the
# dotted path of anything it had to default.
def _validate_section(config, name, defaults, defaulted_values):
    if name not in config or not isinstance(config[name], dict):
        defaulted_values.add(name)
        config[name] = dict(defaults)
        return
    for key, default in defaults.items():
        if key not in config[name] or not isinstance(config[name][key], type(default)):
            defaulted_values.add(f"{name}.{key}")
            config[name][key] = default

#endregion === Helpers and Paths ===

#region === Saving and Loading Config ===

# Loads settings.json, filling in defaults for anything missing or mistyped. A missing or unreadable file gives the
# default config.
def load_config(path=None):
    path = path or SETTINGS_PATH
    try:
        if not path.exists():
            log.info(f"No existing settings found at '{path}', loading default config.")
            return build_default_config()

        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise TypeError(f"settings.json holds a {type(config).__name__}, expected an object")
        defaulted_values = set()

        if "meta" not in config or not isinstance(config["meta"], dict):
            defaulted_values.add("meta")
            config["meta"] = {}
        if not isinstance(config["meta"].get("schema_version"), int):
            defaulted_values.add("meta.schema_version")
            config["meta"]["schema_version"] = _SCHEMA_VERSION

        _validate_section(config, "settings", _SETTINGS_DEFAULTS, defaulted_values)
        _validate_section(config, "profile", _PROFILE_DEFAULTS, defaulted_values)

        if defaulted_values:
            log.warning(f"Loaded config from '{path}', but with missing values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded config from '{path}'.")
        return config
    # Fall back to a fresh config in case of error, but warn in log
    except (json.JSONDecodeError, OSError, TypeError, UnicodeDecodeError):
        log.warning(f"Ran into an error while trying to load '{path}', falling back to default config.", exc_info=True)
        return build_default_config()

# Write the given config to disk, stamping meta.saved_at.
def save_config(config, path=None):
    path = path or SETTINGS_PATH
    config.setdefault("meta", {})["saved_at"] = now_iso()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
    log.info(f"Successfully saved config to '{path}'")

#endregion === Saving and Loading Config ===

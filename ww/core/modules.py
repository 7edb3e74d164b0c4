from enum import Enum
from ww.common.logger import log
from ww.core.access import ModulePolicy
from ww.core.errors import WerkWiseError

SETTINGS_COLLECTION = "system_settings"
DEFAULT_CSV_SEPARATOR = ";"
_CSV_SEPARATORS = (",", ";")


class Module(str, Enum):
    INVOICING = "module_invoicing"
    HOURLY_RATES = "module_hourly_rates"
    DAMAGE_REPORTS = "module_damage_reports"
    INVENTORY = "module_inventory"
    NOTIFICATIONS = "module_notifications"
    EMAIL_NOTIFICATIONS = "module_email_notifications"
    TIME_REGISTRATION = "module_time_registration"
    SPECIAL_TOOLS = "module_special_tools"
    FINANCIAL_DASHBOARD = "module_financial_dashboard"


# Everything switched on. Used when no settings row exists yet, and when loading it fails.
def all_enabled():
    return {module.value: True for module in Module}


# The system-wide module switches, read from the single system_settings record.
class SystemSettings:

    def __init__(self, records):
        self._records = records
        self._policy = None
        self._csv_separator = DEFAULT_CSV_SEPARATOR
        self._unsubscribe = None

    @property
    def loaded(self):
        return self._policy is not None

    # Before the first load every module counts as enabled.
    @property
    def policy(self) -> ModulePolicy:
        return self._policy or ModulePolicy.unloaded()

    @property
    def csv_separator(self):
        return self._csv_separator

    def is_module_enabled(self, module):
        return self.policy.is_enabled(module)

    def load(self):
        try:
            rows = self._records.query(SETTINGS_COLLECTION)
        except (WerkWiseError, OSError):
            log.warning("Could not load system settings, enabling every module.", exc_info=True)
            self._apply(None)
            return self.policy

        if not rows:
            log.info("No system settings stored yet, enabling every module.")
        self._apply(rows[0] if rows else None)
        return self.policy

    refresh = load

    # Reloads whenever the settings record changes. Returns a function that stops watching.
    def watch(self):
        if self._unsubscribe is None:
            self._unsubscribe = self._records.subscribe(SETTINGS_COLLECTION, lambda event, row: self.load())
        return self.unwatch

    def unwatch(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _apply(self, row):
        states = all_enabled()
        separator = DEFAULT_CSV_SEPARATOR
        if row is not None:
            # Only switches the row actually carries; anything it lacks stays on
            for module in Module:
                if module.value in row and row[module.value] is not None:
                    states[module.value] = bool(row[module.value])
            if row.get("csv_separator") in _CSV_SEPARATORS:
                separator = row["csv_separator"]
        self._policy = ModulePolicy(states)
        self._csv_separator = separator
        disabled = sorted(k for k, v in states.items() if not v)
        log.debug(f"System settings applied, disabled modules: {', '.join(disabled) or 'none'}")

"""Role and module based access checks for navigation and routes.

Two inputs decide whether something is visible: the fixed role table below,
and the system-wide module switches.  Lacking a permission is a normal
answer, not an error, so nothing in here raises for unknown roles, unknown
tokens or missing module switches.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Role(str, Enum):
    ADMIN = "admin"
    OFFICE_STAFF = "kantoorpersoneel"
    FIELD_WORKER = "medewerker"
    CONTRACTOR = "zzper"
    SUPERUSER = "superuser"

    # Returns the matching Role, or None for anything that isn't one. Never raises.
    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


class Permission(str, Enum):
    VIEW_DASHBOARD = "view_dashboard"
    MANAGE_USERS = "manage_users"
    MANAGE_PROJECTS = "manage_projects"
    MANAGE_INVENTORY = "manage_inventory"
    MANAGE_TOOLS = "manage_tools"
    MANAGE_RETURNS = "manage_returns"
    VIEW_REPORTS = "view_reports"
    VIEW_OWN_REPORTS = "view_own_reports"
    MANAGE_DAMAGE_REPORTS = "manage_damage_reports"
    VIEW_DAMAGE_REPORTS = "view_damage_reports"
    MANAGE_NOTIFICATIONS = "manage_notifications"
    VIEW_NOTIFICATIONS = "view_notifications"
    MANAGE_SETTINGS = "manage_settings"
    VIEW_SETTINGS = "view_settings"
    REGISTER_HOURS = "register_hours"
    APPROVE_HOURS = "approve_hours"
    EXPORT_DATA = "export_data"
    VIEW_PROJECTS = "view_projects"
    VIEW_INVENTORY = "view_inventory"
    VIEW_TOOLS = "view_tools"
    CREATE_TICKETS = "create_tickets"
    VIEW_ALL_TICKETS = "view_all_tickets"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


P = Permission

_ADMIN_PERMISSIONS = frozenset({
    P.VIEW_DASHBOARD, P.MANAGE_USERS, P.MANAGE_PROJECTS, P.MANAGE_INVENTORY, P.MANAGE_TOOLS,
    P.MANAGE_RETURNS, P.VIEW_REPORTS, P.MANAGE_DAMAGE_REPORTS, P.VIEW_DAMAGE_REPORTS,
    P.MANAGE_NOTIFICATIONS, P.VIEW_NOTIFICATIONS, P.MANAGE_SETTINGS, P.VIEW_SETTINGS,
    P.REGISTER_HOURS, P.APPROVE_HOURS, P.EXPORT_DATA, P.VIEW_PROJECTS, P.VIEW_INVENTORY,
    P.VIEW_TOOLS, P.CREATE_TICKETS,
})

_FIELD_PERMISSIONS = frozenset({
    P.VIEW_DASHBOARD, P.REGISTER_HOURS, P.VIEW_NOTIFICATIONS, P.VIEW_DAMAGE_REPORTS,
    P.MANAGE_DAMAGE_REPORTS, P.VIEW_OWN_REPORTS,
})

ROLE_PERMISSIONS = MappingProxyType({
    Role.ADMIN: _ADMIN_PERMISSIONS,
    # Office staff run the day to day, but don't manage users or system settings
    Role.OFFICE_STAFF: _ADMIN_PERMISSIONS - {P.MANAGE_USERS, P.MANAGE_SETTINGS, P.VIEW_SETTINGS},
    Role.FIELD_WORKER: _FIELD_PERMISSIONS,
    Role.CONTRACTOR: _FIELD_PERMISSIONS,
    # Only superusers see every ticket
    Role.SUPERUSER: _ADMIN_PERMISSIONS | {P.VIEW_ALL_TICKETS},
})

_missing_roles = set(Role) - set(ROLE_PERMISSIONS)
if _missing_roles:
    raise RuntimeError(f"ROLE_PERMISSIONS has no entry for: {', '.join(sorted(r.value for r in _missing_roles))}")


def permissions_for(role) -> frozenset:
    resolved = Role.parse(role)
    if resolved is None:
        return frozenset()
    return ROLE_PERMISSIONS[resolved]


def has_permission(role, token) -> bool:
    permission = Permission.parse(token)
    if permission is None:
        return False
    return permission in permissions_for(role)


@dataclass(frozen=True)
class ModulePolicy:
    """Which feature modules are switched on.

    Fails open: a module is disabled only by an explicit ``False``.  Modules
    that are absent, including everything before the settings have loaded,
    count as enabled, so navigation doesn't flash empty during startup.
    """

    states: Mapping = field(default_factory=dict)

    def __post_init__(self):
        normalized = {getattr(k, "value", k): v for k, v in dict(self.states).items()}
        object.__setattr__(self, "states", MappingProxyType(normalized))

    @classmethod
    def unloaded(cls):
        return cls({})

    # Accepts a policy, a plain mapping, or None (nothing loaded yet).
    @classmethod
    def of(cls, modules):
        if isinstance(modules, cls):
            return modules
        if modules is None:
            return cls.unloaded()
        return cls(modules)

    def is_enabled(self, module_key) -> bool:
        if module_key is None:
            return True
        return self.states.get(getattr(module_key, "value", module_key)) is not False


@dataclass(frozen=True)
class NavItem:
    id: str
    label: str
    permission: str
    module: str | None = None


@dataclass(frozen=True)
class NavGroup:
    id: str
    label: str
    items: tuple = ()


def is_item_visible(role, item: NavItem, modules=None) -> bool:
    if not has_permission(role, item.permission):
        return False
    return item.module is None or ModulePolicy.of(modules).is_enabled(item.module)


# Groups trimmed down to their visible items. Groups left with nothing are dropped entirely.
def visible_groups(role, groups, modules=None):
    policy = ModulePolicy.of(modules)
    result = []
    for group in groups:
        items = tuple(item for item in group.items if is_item_visible(role, item, policy))
        if items:
            result.append(NavGroup(group.id, group.label, items))
    return result


class AccessGate:
    """Binds the role checks to the live session and module settings.

    ``session`` needs ``current_role()``; ``settings`` needs a ``policy``
    attribute (see :class:`ww.core.modules.SystemSettings`) and may be None,
    in which case every module counts as enabled.
    """

    def __init__(self, session, settings=None):
        self._session = session
        self._settings = settings

    def current_role(self):
        return Role.parse(self._session.current_role())

    def policy(self) -> ModulePolicy:
        if self._settings is None:
            return ModulePolicy.unloaded()
        return self._settings.policy

    def effective_permissions(self) -> frozenset:
        return permissions_for(self.current_role())

    def has_permission(self, token) -> bool:
        return has_permission(self.current_role(), token)

    # Route guard. Routes without a permission are open to everyone, signed in or not.
    def can_access(self, permission=None) -> bool:
        if permission is None:
            return True
        return self.has_permission(permission)

    def is_item_visible(self, item: NavItem, modules=None) -> bool:
        return is_item_visible(self.current_role(), item, self.policy() if modules is None else modules)

    def visible_groups(self, groups):
        return visible_groups(self.current_role(), groups, self.policy())

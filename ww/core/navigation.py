from ww.core.access import NavGroup, NavItem, Permission as P
from ww.core.modules import Module as M

# The sidebar menu. Each item names the permission needed to see it, and optionally the feature module that has to
# be switched on. Items without a module are always available to anyone with the permission.
MENU_GROUPS = (
    NavGroup("overzicht", "Overzicht", (
        NavItem("dashboard", "Dashboard", P.VIEW_DASHBOARD),
        NavItem("financieel-dashboard", "Financieel Dashboard", P.MANAGE_SETTINGS, M.FINANCIAL_DASHBOARD),
    )),
    NavGroup("werk", "Werk", (
        NavItem("urenregistratie", "Urenregistratie", P.REGISTER_HOURS, M.TIME_REGISTRATION),
        NavItem("projecten", "Projecten", P.VIEW_PROJECTS),
    )),
    NavGroup("voorraad", "Voorraad & Gereedschap", (
        NavItem("voorraad-afboeken", "Voorraad Afboeken", P.VIEW_DASHBOARD, M.INVENTORY),
        NavItem("voorraadbeheer", "Voorraadbeheer", P.MANAGE_SETTINGS, M.INVENTORY),
        NavItem("speciaal-gereedschap", "Speciaal Gereedschap", P.VIEW_TOOLS, M.SPECIAL_TOOLS),
    )),
    NavGroup("meldingen", "Meldingen & Support", (
        NavItem("mijn-notificaties", "Mijn Notificaties", P.REGISTER_HOURS, M.NOTIFICATIONS),
        NavItem("schademeldingen", "Schademeldingen", P.VIEW_DAMAGE_REPORTS, M.DAMAGE_REPORTS),
        NavItem("ticket-omgeving", "Ticket Omgeving", P.CREATE_TICKETS),
        NavItem("tickets-overzicht", "Tickets Overzicht", P.VIEW_ALL_TICKETS),
    )),
    NavGroup("beheer", "Beheer", (
        NavItem("gebruikers", "Gebruikers", P.MANAGE_USERS),
        NavItem("meldingen", "Notificatie Beheer", P.MANAGE_NOTIFICATIONS, M.NOTIFICATIONS),
        NavItem("email-notificaties", "E-mail Notificaties", P.MANAGE_SETTINGS, M.EMAIL_NOTIFICATIONS),
        NavItem("factuur-instellingen", "Factuur Instellingen", P.MANAGE_SETTINGS, M.INVOICING),
        NavItem("instellingen", "Instellingen", P.VIEW_DASHBOARD),
    )),
)

# Groups that start out expanded in the sidebar.
DEFAULT_EXPANDED = ("overzicht", "werk")

def find_item(item_id, groups=MENU_GROUPS):
    for group in groups:
        for item in group.items:
            if item.id == item_id:
                return item
    return None

# The group holding the given item, used to auto-expand the group of the active section.
def group_of(item_id, groups=MENU_GROUPS):
    for group in groups:
        if any(item.id == item_id for item in group.items):
            return group
    return None

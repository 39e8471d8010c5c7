# accounts/permission_defaults.py

ROLE_ADMIN = "Admin"
ROLE_BOOKKEEPER = "Bookkeeper"
ROLE_REPORT_VIEWER = "ReportViewer"

# Access level reported for an authenticated user without any role.
REGISTERED = "Registered"

# Highest first; a user's access level is the first role they hold.
ROLE_NAMES = (ROLE_ADMIN, ROLE_BOOKKEEPER, ROLE_REPORT_VIEWER)

# Levels an admin may hand out through the API.
ASSIGNABLE_LEVELS = (REGISTERED, ROLE_BOOKKEEPER, ROLE_REPORT_VIEWER)

ROLE_DEFAULTS = {
    ROLE_ADMIN: {
        # Chart of accounts
        "accounts.view",
        "accounts.manage",

        # Journal
        "journal.view",
        "journal.create",
        "journal.edit",
        "journal.delete",

        # Income / expense
        "transactions.view",
        "transactions.manage",

        "reports.view",

        # Security
        "users.manage",
    },
    ROLE_BOOKKEEPER: {
        "accounts.view",
        "accounts.manage",

        "journal.view",
        "journal.create",
        "journal.edit",
        "journal.delete",

        "transactions.view",
        "transactions.manage",

        "reports.view",
    },
    ROLE_REPORT_VIEWER: {
        "accounts.view",
        "journal.view",
        "transactions.view",
        "reports.view",
    },
}


def permissions_for_roles(roles) -> frozenset[str]:
    codes: set[str] = set()
    for role in roles:
        codes |= ROLE_DEFAULTS.get(role, set())
    return frozenset(codes)

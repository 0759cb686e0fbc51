# amanah/rbac/roles.py
from .catalog import catalog

ADMIN_ROLE = "admin"

# The admin override grants everything regardless; the full list is seeded
# so the role reads correctly in the administration screens.
ADMIN_PERMISSIONS = catalog.all_permissions()

# Default roles to seed on first run
# Only admin is a system role (is_system=True) and cannot be modified
DEFAULT_ROLES = [
    {
        "name": ADMIN_ROLE,
        "is_system": True,
        "description": "Full access to every resource.",
        "permissions": ADMIN_PERMISSIONS,
    },
    {
        "name": "teller",
        "is_system": False,
        "description": "Front-desk staff handling members and deposits.",
        "permissions": [
            ("dashboard", "access"),
            ("dashboard", "read"),
            ("customers", "read"),
            ("customers", "create"),
            ("customers", "update"),
            ("transactions", "read"),
            ("transactions", "create"),
            ("bank_accounts", "read"),
            ("account_types", "read"),
        ],
    },
    {
        "name": "auditor",
        "is_system": False,
        "description": "Read-only access to financial records and audit trails.",
        "permissions": [
            ("dashboard", "access"),
            ("dashboard", "read"),
            ("transactions", "read"),
            ("bank_accounts", "read"),
            ("account_types", "read"),
            ("reports", "read"),
            ("reports", "export"),
            ("audit_logs", "read"),
            ("audit_logs", "export"),
        ],
    },
]

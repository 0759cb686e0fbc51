# amanah/rbac/permissions.py
"""Static definitions of protected resources and their actions."""

# Available on every resource except the UI-only ones below
UNIVERSAL_CRUD_ACTIONS = [
    {"name": "read", "label": "Read", "description": "View and read information"},
    {"name": "create", "label": "Create", "description": "Create new records"},
    {"name": "update", "label": "Update", "description": "Modify existing records"},
    {
        "name": "delete",
        "label": "Delete",
        "description": "Remove records from the system",
    },
    {
        "name": "manage",
        "label": "Manage",
        "description": "Full management capabilities (all actions)",
    },
    {
        "name": "view",
        "label": "View",
        "description": "View detailed information and reports",
    },
    {"name": "other", "label": "Other", "description": "Other specialized actions"},
]

# These resources only accept their declared actions
UI_SPECIFIC_RESOURCES = frozenset({"ui_menu", "ui_component"})

PERMISSION_RESOURCES = [
    # Core system
    {
        "name": "dashboard",
        "label": "Dashboard",
        "description": "Main dashboard and overview pages",
        "category": "Core System",
        "actions": [
            {
                "name": "access",
                "label": "Access",
                "description": "View dashboard and overview information",
            },
            {
                "name": "view_stats",
                "label": "View Statistics",
                "description": "View dashboard statistics and metrics",
            },
        ],
    },
    {
        "name": "admin",
        "label": "Administration",
        "description": "Administrative functions and panels",
        "category": "Core System",
        "actions": [
            {
                "name": "access",
                "label": "Access",
                "description": "Access administrative panels and functions",
            },
        ],
    },
    # User management
    {
        "name": "users",
        "label": "Users",
        "description": "User accounts and profiles",
        "category": "User Management",
        "actions": [
            {
                "name": "activate",
                "label": "Activate",
                "description": "Activate or deactivate user accounts",
            },
            {
                "name": "reset_password",
                "label": "Reset Password",
                "description": "Force password reset for users",
            },
        ],
    },
    {
        "name": "roles",
        "label": "Roles",
        "description": "User roles and role assignments",
        "category": "User Management",
        "actions": [
            {"name": "assign", "label": "Assign", "description": "Assign roles to users"},
        ],
    },
    {
        "name": "permissions",
        "label": "Permissions",
        "description": "System permissions and access control",
        "category": "User Management",
        "actions": [],
    },
    # Financial management
    {
        "name": "bank_accounts",
        "label": "Bank Accounts",
        "description": "Bank account management",
        "category": "Financial Management",
        "actions": [],
    },
    {
        "name": "account_types",
        "label": "Account Types",
        "description": "Islamic finance account type configurations",
        "category": "Financial Management",
        "actions": [
            {
                "name": "configure",
                "label": "Configure",
                "description": "Configure account type rules and properties",
            },
        ],
    },
    {
        "name": "transactions",
        "label": "Transactions",
        "description": "Financial transactions and transfers",
        "category": "Financial Management",
        "actions": [
            {
                "name": "approve",
                "label": "Approve",
                "description": "Approve pending transactions",
            },
            {
                "name": "reject",
                "label": "Reject",
                "description": "Reject pending transactions",
            },
        ],
    },
    # Reporting
    {
        "name": "reports",
        "label": "Reports",
        "description": "System reports and analytics",
        "category": "Reporting & Analytics",
        "actions": [
            {
                "name": "export",
                "label": "Export",
                "description": "Export reports to various formats",
            },
            {
                "name": "schedule",
                "label": "Schedule",
                "description": "Schedule automated report generation",
            },
        ],
    },
    {
        "name": "analytics",
        "label": "Analytics",
        "description": "Business intelligence and data analytics",
        "category": "Reporting & Analytics",
        "actions": [
            {"name": "export", "label": "Export", "description": "Export analytics data"},
        ],
    },
    # Customers and products
    {
        "name": "customers",
        "label": "Customers",
        "description": "Customer accounts and profiles",
        "category": "Customer Management",
        "actions": [
            {
                "name": "kyc",
                "label": "KYC Management",
                "description": "Manage Know Your Customer processes",
            },
        ],
    },
    {
        "name": "loans",
        "label": "Loans",
        "description": "Islamic finance loan products and applications",
        "category": "Financial Products",
        "actions": [
            {
                "name": "approve",
                "label": "Approve",
                "description": "Approve loan applications",
            },
            {
                "name": "reject",
                "label": "Reject",
                "description": "Reject loan applications",
            },
        ],
    },
    {
        "name": "investments",
        "label": "Investments",
        "description": "Sharia-compliant investment products",
        "category": "Financial Products",
        "actions": [],
    },
    # System configuration
    {
        "name": "settings",
        "label": "System Settings",
        "description": "System configuration and settings",
        "category": "System Configuration",
        "actions": [],
    },
    {
        "name": "audit_logs",
        "label": "Audit Logs",
        "description": "System audit trails and logs",
        "category": "System Configuration",
        "actions": [
            {
                "name": "export",
                "label": "Export",
                "description": "Export audit logs for compliance",
            },
        ],
    },
    # User interface
    {
        "name": "ui_menu",
        "label": "UI Menu",
        "description": "User interface menu access",
        "category": "User Interface",
        "actions": [
            {
                "name": "dashboard",
                "label": "Dashboard Menu",
                "description": "Access to dashboard menu item",
            },
            {
                "name": "admin",
                "label": "Admin Menu",
                "description": "Access to admin menu items",
            },
            {
                "name": "reports",
                "label": "Reports Menu",
                "description": "Access to reports menu item",
            },
            {
                "name": "transactions",
                "label": "Transactions Menu",
                "description": "Access to transactions menu item",
            },
            {
                "name": "analytics",
                "label": "Analytics Menu",
                "description": "Access to analytics menu item",
            },
            {
                "name": "settings",
                "label": "Settings Menu",
                "description": "Access to settings menu item",
            },
        ],
    },
    {
        "name": "ui_component",
        "label": "UI Component",
        "description": "User interface component access",
        "category": "User Interface",
        "actions": [
            {
                "name": "user_profile",
                "label": "User Profile",
                "description": "Access to user profile components",
            },
            {
                "name": "admin_panel",
                "label": "Admin Panel",
                "description": "Access to admin panel components",
            },
            {
                "name": "financial_widgets",
                "label": "Financial Widgets",
                "description": "Access to financial dashboard widgets",
            },
        ],
    },
]

"""
Feature identifiers, staff roles and the default feature set of each role.

Feature IDs are used in:
- role permission records
- the ``require_feature`` route dependency
- frontend feature checks (served by ``GET /role-permissions/features``)

The defaults below are seed data only. Once a company has records they are
never consulted again, so changing a default does not migrate existing
companies.
"""
import enum
from types import MappingProxyType
from typing import Mapping


class StaffRole(str, enum.Enum):
    """Operating-staff roles that carry a permission record."""
    OWNER = "owner"
    MANAGER = "manager"
    CHEF = "chef"
    WAITER = "waiter"
    CASHIER = "cashier"


class UserRole(str, enum.Enum):
    """Roles that can appear on an authenticated user."""
    SUPER_ADMIN = "super_admin"
    OWNER = "owner"
    MANAGER = "manager"
    CHEF = "chef"
    WAITER = "waiter"
    CASHIER = "cashier"


class Feature:
    # Overview & Dashboard
    DASHBOARD = "dashboard"
    REPORTS = "reports"

    # Staff Management
    STAFF_MANAGEMENT = "staff-management"
    ROLE_MANAGEMENT = "role-management"
    ATTENDANCE = "attendance"

    # Menu & Products
    MENU_MANAGEMENT = "menu-management"
    CATEGORIES = "categories"
    QR_MENUS = "qr-menus"

    # Orders & Tables
    ORDER_MANAGEMENT = "order-management"
    DELIVERY_MANAGEMENT = "delivery-management"
    TABLE_MANAGEMENT = "table-management"
    KITCHEN_DISPLAY = "kitchen-display"
    CUSTOMER_DISPLAY = "customer-display"
    POS_SETTINGS = "pos-settings"
    PRINTER_MANAGEMENT = "printer-management"
    DIGITAL_RECEIPTS = "digital-receipts"

    # Customer Management
    CUSTOMER_MANAGEMENT = "customer-management"
    LOYALTY_PROGRAM = "loyalty-program"
    MARKETING = "marketing"

    # AI Features
    AI_MENU_OPTIMIZATION = "ai-menu-optimization"
    AI_CUSTOMER_LOYALTY = "ai-customer-loyalty"

    # Inventory & Suppliers
    INVENTORY = "inventory"
    SUPPLIERS = "suppliers"
    PURCHASE_ORDERS = "purchase-orders"
    WASTAGE_MANAGEMENT = "wastage-management"

    # Financial Management
    EXPENSES = "expenses"
    ACCOUNTING = "accounting"
    WORK_PERIODS = "work-periods"

    # System & Settings
    SETTINGS = "settings"
    BRANCHES = "branches"
    NOTIFICATIONS = "notifications"


FEATURE_CATEGORIES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "overview": (Feature.DASHBOARD, Feature.REPORTS),
    "staff": (Feature.STAFF_MANAGEMENT, Feature.ROLE_MANAGEMENT, Feature.ATTENDANCE),
    "menu": (Feature.MENU_MANAGEMENT, Feature.CATEGORIES, Feature.QR_MENUS),
    "orders": (
        Feature.ORDER_MANAGEMENT,
        Feature.DELIVERY_MANAGEMENT,
        Feature.TABLE_MANAGEMENT,
        Feature.KITCHEN_DISPLAY,
        Feature.CUSTOMER_DISPLAY,
        Feature.POS_SETTINGS,
        Feature.PRINTER_MANAGEMENT,
        Feature.DIGITAL_RECEIPTS,
    ),
    "customers": (Feature.CUSTOMER_MANAGEMENT, Feature.LOYALTY_PROGRAM, Feature.MARKETING),
    "ai_features": (Feature.AI_MENU_OPTIMIZATION, Feature.AI_CUSTOMER_LOYALTY),
    "inventory": (
        Feature.INVENTORY,
        Feature.SUPPLIERS,
        Feature.PURCHASE_ORDERS,
        Feature.WASTAGE_MANAGEMENT,
    ),
    "financial": (Feature.EXPENSES, Feature.ACCOUNTING, Feature.WORK_PERIODS),
    "system": (Feature.SETTINGS, Feature.BRANCHES, Feature.NOTIFICATIONS),
})

ALL_FEATURES: tuple[str, ...] = tuple(
    feature for features in FEATURE_CATEGORIES.values() for feature in features
)


_OWNER_FEATURES = (
    Feature.DASHBOARD,
    Feature.REPORTS,
    Feature.STAFF_MANAGEMENT,
    Feature.ROLE_MANAGEMENT,
    Feature.MENU_MANAGEMENT,
    Feature.CATEGORIES,
    Feature.QR_MENUS,
    Feature.ORDER_MANAGEMENT,
    Feature.TABLE_MANAGEMENT,
    Feature.KITCHEN_DISPLAY,
    Feature.CUSTOMER_MANAGEMENT,
    Feature.LOYALTY_PROGRAM,
    Feature.INVENTORY,
    Feature.SUPPLIERS,
    Feature.PURCHASE_ORDERS,
    Feature.EXPENSES,
    Feature.ACCOUNTING,
    Feature.WORK_PERIODS,
    Feature.SETTINGS,
    Feature.BRANCHES,
    Feature.NOTIFICATIONS,
)

_MANAGER_EXCLUDED = frozenset({
    Feature.ROLE_MANAGEMENT,
    Feature.LOYALTY_PROGRAM,
    Feature.PURCHASE_ORDERS,
    Feature.ACCOUNTING,
    Feature.BRANCHES,
})


DEFAULT_ROLE_FEATURES: Mapping[StaffRole, tuple[str, ...]] = MappingProxyType({
    StaffRole.OWNER: _OWNER_FEATURES,
    StaffRole.MANAGER: tuple(f for f in _OWNER_FEATURES if f not in _MANAGER_EXCLUDED),
    StaffRole.CHEF: (
        Feature.DASHBOARD,
        Feature.MENU_MANAGEMENT,
        Feature.CATEGORIES,
        Feature.KITCHEN_DISPLAY,
        Feature.INVENTORY,
        Feature.PURCHASE_ORDERS,
        Feature.NOTIFICATIONS,
    ),
    StaffRole.WAITER: (
        Feature.DASHBOARD,
        Feature.ORDER_MANAGEMENT,
        Feature.TABLE_MANAGEMENT,
        Feature.CUSTOMER_MANAGEMENT,
        Feature.NOTIFICATIONS,
    ),
    StaffRole.CASHIER: (
        Feature.DASHBOARD,
        Feature.ORDER_MANAGEMENT,
        Feature.CUSTOMER_MANAGEMENT,
        Feature.EXPENSES,
        Feature.WORK_PERIODS,
        Feature.NOTIFICATIONS,
    ),
})


def default_features(role: StaffRole) -> list[str]:
    """Return a fresh copy of the default feature list for ``role``."""
    return list(DEFAULT_ROLE_FEATURES[StaffRole(role)])


def parse_staff_role(role: str | None) -> StaffRole | None:
    """Map a role string (any case) to a StaffRole, or None if it has no record."""
    if not role:
        return None
    try:
        return StaffRole(role.lower())
    except ValueError:
        return None

"""Sidebar menu tree and its permission filter."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from navigation.capabilities import capabilities_for_user


@dataclass(frozen=True)
class MenuItem:
    id: str
    label: str
    icon: str
    href: str = ""
    capability: Optional[str] = None
    children: Tuple["MenuItem", ...] = ()

    @property
    def has_children(self) -> bool:
        return bool(self.children)


SIDEBAR_MENU: Tuple[MenuItem, ...] = (
    MenuItem("dashboard", "Dashboard", "dashboard", "/dashboard", "VIEW_DASHBOARD"),
    MenuItem(
        "inventory", "Inventory", "package",
        children=(
            MenuItem("products", "Produk", "tag", "/inventory/products", "MANAGE_PRODUCTS"),
            MenuItem(
                "stock-movements", "Pergerakan Stok", "repeat",
                "/inventory/stock-movements", "MANAGE_INVENTORY",
            ),
        ),
    ),
    MenuItem(
        "warehouse", "Gudang", "warehouse",
        children=(
            MenuItem(
                "delivery-notes", "Surat Jalan", "truck",
                "/warehouse/delivery-notes", "MANAGE_DELIVERIES",
            ),
        ),
    ),
    MenuItem(
        "sales", "Sales", "shopping-cart",
        children=(
            MenuItem("orders", "Order", "clipboard", "/sales/orders", "MANAGE_ORDERS"),
            MenuItem("customers", "Pelanggan", "users", "/sales/customers", "MANAGE_CUSTOMERS"),
            MenuItem(
                "customer-visits", "Kunjungan", "map-pin",
                "/sales/customer-visits", "LOG_CUSTOMER_VISITS",
            ),
            MenuItem("my-target", "Target Saya", "target", "/sales/target", "VIEW_SALES_TARGETS"),
        ),
    ),
    MenuItem(
        "management", "Management", "settings",
        children=(
            MenuItem("users", "User", "user", "/management/users", "MANAGE_USERS"),
            MenuItem(
                "sales-target", "Target Penjualan", "target",
                "/management/sales-target", "MANAGE_SALES_TARGETS",
            ),
        ),
    ),
    MenuItem(
        "finance", "Finance", "wallet",
        children=(
            MenuItem(
                "invoices", "Invoice", "file-text",
                "/management/finance/invoices", "MANAGE_INVOICES",
            ),
            MenuItem(
                "payments", "Pembayaran", "credit-card",
                "/management/finance/payments", "MANAGE_PAYMENTS",
            ),
            MenuItem(
                "revenue-analytics", "Analitik Pendapatan", "bar-chart",
                "/management/finance/revenue-analytics", "VIEW_FINANCE",
            ),
        ),
    ),
)


class MenuGenerator:
    """Filter a menu tree down to what a set of capabilities may open."""

    def __init__(self, capabilities: Iterable[str]):
        self.capabilities = frozenset(capabilities)

    def can_access(self, item: MenuItem) -> bool:
        return item.capability is None or item.capability in self.capabilities

    def _filter(self, item: MenuItem) -> Optional[MenuItem]:
        if not self.can_access(item):
            return None
        if not item.has_children:
            return item
        children = tuple(
            child for child in (self._filter(c) for c in item.children) if child is not None
        )
        if not children:
            # A group with nothing left to open is hidden.
            return None
        return replace(item, children=children)

    def generate_sidebar(self, menu: Iterable[MenuItem] = SIDEBAR_MENU) -> list[MenuItem]:
        return [item for item in (self._filter(i) for i in menu) if item is not None]


def create_menu_generator(user) -> MenuGenerator:
    return MenuGenerator(capabilities_for_user(user))


def is_active(item: MenuItem, path: Optional[str]) -> bool:
    if not path:
        return False
    if item.href and item.href == path:
        return True
    return any(child.href == path for child in item.children)


def mark_active(items: Iterable[MenuItem], path: Optional[str] = None) -> list[dict]:
    """Serialize menu items, flagging the ones matching ``path``."""
    return [
        {
            "id": item.id,
            "label": item.label,
            "icon": item.icon,
            "href": item.href or None,
            "active": is_active(item, path),
            "children": mark_active(item.children, path),
        }
        for item in items
    ]

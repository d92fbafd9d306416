"""Capability constants and their default grant per role.

A capability gates one screen or action of the back office. Users do not
hold capabilities directly: they are derived from ``User.role``.
"""

CAPABILITY_CHOICES = [
    ("VIEW_DASHBOARD", "Dapat melihat dashboard"),
    ("MANAGE_USERS", "Dapat mengelola user"),
    ("MANAGE_PRODUCTS", "Dapat mengelola produk"),
    ("MANAGE_INVENTORY", "Dapat mengelola stok gudang"),
    ("MANAGE_DELIVERIES", "Dapat mengelola surat jalan"),
    ("MANAGE_ORDERS", "Dapat mengelola order"),
    ("MANAGE_CUSTOMERS", "Dapat mengelola pelanggan"),
    ("LOG_CUSTOMER_VISITS", "Dapat mencatat kunjungan pelanggan"),
    ("MANAGE_INVOICES", "Dapat mengelola invoice"),
    ("MANAGE_PAYMENTS", "Dapat mengelola pembayaran"),
    ("VIEW_FINANCE", "Dapat melihat laporan keuangan"),
    ("VIEW_SALES_TARGETS", "Dapat melihat target penjualan"),
    ("MANAGE_SALES_TARGETS", "Dapat mengelola target penjualan"),
]

ALL_CAPABILITIES = [code for code, _ in CAPABILITY_CHOICES]

ROLE_CAPABILITY_MAP = {
    "OWNER": list(ALL_CAPABILITIES),
    "ADMIN": list(ALL_CAPABILITIES),
    "WAREHOUSE": [
        "VIEW_DASHBOARD",
        "MANAGE_PRODUCTS",
        "MANAGE_INVENTORY",
        "MANAGE_DELIVERIES",
    ],
    "SALES": [
        "VIEW_DASHBOARD",
        "MANAGE_ORDERS",
        "MANAGE_CUSTOMERS",
        "LOG_CUSTOMER_VISITS",
        "VIEW_SALES_TARGETS",
    ],
}


def capabilities_for_user(user) -> list[str]:
    """Capabilities granted to ``user``; empty for anonymous or inactive users."""
    if user is None or not getattr(user, "is_authenticated", False):
        return []
    if not getattr(user, "is_active", True):
        return []
    if getattr(user, "is_superuser", False):
        return list(ALL_CAPABILITIES)
    return list(ROLE_CAPABILITY_MAP.get(getattr(user, "role", None), []))


def user_has_capability(user, capability: str) -> bool:
    return capability in capabilities_for_user(user)

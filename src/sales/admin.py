"""Admin configuration for the sales app."""
from django.contrib import admin

from sales.models import Invoice, Order


# ---------------------------------------------------------------------------
# Inlines
# ---------------------------------------------------------------------------

class InvoiceInline(admin.TabularInline):
    """Inline for invoices within the Order admin."""

    model = Invoice
    extra = 0
    fields = ("invoice_number", "invoice_date", "status", "total_amount")


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin for the Order model."""

    list_display = (
        "order_number",
        "sales",
        "customer_name",
        "status",
        "total_amount",
        "order_date",
    )
    list_filter = ("status", "order_date")
    search_fields = (
        "order_number",
        "customer_name",
        "sales__first_name",
        "sales__last_name",
        "sales__email",
    )
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [InvoiceInline]


# ---------------------------------------------------------------------------
# Invoice
# ---------------------------------------------------------------------------

@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """Admin for the Invoice model."""

    list_display = (
        "invoice_number",
        "order",
        "status",
        "total_amount",
        "invoice_date",
    )
    list_filter = ("status", "invoice_date")
    search_fields = ("invoice_number", "order__order_number")
    readonly_fields = ("id", "created_at", "updated_at")
    list_select_related = ("order",)

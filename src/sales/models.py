"""Models for the sales app."""
import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------

class Order(TimeStampedModel):
    """A customer order owned by the sales user who closed it."""

    class Status(models.TextChoices):
        NEW = "NEW", "Baru"
        PROCESSING = "PROCESSING", "Diproses"
        COMPLETED = "COMPLETED", "Selesai"
        CANCELLED = "CANCELLED", "Dibatalkan"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField("nomor order", max_length=50, unique=True)
    sales = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name="sales",
    )
    customer_name = models.CharField("pelanggan", max_length=255, blank=True, default="")
    order_date = models.DateTimeField("tanggal order", default=timezone.now)
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.NEW,
        db_index=True,
    )
    total_amount = models.DecimalField(
        "total",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        verbose_name = "order"
        verbose_name_plural = "orders"
        ordering = ["-order_date"]

    def __str__(self):
        return self.order_number


# ---------------------------------------------------------------------------
# Invoice
# ---------------------------------------------------------------------------

class Invoice(TimeStampedModel):
    """Invoice issued against an order.

    Only ``PAID`` invoices count towards a seller's achieved amount.
    """

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        SENT = "SENT", "Terkirim"
        PENDING = "PENDING", "Menunggu"
        PAID = "PAID", "Lunas"
        OVERDUE = "OVERDUE", "Jatuh tempo"
        CANCELLED = "CANCELLED", "Dibatalkan"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice_number = models.CharField("nomor invoice", max_length=50, unique=True)
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="invoices",
        verbose_name="order",
    )
    invoice_date = models.DateTimeField("tanggal invoice", default=timezone.now, db_index=True)
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    total_amount = models.DecimalField(
        "total",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        verbose_name = "invoice"
        verbose_name_plural = "invoices"
        ordering = ["-invoice_date"]
        indexes = [
            models.Index(fields=["status", "invoice_date"], name="invoice_status_date_idx"),
        ]

    def __str__(self):
        return self.invoice_number

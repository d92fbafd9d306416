import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="dibuat pada")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="diubah pada")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_number", models.CharField(max_length=50, unique=True, verbose_name="nomor order")),
                ("customer_name", models.CharField(blank=True, default="", max_length=255, verbose_name="pelanggan")),
                ("order_date", models.DateTimeField(default=django.utils.timezone.now, verbose_name="tanggal order")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("NEW", "Baru"),
                            ("PROCESSING", "Diproses"),
                            ("COMPLETED", "Selesai"),
                            ("CANCELLED", "Dibatalkan"),
                        ],
                        db_index=True,
                        default="NEW",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="total")),
                (
                    "sales",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="sales",
                    ),
                ),
            ],
            options={
                "verbose_name": "order",
                "verbose_name_plural": "orders",
                "ordering": ["-order_date"],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="dibuat pada")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="diubah pada")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("invoice_number", models.CharField(max_length=50, unique=True, verbose_name="nomor invoice")),
                (
                    "invoice_date",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="tanggal invoice"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "Draft"),
                            ("SENT", "Terkirim"),
                            ("PENDING", "Menunggu"),
                            ("PAID", "Lunas"),
                            ("OVERDUE", "Jatuh tempo"),
                            ("CANCELLED", "Dibatalkan"),
                        ],
                        db_index=True,
                        default="DRAFT",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="total")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invoices",
                        to="sales.order",
                        verbose_name="order",
                    ),
                ),
            ],
            options={
                "verbose_name": "invoice",
                "verbose_name_plural": "invoices",
                "ordering": ["-invoice_date"],
                "indexes": [models.Index(fields=["status", "invoice_date"], name="invoice_status_date_idx")],
            },
        ),
    ]

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SalesTarget",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="dibuat pada")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="diubah pada")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "target_type",
                    models.CharField(
                        choices=[
                            ("MONTHLY", "Bulanan"),
                            ("QUARTERLY", "Kuartalan"),
                            ("YEARLY", "Tahunan"),
                        ],
                        default="MONTHLY",
                        max_length=20,
                        verbose_name="tipe target",
                    ),
                ),
                ("target_period", models.CharField(max_length=10, verbose_name="periode")),
                (
                    "target_amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="target",
                    ),
                ),
                (
                    "achieved_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14, verbose_name="tercapai"),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="aktif")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sales_targets",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "target penjualan",
                "verbose_name_plural": "target penjualan",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["target_type", "target_period"], name="target_type_period_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "target_period"), name="uniq_sales_target_user_period"),
                ],
            },
        ),
    ]

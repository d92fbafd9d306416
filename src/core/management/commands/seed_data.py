"""Seed database with the four role accounts used in development."""
from django.core.management.base import BaseCommand
from django.db import transaction


class Command(BaseCommand):
    help = "Seed database with one OWNER, ADMIN, WAREHOUSE and SALES user"

    DEFAULT_PASSWORD = "password123"

    DEMO_USERS = [
        {"email": "owner@indana.com", "first_name": "Owner", "last_name": "User", "role": "OWNER", "phone": "+62812345678"},
        {"email": "admin@indana.com", "first_name": "Admin", "last_name": "User", "role": "ADMIN", "phone": "+62812345679"},
        {"email": "warehouse@indana.com", "first_name": "Warehouse", "last_name": "User", "role": "WAREHOUSE", "phone": "+62812345680"},
        {"email": "sales@indana.com", "first_name": "Sales", "last_name": "User", "role": "SALES", "phone": "+62812345681"},
    ]
    DEMO_ADDRESS = "Jakarta"

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete existing data first")
        parser.add_argument(
            "--reset-passwords",
            action="store_true",
            help="Reset demo users passwords to the default value (useful when the DB already contains these users).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            self._flush()

        self.stdout.write("Seeding users...")
        users = self._create_users(reset_passwords=options["reset_passwords"])

        self.stdout.write(self.style.SUCCESS(f"Seed complete: {len(users)} users"))
        self.stdout.write("\nTest accounts:")
        for ud in self.DEMO_USERS:
            self.stdout.write(f"  {ud['role']:<10} {ud['email']} / {self.DEFAULT_PASSWORD}")

    def _flush(self):
        from accounts.models import User
        from sales.models import Invoice, Order
        from targets.models import SalesTarget

        for model in [Invoice, Order, SalesTarget]:
            deleted, _ = model.objects.all().delete()
            self.stdout.write(f"  {model._meta.verbose_name_plural}: {deleted} deleted")

        # Superusers created by hand survive a flush.
        deleted, _ = User.objects.filter(is_superuser=False).delete()
        self.stdout.write(f"  users: {deleted} deleted")

    def _create_users(self, *, reset_passwords: bool = False):
        from accounts.models import User

        seeded = []
        for ud in self.DEMO_USERS:
            is_manager = ud["role"] in (User.Role.OWNER, User.Role.ADMIN)
            expected = {
                "first_name": ud["first_name"],
                "last_name": ud["last_name"],
                "role": ud["role"],
                "phone": ud["phone"],
                "address": self.DEMO_ADDRESS,
                "is_staff": is_manager,
                "is_active": True,
            }
            user, created = User.objects.get_or_create(email=ud["email"], defaults=expected)

            # Existing rows are normalised; passwords only on request.
            changed_fields = []
            for field, value in expected.items():
                if getattr(user, field) != value:
                    setattr(user, field, value)
                    changed_fields.append(field)

            if created or reset_passwords:
                user.set_password(self.DEFAULT_PASSWORD)
                changed_fields.append("password")

            if created or changed_fields:
                user.save()
                if created:
                    self.stdout.write(f"  User: {user.email} ({user.role})")
                else:
                    self.stdout.write(f"  User updated: {user.email} ({', '.join(sorted(set(changed_fields)))})")

            seeded.append(user)

        return seeded

# core/management/commands/seed_roles_admin.py
import os

from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from core.models import User


class Command(BaseCommand):
    help = "Ensure the default Admin account exists (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=os.getenv("DEFAULT_ADMIN_EMAIL", "admin@clinic.local"))
        parser.add_argument("--password", default=os.getenv("DEFAULT_ADMIN_PASSWORD", "Admin@123"))
        parser.add_argument("--reset-password", action="store_true",
                            help="Also reset the password of an existing account.")

    def handle(self, *args, **opts):
        email = opts["email"].strip()
        u, created = User.objects.get_or_create(
            username=email,
            defaults={
                "email": email,
                "first_name": "System",
                "last_name": "Administrator",
                "role": User.ROLE_ADMIN,
                "password": make_password(opts["password"]),
                "is_active": True,
                "is_staff": True,
                "is_superuser": True,
            },
        )
        if not created:
            fields = ["role", "is_active", "is_staff"]
            u.role = User.ROLE_ADMIN
            u.is_active = True
            u.is_staff = True
            if opts["reset_password"]:
                u.password = make_password(opts["password"])
                fields.append("password")
            u.save(update_fields=fields)
        state = "created" if created else "updated"
        self.stdout.write(self.style.SUCCESS(f"ok: {email} ({User.ROLE_ADMIN}, {state})"))
        self.stdout.write("Roles: " + ", ".join(value for value, _ in User.ROLE_CHOICES))

# accounts/management/commands/seed_identity.py

from django.core.management.base import BaseCommand
from django.db import DEFAULT_DB_ALIAS

from accounts.seeding import seed_identity


class Command(BaseCommand):
    help = "Seed role groups and the bootstrap admin user"

    def add_arguments(self, parser):
        parser.add_argument("--database", default=DEFAULT_DB_ALIAS)
        parser.add_argument("--email", default=None, help="Bootstrap admin email")
        parser.add_argument("--password", default=None, help="Bootstrap admin password")

    def handle(self, *args, **options):
        result = seed_identity(
            using=options["database"],
            admin_email=options["email"],
            admin_password=options["password"],
        )

        admin = result["admin_email"] or "not configured"
        self.stdout.write(self.style.SUCCESS(
            f"Done! Created {result['roles_created']} roles; admin: {admin}"
            f"{' (new)' if result['admin_created'] else ''}."
        ))

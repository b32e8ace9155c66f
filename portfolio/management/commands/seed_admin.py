import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = "Create or update the staff account used to sign in to the admin UI (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--username", default=os.environ.get("ADMIN_USERNAME", "admin"))
        parser.add_argument("--email", default=os.environ.get("ADMIN_EMAIL", ""))
        parser.add_argument(
            "--password",
            default=os.environ.get("ADMIN_PASSWORD", ""),
            help="Defaults to $ADMIN_PASSWORD",
        )

    def handle(self, *args, **options):
        password = options["password"]
        if not password:
            raise CommandError("A password is required (--password or ADMIN_PASSWORD).")

        User = get_user_model()
        user, created = User.objects.get_or_create(
            username=options["username"],
            defaults={"email": options["email"]},
        )
        if options["email"]:
            user.email = options["email"]
        user.is_staff = True
        user.is_superuser = True
        user.set_password(password)
        user.save()

        verb = "Created" if created else "Updated"
        self.stdout.write(self.style.SUCCESS(f"{verb} admin account '{user.get_username()}'"))

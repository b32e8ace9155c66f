from django.core.management.base import BaseCommand
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from portfolio.models import Profile, Project, Experience
from portfolio.storage_backends import SupabaseMediaStorage, select_media_storage, supabase_configured


class Command(BaseCommand):
    help = "Print the effective asset store configuration and run a tiny upload test"

    def add_arguments(self, parser):
        parser.add_argument("--skip-upload", action="store_true", help="Only print configuration")

    def handle(self, *args, **options):
        self.stdout.write("== Storage configuration ==")
        self.stdout.write(f"DEBUG: {settings.DEBUG}")
        self.stdout.write(f"MEDIA_URL: {settings.MEDIA_URL}")
        self.stdout.write(f"STORAGES.default: {settings.STORAGES.get('default')}")
        self.stdout.write(f"default_storage class: {default_storage.__class__.__name__}")
        self.stdout.write(f"Supabase configured: {supabase_configured()}")
        self.stdout.write("")

        # Field storages
        for model, field in ((Project, "image"), (Experience, "offer_letter"), (Profile, "resume")):
            storage = model._meta.get_field(field).storage
            self.stdout.write(f"{model.__name__}.{field}.storage: {storage.__class__.__name__}")

        storage = select_media_storage()
        if isinstance(storage, SupabaseMediaStorage):
            self.stdout.write(f"Supabase bucket: {storage.bucket}")
            self.stdout.write(f"Supabase public base: {storage.public_base}")

        if options["skip_upload"]:
            return

        self.stdout.write("\n== Upload test ==")
        name = storage.save("check/hello.txt", ContentFile(b"hello-from-storage-check"))
        self.stdout.write(f"Saved as: {name}")
        self.stdout.write(f"Public URL: {storage.url(name)}")
        storage.delete(name)
        self.stdout.write(self.style.SUCCESS("Done."))

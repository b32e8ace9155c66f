import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import portfolio.storage_backends

MONTH_CHOICES = [
    ("January", "January"),
    ("February", "February"),
    ("March", "March"),
    ("April", "April"),
    ("May", "May"),
    ("June", "June"),
    ("July", "July"),
    ("August", "August"),
    ("September", "September"),
    ("October", "October"),
    ("November", "November"),
    ("December", "December"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(default="Full Stack Developer", max_length=120)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("description", models.TextField(blank=True)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("place", models.CharField(blank=True, max_length=120)),
                ("profile_image", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="profile/")),
                ("profile_image_url", models.URLField(blank=True)),
                ("resume", models.FileField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="profile/resume/")),
                ("resume_url", models.URLField(blank=True)),
                ("about_image", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="profile/about/")),
                ("about_image_url", models.URLField(blank=True)),
                ("logo", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="profile/logo/")),
                ("logo_url", models.URLField(blank=True)),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="SkillCategory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=80, unique=True)),
                ("description", models.CharField(blank=True, max_length=200)),
                ("color", models.CharField(default="#667eea", help_text="CSS color or hex, e.g. #667eea", max_length=20)),
                ("order", models.SmallIntegerField(default=0)),
            ],
            options={
                "verbose_name_plural": "skill categories",
                "ordering": ["order", "created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="Skill",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=80)),
                ("image", models.ImageField(storage=portfolio.storage_backends.select_media_storage, upload_to="skills/")),
                ("image_url", models.URLField(blank=True)),
                ("order", models.SmallIntegerField(default=0)),
                ("category", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="skills", to="portfolio.skillcategory")),
            ],
            options={
                "ordering": ["order", "created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField()),
                ("detailed_description", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("Ongoing", "Ongoing"), ("Completed", "Completed")], max_length=20)),
                ("completion_month", models.CharField(blank=True, choices=MONTH_CHOICES, max_length=12, null=True)),
                ("completion_year", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("image", models.ImageField(storage=portfolio.storage_backends.select_media_storage, upload_to="projects/")),
                ("image_url", models.URLField(blank=True)),
                ("links", models.JSONField(blank=True, default=list, help_text="[{type, url, custom_name}]")),
                ("show_on_home", models.BooleanField(default=False)),
                ("order", models.SmallIntegerField(default=0)),
                ("skills", models.ManyToManyField(blank=True, related_name="projects", to="portfolio.skill")),
            ],
            options={
                "ordering": ["order", "-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Experience",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("category", models.CharField(choices=[("Job", "Job"), ("Internship", "Internship"), ("Freelance", "Freelance")], max_length=20)),
                ("company_name", models.CharField(max_length=200)),
                ("role", models.CharField(max_length=200)),
                ("employment_type", models.CharField(choices=[("Full-time", "Full-time"), ("Part-time", "Part-time"), ("Contract", "Contract"), ("Internship", "Internship"), ("Freelance", "Freelance")], max_length=20)),
                ("location", models.CharField(max_length=200)),
                ("status", models.CharField(choices=[("Ongoing", "Ongoing"), ("Completed", "Completed")], default="Completed", max_length=20)),
                ("start_month", models.CharField(choices=MONTH_CHOICES, max_length=12)),
                ("start_year", models.PositiveSmallIntegerField()),
                ("end_month", models.CharField(blank=True, choices=MONTH_CHOICES, max_length=12, null=True)),
                ("end_year", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("description", models.TextField()),
                ("skill_tags", models.JSONField(blank=True, default=list, help_text="Free-form skill labels")),
                ("company_link", models.URLField(blank=True)),
                ("company_logo", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="experience/logos/")),
                ("company_logo_url", models.URLField(blank=True)),
                ("offer_letter", models.FileField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="experience/offer-letters/")),
                ("offer_letter_url", models.URLField(blank=True)),
                ("completion_certificate", models.FileField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="experience/certificates/")),
                ("completion_certificate_url", models.URLField(blank=True)),
                ("order", models.SmallIntegerField(default=0)),
                ("technologies", models.ManyToManyField(blank=True, related_name="experiences", to="portfolio.skill")),
            ],
            options={
                "ordering": ["order", "-start_year", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Education",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("degree", models.CharField(max_length=200)),
                ("specialization", models.CharField(blank=True, max_length=200)),
                ("institute_name", models.CharField(max_length=200)),
                ("location", models.CharField(blank=True, max_length=200)),
                ("status", models.CharField(choices=[("Completed", "Completed"), ("Pursuing", "Pursuing")], max_length=20)),
                ("completion_year", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("expected_completion_year", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("grade", models.CharField(blank=True, max_length=60)),
                ("logo", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="education/")),
                ("logo_url", models.URLField(blank=True)),
                ("order", models.SmallIntegerField(default=0)),
            ],
            options={
                "verbose_name_plural": "education",
                "ordering": ["order", "-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Certification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=200)),
                ("organization", models.CharField(max_length=200)),
                ("completion_month", models.CharField(choices=MONTH_CHOICES, max_length=12)),
                ("completion_year", models.PositiveSmallIntegerField()),
                ("credential_id", models.CharField(blank=True, max_length=200)),
                ("credential_url", models.URLField(blank=True)),
                ("description", models.TextField(blank=True)),
                ("skills", models.JSONField(blank=True, default=list)),
                ("pinned", models.BooleanField(default=False)),
                ("certificate", models.FileField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="certifications/files/")),
                ("certificate_url", models.URLField(blank=True)),
                ("image", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="certifications/images/")),
                ("image_url", models.URLField(blank=True)),
                ("order", models.SmallIntegerField(default=0)),
            ],
            options={
                "ordering": ["-pinned", "-completion_year", "order", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Award",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=200)),
                ("organization", models.CharField(max_length=200)),
                ("associated_type", models.CharField(choices=[("none", "None"), ("experience", "Experience"), ("education", "Education")], default="none", max_length=20)),
                ("associated_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("description", models.TextField()),
                ("issue_month", models.CharField(choices=MONTH_CHOICES, max_length=12)),
                ("issue_year", models.PositiveSmallIntegerField()),
                ("certificate", models.FileField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="awards/certificates/")),
                ("certificate_url", models.URLField(blank=True)),
                ("certificate_link", models.URLField(blank=True)),
                ("image", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="awards/images/")),
                ("image_url", models.URLField(blank=True)),
                ("social_links", models.JSONField(blank=True, default=list, help_text="[{platform, url}]")),
                ("featured", models.BooleanField(default=False)),
                ("order", models.SmallIntegerField(default=0)),
            ],
            options={
                "ordering": ["order", "-issue_year", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Article",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField()),
                ("thumbnail", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="articles/")),
                ("thumbnail_url", models.URLField(blank=True)),
                ("social_links", models.JSONField(blank=True, default=list, help_text="[{platform, url, custom_name}]")),
                ("status", models.CharField(choices=[("Draft", "Draft"), ("Published", "Published")], default="Draft", max_length=20)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("order", models.SmallIntegerField(default=0)),
            ],
            options={
                "ordering": ["order", "-published_at", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Testimonial",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("full_name", models.CharField(max_length=120)),
                ("email", models.EmailField(max_length=254)),
                ("rating", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ("feedback", models.TextField()),
                ("website_link", models.URLField(blank=True)),
                ("profile_image", models.ImageField(blank=True, null=True, storage=portfolio.storage_backends.select_media_storage, upload_to="testimonials/")),
                ("profile_image_url", models.URLField(blank=True)),
                ("is_approved", models.BooleanField(default=False)),
                ("order", models.SmallIntegerField(default=0)),
            ],
            options={
                "ordering": ["order", "-created_at"],
                "indexes": [models.Index(fields=["is_approved", "order", "-created_at"], name="testimonial_approved_idx")],
            },
        ),
        migrations.CreateModel(
            name="ContactMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("full_name", models.CharField(max_length=120)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(max_length=20)),
                ("reason", models.CharField(choices=[("hire me", "Hire me"), ("build projects", "Build projects"), ("general connection", "General connection"), ("others", "Others")], max_length=30)),
                ("message", models.TextField()),
                ("is_read", models.BooleanField(default=False)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["is_read", "-created_at"], name="contact_unread_idx")],
            },
        ),
        migrations.CreateModel(
            name="FloatingMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("message", models.CharField(max_length=200)),
                ("highlight_text", models.CharField(blank=True, max_length=50)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["-updated_at", "-id"],
            },
        ),
    ]

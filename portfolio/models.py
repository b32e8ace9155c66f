from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from .managers import ContentManager
from .ordering import MONTH_CHOICES
from .storage_backends import select_media_storage


class AssetUrlMixin(models.Model):
    """Mirror each stored file's public URL into its ``*_url`` column.

    ``asset_fields`` maps a file field name to the URL field it feeds. The URL
    is refreshed after every save; clearing a file clears its URL. Old objects
    are never removed from the asset store.
    """

    asset_fields = {}

    class Meta:
        abstract = True

    def asset_urls(self):
        urls = {}
        for file_field, url_field in self.asset_fields.items():
            stored = getattr(self, file_field)
            urls[url_field] = stored.url if stored else ""
        return urls

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        changed = {
            url_field: url
            for url_field, url in self.asset_urls().items()
            if url != getattr(self, url_field)
        }
        if changed:
            type(self).objects.filter(pk=self.pk).update(**changed)
            for url_field, url in changed.items():
                setattr(self, url_field, url)


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ContentManager()

    class Meta:
        abstract = True


class Profile(AssetUrlMixin, TimestampedModel):
    """Site owner details shown in the hero/about sections. Singleton."""

    title = models.CharField(max_length=120, default="Full Stack Developer")
    tags = models.JSONField(default=list, blank=True)
    description = models.TextField(blank=True)
    email = models.EmailField(blank=True)
    place = models.CharField(max_length=120, blank=True)

    profile_image = models.ImageField(upload_to="profile/", storage=select_media_storage, blank=True, null=True)
    profile_image_url = models.URLField(blank=True)
    resume = models.FileField(upload_to="profile/resume/", storage=select_media_storage, blank=True, null=True)
    resume_url = models.URLField(blank=True)
    about_image = models.ImageField(upload_to="profile/about/", storage=select_media_storage, blank=True, null=True)
    about_image_url = models.URLField(blank=True)
    logo = models.ImageField(upload_to="profile/logo/", storage=select_media_storage, blank=True, null=True)
    logo_url = models.URLField(blank=True)

    asset_fields = {
        "profile_image": "profile_image_url",
        "resume": "resume_url",
        "about_image": "about_image_url",
        "logo": "logo_url",
    }

    def __str__(self):
        return self.title or "Profile"

    def save(self, *args, **kwargs):
        # Enforce singleton: only one row allowed
        if not self.pk and type(self).objects.exists():
            raise ValidationError("Only one Profile instance is allowed. Update the existing profile instead.")
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        profile = cls.objects.order_by("id").first()
        if profile is None:
            profile = cls.objects.create()
        return profile


class SkillCategory(TimestampedModel):
    name = models.CharField(max_length=80, unique=True)
    description = models.CharField(max_length=200, blank=True)
    color = models.CharField(max_length=20, default="#667eea", help_text="CSS color or hex, e.g. #667eea")
    order = models.SmallIntegerField(default=0)

    class Meta:
        ordering = ["order", "created_at", "id"]
        verbose_name_plural = "skill categories"

    def __str__(self):
        return self.name


class Skill(AssetUrlMixin, TimestampedModel):
    name = models.CharField(max_length=80)
    image = models.ImageField(upload_to="skills/", storage=select_media_storage)
    image_url = models.URLField(blank=True)
    category = models.ForeignKey(SkillCategory, on_delete=models.PROTECT, related_name="skills")
    order = models.SmallIntegerField(default=0)

    asset_fields = {"image": "image_url"}

    class Meta:
        ordering = ["order", "created_at", "id"]

    def __str__(self):
        return self.name


class Project(AssetUrlMixin, TimestampedModel):
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    STATUS_CHOICES = [(ONGOING, ONGOING), (COMPLETED, COMPLETED)]

    LINK_TYPES = ("Live", "GitHub", "LinkedIn", "YouTube", "Twitter", "Medium", "Product Hunt", "Custom")

    title = models.CharField(max_length=200)
    description = models.TextField()
    detailed_description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    completion_month = models.CharField(max_length=12, choices=MONTH_CHOICES, blank=True, null=True)
    completion_year = models.PositiveSmallIntegerField(blank=True, null=True)
    image = models.ImageField(upload_to="projects/", storage=select_media_storage)
    image_url = models.URLField(blank=True)
    skills = models.ManyToManyField(Skill, blank=True, related_name="projects")
    links = models.JSONField(default=list, blank=True, help_text="[{type, url, custom_name}]")
    show_on_home = models.BooleanField(default=False)
    order = models.SmallIntegerField(default=0)

    asset_fields = {"image": "image_url"}

    class Meta:
        ordering = ["order", "-created_at", "-id"]

    def __str__(self):
        return self.title


class Experience(AssetUrlMixin, TimestampedModel):
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    STATUS_CHOICES = [(ONGOING, ONGOING), (COMPLETED, COMPLETED)]
    CATEGORY_CHOICES = [("Job", "Job"), ("Internship", "Internship"), ("Freelance", "Freelance")]
    EMPLOYMENT_TYPE_CHOICES = [
        ("Full-time", "Full-time"),
        ("Part-time", "Part-time"),
        ("Contract", "Contract"),
        ("Internship", "Internship"),
        ("Freelance", "Freelance"),
    ]

    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    company_name = models.CharField(max_length=200)
    role = models.CharField(max_length=200)
    employment_type = models.CharField(max_length=20, choices=EMPLOYMENT_TYPE_CHOICES)
    location = models.CharField(max_length=200)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=COMPLETED)
    start_month = models.CharField(max_length=12, choices=MONTH_CHOICES)
    start_year = models.PositiveSmallIntegerField()
    end_month = models.CharField(max_length=12, choices=MONTH_CHOICES, blank=True, null=True)
    end_year = models.PositiveSmallIntegerField(blank=True, null=True)
    description = models.TextField()
    technologies = models.ManyToManyField(Skill, blank=True, related_name="experiences")
    skill_tags = models.JSONField(default=list, blank=True, help_text="Free-form skill labels")
    company_link = models.URLField(blank=True)
    company_logo = models.ImageField(upload_to="experience/logos/", storage=select_media_storage, blank=True, null=True)
    company_logo_url = models.URLField(blank=True)
    offer_letter = models.FileField(upload_to="experience/offer-letters/", storage=select_media_storage, blank=True, null=True)
    offer_letter_url = models.URLField(blank=True)
    completion_certificate = models.FileField(
        upload_to="experience/certificates/", storage=select_media_storage, blank=True, null=True
    )
    completion_certificate_url = models.URLField(blank=True)
    order = models.SmallIntegerField(default=0)

    asset_fields = {
        "company_logo": "company_logo_url",
        "offer_letter": "offer_letter_url",
        "completion_certificate": "completion_certificate_url",
    }

    class Meta:
        ordering = ["order", "-start_year", "-id"]

    def __str__(self):
        return f"{self.role} @ {self.company_name}"


class Education(AssetUrlMixin, TimestampedModel):
    COMPLETED = "Completed"
    PURSUING = "Pursuing"
    STATUS_CHOICES = [(COMPLETED, COMPLETED), (PURSUING, PURSUING)]

    degree = models.CharField(max_length=200)
    specialization = models.CharField(max_length=200, blank=True)
    institute_name = models.CharField(max_length=200)
    location = models.CharField(max_length=200, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    completion_year = models.PositiveSmallIntegerField(blank=True, null=True)
    expected_completion_year = models.PositiveSmallIntegerField(blank=True, null=True)
    grade = models.CharField(max_length=60, blank=True)
    logo = models.ImageField(upload_to="education/", storage=select_media_storage, blank=True, null=True)
    logo_url = models.URLField(blank=True)
    order = models.SmallIntegerField(default=0)

    asset_fields = {"logo": "logo_url"}

    class Meta:
        ordering = ["order", "-created_at", "-id"]
        verbose_name_plural = "education"

    def __str__(self):
        return f"{self.degree} @ {self.institute_name}"


class Certification(AssetUrlMixin, TimestampedModel):
    title = models.CharField(max_length=200)
    organization = models.CharField(max_length=200)
    completion_month = models.CharField(max_length=12, choices=MONTH_CHOICES)
    completion_year = models.PositiveSmallIntegerField()
    credential_id = models.CharField(max_length=200, blank=True)
    credential_url = models.URLField(blank=True)
    description = models.TextField(blank=True)
    skills = models.JSONField(default=list, blank=True)
    pinned = models.BooleanField(default=False)
    certificate = models.FileField(upload_to="certifications/files/", storage=select_media_storage, blank=True, null=True)
    certificate_url = models.URLField(blank=True)
    image = models.ImageField(upload_to="certifications/images/", storage=select_media_storage, blank=True, null=True)
    image_url = models.URLField(blank=True)
    order = models.SmallIntegerField(default=0)

    asset_fields = {"certificate": "certificate_url", "image": "image_url"}

    class Meta:
        ordering = ["-pinned", "-completion_year", "order", "-created_at"]

    def __str__(self):
        return f"{self.title} ({self.organization})"


class Award(AssetUrlMixin, TimestampedModel):
    NONE = "none"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    ASSOCIATION_CHOICES = [(NONE, "None"), (EXPERIENCE, "Experience"), (EDUCATION, "Education")]

    title = models.CharField(max_length=200)
    organization = models.CharField(max_length=200)
    # Plain id, not a foreign key: the target table depends on associated_type
    associated_type = models.CharField(max_length=20, choices=ASSOCIATION_CHOICES, default=NONE)
    associated_id = models.PositiveBigIntegerField(blank=True, null=True)
    description = models.TextField()
    issue_month = models.CharField(max_length=12, choices=MONTH_CHOICES)
    issue_year = models.PositiveSmallIntegerField()
    certificate = models.FileField(upload_to="awards/certificates/", storage=select_media_storage, blank=True, null=True)
    certificate_url = models.URLField(blank=True)
    certificate_link = models.URLField(blank=True)
    image = models.ImageField(upload_to="awards/images/", storage=select_media_storage, blank=True, null=True)
    image_url = models.URLField(blank=True)
    social_links = models.JSONField(default=list, blank=True, help_text="[{platform, url}]")
    featured = models.BooleanField(default=False)
    order = models.SmallIntegerField(default=0)

    asset_fields = {"certificate": "certificate_url", "image": "image_url"}

    class Meta:
        ordering = ["order", "-issue_year", "-created_at"]

    def __str__(self):
        return self.title


class Article(AssetUrlMixin, TimestampedModel):
    DRAFT = "Draft"
    PUBLISHED = "Published"
    STATUS_CHOICES = [(DRAFT, DRAFT), (PUBLISHED, PUBLISHED)]

    PLATFORMS = ("Medium", "Blogger", "LinkedIn", "Dev.to", "Hashnode", "Personal Blog", "GitHub", "Quora", "Custom")

    title = models.CharField(max_length=200)
    description = models.TextField()
    thumbnail = models.ImageField(upload_to="articles/", storage=select_media_storage, blank=True, null=True)
    thumbnail_url = models.URLField(blank=True)
    social_links = models.JSONField(default=list, blank=True, help_text="[{platform, url, custom_name}]")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=DRAFT)
    published_at = models.DateTimeField(blank=True, null=True)
    order = models.SmallIntegerField(default=0)

    asset_fields = {"thumbnail": "thumbnail_url"}

    class Meta:
        ordering = ["order", "-published_at", "-created_at"]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        # Draft -> Published stamps published_at once; going back to Draft clears it
        if self.status == self.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()
        elif self.status == self.DRAFT:
            self.published_at = None
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "status" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"published_at"}
        super().save(*args, **kwargs)


class Testimonial(AssetUrlMixin, TimestampedModel):
    full_name = models.CharField(max_length=120)
    email = models.EmailField()
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    feedback = models.TextField()
    website_link = models.URLField(blank=True)
    profile_image = models.ImageField(upload_to="testimonials/", storage=select_media_storage, blank=True, null=True)
    profile_image_url = models.URLField(blank=True)
    is_approved = models.BooleanField(default=False)
    order = models.SmallIntegerField(default=0)

    asset_fields = {"profile_image": "profile_image_url"}

    class Meta:
        ordering = ["order", "-created_at"]
        indexes = [models.Index(fields=["is_approved", "order", "-created_at"], name="testimonial_approved_idx")]

    def __str__(self):
        return f"{self.full_name} ({self.rating}/5)"


class ContactMessage(TimestampedModel):
    REASON_CHOICES = [
        ("hire me", "Hire me"),
        ("build projects", "Build projects"),
        ("general connection", "General connection"),
        ("others", "Others"),
    ]

    full_name = models.CharField(max_length=120)
    email = models.EmailField()
    phone = models.CharField(max_length=20)
    reason = models.CharField(max_length=30, choices=REASON_CHOICES)
    message = models.TextField()
    is_read = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["is_read", "-created_at"], name="contact_unread_idx")]

    def __str__(self):
        return f"{self.full_name} <{self.email}>"


class FloatingMessage(TimestampedModel):
    """Announcement banner. At most one row is active at a time."""

    message = models.CharField(max_length=200)
    highlight_text = models.CharField(max_length=50, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["-updated_at", "-id"]

    def __str__(self):
        return self.message[:50]

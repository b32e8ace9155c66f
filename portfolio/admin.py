from django.contrib import admin
from .models import Profile, SkillCategory, Skill, Project, Experience, Education
from .models import Certification, Award, Article, Testimonial, ContactMessage, FloatingMessage
from . import services

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "email", "place", "updated_at")
    readonly_fields = ("profile_image_url", "resume_url", "about_image_url", "logo_url")

    def has_add_permission(self, request):
        return not Profile.objects.exists()

@admin.register(SkillCategory)
class SkillCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "color", "order")
    search_fields = ("name",)

@admin.register(Skill)
class SkillAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "order", "image_url")
    list_filter = ("category",)
    search_fields = ("name",)
    readonly_fields = ("image_url",)

@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("title", "status", "show_on_home", "order")
    list_filter = ("status", "show_on_home")
    search_fields = ("title", "description")
    filter_horizontal = ("skills",)
    readonly_fields = ("image_url",)

@admin.register(Experience)
class ExperienceAdmin(admin.ModelAdmin):
    list_display = ("role", "company_name", "category", "status", "start_month", "start_year")
    list_filter = ("category", "status")
    search_fields = ("role", "company_name")
    filter_horizontal = ("technologies",)
    readonly_fields = ("company_logo_url", "offer_letter_url", "completion_certificate_url")

@admin.register(Education)
class EducationAdmin(admin.ModelAdmin):
    list_display = ("degree", "institute_name", "status", "completion_year", "expected_completion_year")
    list_filter = ("status",)
    readonly_fields = ("logo_url",)

@admin.register(Certification)
class CertificationAdmin(admin.ModelAdmin):
    list_display = ("title", "organization", "completion_month", "completion_year", "pinned")
    list_filter = ("pinned", "organization")
    search_fields = ("title", "organization", "credential_id")
    readonly_fields = ("certificate_url", "image_url")

@admin.register(Award)
class AwardAdmin(admin.ModelAdmin):
    list_display = ("title", "organization", "association", "issue_year", "featured")
    list_filter = ("featured", "associated_type")
    search_fields = ("title", "organization")
    readonly_fields = ("certificate_url", "image_url")

    @admin.display(description="Associated with")
    def association(self, obj):
        return services.association_label(obj)

@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    list_display = ("title", "status", "published_at", "order")
    list_filter = ("status",)
    search_fields = ("title", "description")
    readonly_fields = ("thumbnail_url", "published_at")

@admin.register(Testimonial)
class TestimonialAdmin(admin.ModelAdmin):
    list_display = ("full_name", "rating", "is_approved", "created_at")
    list_filter = ("is_approved", "rating")
    search_fields = ("full_name", "email", "feedback")
    readonly_fields = ("profile_image_url",)

@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ("full_name", "email", "reason", "is_read", "created_at")
    list_filter = ("is_read", "reason")
    search_fields = ("full_name", "email", "message")

@admin.register(FloatingMessage)
class FloatingMessageAdmin(admin.ModelAdmin):
    list_display = ("message", "highlight_text", "is_active", "updated_at")

    def save_model(self, request, obj, form, change):
        services.save_floating_message(obj)

import json
import re

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from . import services
from .models import (
    Article,
    Award,
    Certification,
    ContactMessage,
    Education,
    Experience,
    FloatingMessage,
    Profile,
    Project,
    Skill,
    SkillCategory,
    Testimonial,
)

User = get_user_model()

PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")


class FormDataMixin:
    """Accept multipart forms where list/object fields arrive JSON-encoded.

    The admin forms send ``links='[{...}]'``, ``skills='[1, 2]'`` and so on.
    A QueryDict is flattened into a plain dict before field validation: list-ish
    fields are JSON-decoded, blank optional values become null or are dropped,
    and an empty file input never clears a stored file.
    """

    LIST_FIELDS = (serializers.ListField, serializers.ManyRelatedField)

    def to_internal_value(self, data):
        if hasattr(data, "getlist"):
            data = self._flatten_form(data)
        return super().to_internal_value(data)

    @staticmethod
    def _decode_list(raw):
        raw = raw.strip()
        if not raw:
            return []
        try:
            value = json.loads(raw)
        except ValueError:
            return [raw]
        return value if isinstance(value, list) else [value]

    def _flatten_form(self, data):
        flat = {}
        for key in data.keys():
            values = data.getlist(key)
            field = self.fields.get(key)
            if isinstance(field, self.LIST_FIELDS):
                if len(values) == 1 and isinstance(values[0], str):
                    flat[key] = self._decode_list(values[0])
                else:
                    flat[key] = values
                continue
            value = values[-1] if values else ""
            if value == "" and field is not None:
                if isinstance(field, serializers.FileField):
                    continue
                if not getattr(field, "allow_blank", False):
                    if field.allow_null:
                        value = None
                    elif not field.required:
                        continue
            flat[key] = value
        return flat


class ReorderItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order = serializers.IntegerField()


class SkillSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Skill
        fields = ["id", "name", "image_url"]


class SkillCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = SkillCategory
        fields = ["id", "name", "description", "color", "order", "created_at", "updated_at"]
        read_only_fields = ["created_at", "updated_at"]
        extra_kwargs = {"name": {"validators": []}}

    def validate_name(self, value):
        qs = SkillCategory.objects.filter(name__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Category already exists")
        return value


class SkillSerializer(FormDataMixin, serializers.ModelSerializer):
    category = SkillCategorySerializer(read_only=True)
    category_id = serializers.PrimaryKeyRelatedField(source="category", queryset=SkillCategory.objects.all())

    class Meta:
        model = Skill
        fields = ["id", "name", "image", "image_url", "category", "category_id", "order", "created_at", "updated_at"]
        read_only_fields = ["image_url", "created_at", "updated_at"]
        extra_kwargs = {
            "image": {"write_only": True, "error_messages": {"required": "Skill image is required."}},
        }

    def validate(self, attrs):
        name = attrs.get("name", getattr(self.instance, "name", None))
        category = attrs.get("category", getattr(self.instance, "category", None))
        qs = Skill.objects.filter(name__iexact=name, category=category)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if name and category and qs.exists():
            raise serializers.ValidationError("Skill already exists in this category")
        return attrs


class SkillCategoryWithSkillsSerializer(serializers.ModelSerializer):
    skills = SkillSummarySerializer(many=True, read_only=True)

    class Meta:
        model = SkillCategory
        fields = ["id", "name", "description", "color", "order", "skills"]


class ProjectLinkSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Project.LINK_TYPES)
    url = serializers.URLField()
    custom_name = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs["type"] == "Custom" and not attrs.get("custom_name"):
            raise serializers.ValidationError({"custom_name": "Custom links require a name."})
        return attrs


class ProjectSerializer(FormDataMixin, serializers.ModelSerializer):
    skills = serializers.PrimaryKeyRelatedField(many=True, queryset=Skill.objects.all(), required=False)
    links = serializers.ListField(child=ProjectLinkSerializer(), required=False)

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "description",
            "detailed_description",
            "status",
            "completion_month",
            "completion_year",
            "image",
            "image_url",
            "skills",
            "links",
            "show_on_home",
            "order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["image_url", "created_at", "updated_at"]
        extra_kwargs = {
            "image": {"write_only": True, "error_messages": {"required": "Project image is required."}},
        }

    def validate(self, attrs):
        status = attrs.get("status", getattr(self.instance, "status", None))
        if status == Project.COMPLETED:
            month = attrs.get("completion_month", getattr(self.instance, "completion_month", None))
            year = attrs.get("completion_year", getattr(self.instance, "completion_year", None))
            if not month or not year:
                raise serializers.ValidationError(
                    {"completion_month": "Completion month and year are required for completed projects."}
                )
        else:
            attrs["completion_month"] = None
            attrs["completion_year"] = None
        return attrs

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["skills"] = SkillSummarySerializer(instance.skills.all(), many=True).data
        return data


class ExperienceSerializer(FormDataMixin, serializers.ModelSerializer):
    technologies = serializers.PrimaryKeyRelatedField(many=True, queryset=Skill.objects.all(), required=False)
    skill_tags = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False)

    class Meta:
        model = Experience
        fields = [
            "id",
            "category",
            "company_name",
            "role",
            "employment_type",
            "location",
            "status",
            "start_month",
            "start_year",
            "end_month",
            "end_year",
            "description",
            "technologies",
            "skill_tags",
            "company_link",
            "company_logo",
            "company_logo_url",
            "offer_letter_url",
            "completion_certificate_url",
            "order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "company_logo_url",
            "offer_letter_url",
            "completion_certificate_url",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {"company_logo": {"write_only": True}}

    def validate_skill_tags(self, value):
        return [tag.strip() for tag in value if tag and tag.strip()]

    def validate(self, attrs):
        status = attrs.get("status", getattr(self.instance, "status", None) or Experience.COMPLETED)
        if status == Experience.COMPLETED:
            month = attrs.get("end_month", getattr(self.instance, "end_month", None))
            year = attrs.get("end_year", getattr(self.instance, "end_year", None))
            if not month or not year:
                raise serializers.ValidationError(
                    {"end_month": "End month and year are required for completed experiences."}
                )
        else:
            attrs["end_month"] = None
            attrs["end_year"] = None
        return attrs

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["technologies"] = SkillSummarySerializer(instance.technologies.all(), many=True).data
        return data


class ExperienceDocumentSerializer(serializers.Serializer):
    file = serializers.FileField()


class EducationSerializer(FormDataMixin, serializers.ModelSerializer):
    class Meta:
        model = Education
        fields = [
            "id",
            "degree",
            "specialization",
            "institute_name",
            "location",
            "status",
            "completion_year",
            "expected_completion_year",
            "grade",
            "logo",
            "logo_url",
            "order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["logo_url", "created_at", "updated_at"]
        extra_kwargs = {"logo": {"write_only": True}}

    def validate(self, attrs):
        status = attrs.get("status", getattr(self.instance, "status", None))
        if status == Education.COMPLETED:
            year = attrs.get("completion_year", getattr(self.instance, "completion_year", None))
            if not year:
                raise serializers.ValidationError(
                    {"completion_year": "Completion year is required for completed education."}
                )
            attrs["completion_year"] = year
            attrs["expected_completion_year"] = None
        elif status == Education.PURSUING:
            year = attrs.get("expected_completion_year", getattr(self.instance, "expected_completion_year", None))
            if not year:
                raise serializers.ValidationError(
                    {"expected_completion_year": "Expected completion year is required for pursuing education."}
                )
            attrs["expected_completion_year"] = year
            attrs["completion_year"] = None
        return attrs


class CertificationSerializer(FormDataMixin, serializers.ModelSerializer):
    skills = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = Certification
        fields = [
            "id",
            "title",
            "organization",
            "completion_month",
            "completion_year",
            "credential_id",
            "credential_url",
            "description",
            "skills",
            "pinned",
            "certificate",
            "certificate_url",
            "image",
            "image_url",
            "order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["certificate_url", "image_url", "created_at", "updated_at"]
        extra_kwargs = {"certificate": {"write_only": True}, "image": {"write_only": True}}


class OrganizationSerializer(serializers.Serializer):
    name = serializers.CharField()
    image_url = serializers.CharField(allow_blank=True)
    count = serializers.IntegerField()


class AwardSocialLinkSerializer(serializers.Serializer):
    platform = serializers.ChoiceField(choices=["linkedin"])
    url = serializers.URLField()


class AwardSerializer(FormDataMixin, serializers.ModelSerializer):
    social_links = serializers.ListField(child=AwardSocialLinkSerializer(), required=False)
    association = serializers.SerializerMethodField()
    association_label = serializers.SerializerMethodField()

    class Meta:
        model = Award
        fields = [
            "id",
            "title",
            "organization",
            "associated_type",
            "associated_id",
            "association",
            "association_label",
            "description",
            "issue_month",
            "issue_year",
            "certificate",
            "certificate_url",
            "certificate_link",
            "image",
            "image_url",
            "social_links",
            "featured",
            "order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["certificate_url", "image_url", "created_at", "updated_at"]
        extra_kwargs = {"certificate": {"write_only": True}, "image": {"write_only": True}}

    def validate(self, attrs):
        kind = attrs.get("associated_type", getattr(self.instance, "associated_type", None) or Award.NONE)
        if kind == Award.NONE:
            attrs["associated_id"] = None
        else:
            ref = attrs.get("associated_id", getattr(self.instance, "associated_id", None))
            if not ref:
                raise serializers.ValidationError(
                    {"associated_id": f"An associated {kind} id is required unless the award is independent."}
                )
        return attrs

    def get_association(self, obj):
        return services.resolve_association(obj)

    def get_association_label(self, obj):
        return services.association_label(obj)


class ArticleSocialLinkSerializer(serializers.Serializer):
    platform = serializers.ChoiceField(choices=Article.PLATFORMS)
    url = serializers.URLField()
    custom_name = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs["platform"] == "Custom" and not attrs.get("custom_name"):
            raise serializers.ValidationError({"custom_name": "Custom links require a name."})
        return attrs


class ArticleSerializer(FormDataMixin, serializers.ModelSerializer):
    social_links = serializers.ListField(child=ArticleSocialLinkSerializer(), required=False)

    class Meta:
        model = Article
        fields = [
            "id",
            "title",
            "description",
            "thumbnail",
            "thumbnail_url",
            "social_links",
            "status",
            "published_at",
            "order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["thumbnail_url", "published_at", "created_at", "updated_at"]
        extra_kwargs = {"thumbnail": {"write_only": True}}


class TestimonialSerializer(FormDataMixin, serializers.ModelSerializer):
    class Meta:
        model = Testimonial
        fields = [
            "id",
            "full_name",
            "email",
            "rating",
            "feedback",
            "website_link",
            "profile_image",
            "profile_image_url",
            "is_approved",
            "order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["profile_image_url", "is_approved", "created_at", "updated_at"]
        extra_kwargs = {
            "profile_image": {"write_only": True},
            "rating": {"error_messages": {
                "min_value": "Rating must be between 1 and 5",
                "max_value": "Rating must be between 1 and 5",
            }},
        }

    def validate_email(self, value):
        return value.lower()


class PublicTestimonialSerializer(TestimonialSerializer):
    """Visitor-facing testimonials: email is accepted on submit, never echoed back."""

    class Meta(TestimonialSerializer.Meta):
        extra_kwargs = {**TestimonialSerializer.Meta.extra_kwargs, "email": {"write_only": True}}


class ContactMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContactMessage
        fields = ["id", "full_name", "email", "phone", "reason", "message", "is_read", "created_at"]
        read_only_fields = ["is_read", "created_at"]

    def validate_email(self, value):
        return value.lower()

    def validate_phone(self, value):
        if not PHONE_RE.match(re.sub(r"[\s\-()]", "", value)):
            raise serializers.ValidationError("Please provide a valid phone number")
        return value


class ContactStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    unread = serializers.IntegerField()
    this_month = serializers.IntegerField()


class ContactBulkReadSerializer(serializers.Serializer):
    ids = serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=False,
        error_messages={"required": "Contact IDs array is required", "not_a_list": "Contact IDs array is required"},
    )


class FloatingMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = FloatingMessage
        fields = ["id", "message", "highlight_text", "is_active", "created_at", "updated_at"]
        read_only_fields = ["created_at", "updated_at"]
        extra_kwargs = {
            "message": {"error_messages": {
                "required": "Message is required",
                "blank": "Message is required",
                "max_length": "Message must be less than 200 characters",
            }},
        }


class PublicFloatingMessageSerializer(serializers.Serializer):
    message = serializers.CharField(allow_null=True)
    highlight_text = serializers.CharField(allow_blank=True)


class ProfileSerializer(FormDataMixin, serializers.ModelSerializer):
    tags = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = Profile
        fields = [
            "id",
            "title",
            "tags",
            "description",
            "email",
            "place",
            "profile_image",
            "profile_image_url",
            "resume",
            "resume_url",
            "about_image",
            "about_image_url",
            "logo",
            "logo_url",
            "updated_at",
        ]
        read_only_fields = ["profile_image_url", "resume_url", "about_image_url", "logo_url", "updated_at"]
        extra_kwargs = {
            "profile_image": {"write_only": True},
            "resume": {"write_only": True},
            "about_image": {"write_only": True},
            "logo": {"write_only": True},
        }


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "username", "email", "first_name", "last_name", "is_staff", "last_login"]
        read_only_fields = fields


class AdminUserCreateSerializer(serializers.ModelSerializer):
    """New staff login; the password goes through Django's validators."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "email", "password"]

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("User already exists")
        return value

    def validate(self, attrs):
        validate_password(attrs["password"], User(username=attrs["username"], email=attrs["email"]))
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password"],
            is_staff=True,
        )

    def to_representation(self, instance):
        return UserSerializer(instance).data


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value):
        if not self.context["request"].user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect")
        return value

    def validate_new_password(self, value):
        validate_password(value, self.context["request"].user)
        return value

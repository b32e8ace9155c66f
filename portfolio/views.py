import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Prefetch
from django_filters import rest_framework as django_filters
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import exceptions, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

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
from .ordering import month_ordinal_expression
from .permissions import is_admin
from .serializers import (
    AdminUserCreateSerializer,
    ArticleSerializer,
    AwardSerializer,
    CertificationSerializer,
    ChangePasswordSerializer,
    ContactBulkReadSerializer,
    ContactMessageSerializer,
    ContactStatsSerializer,
    EducationSerializer,
    ExperienceDocumentSerializer,
    ExperienceSerializer,
    FloatingMessageSerializer,
    OrganizationSerializer,
    ProfileSerializer,
    ProjectSerializer,
    PublicFloatingMessageSerializer,
    PublicTestimonialSerializer,
    ReorderItemSerializer,
    SkillCategorySerializer,
    SkillCategoryWithSkillsSerializer,
    SkillSerializer,
    TestimonialSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


class ContactThrottle(AnonRateThrottle):
    scope = "contact"


class TestimonialThrottle(AnonRateThrottle):
    scope = "testimonial"


def flag_toggle(field, url_path):
    """Build a ``PUT <id>/<url_path>`` action that flips one boolean column."""

    def toggle(self, request, pk=None):
        instance = self.get_object()
        services.toggle_flag(instance, field)
        logger.info("%s %s: %s -> %s", type(instance).__name__, instance.pk, field, getattr(instance, field))
        return Response(self.get_serializer(instance).data)

    toggle.__name__ = f"toggle_{field}"
    toggle.__doc__ = f"Flip ``{field}`` on one record."
    return action(detail=True, methods=["put"], url_path=url_path)(toggle)


class ContentViewSet(viewsets.ModelViewSet):
    """CRUD over one content model through its repository.

    PUT replaces only the fields it carries; ids that match nothing surface as
    404 with the model's name in the message.
    """

    def get_queryset(self):
        return super().get_queryset().find_many()

    def get_object(self):
        lookup = self.lookup_url_kwarg or self.lookup_field
        obj = self.get_queryset().find_by_id(self.kwargs[lookup])
        self.check_object_permissions(self.request, obj)
        return obj

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    def write(self, serializer):
        """Persist validated data with ``insert``/``update_by_id``; m2m sets follow."""
        model = serializer.Meta.model
        data = dict(serializer.validated_data)
        related = {f.name: data.pop(f.name) for f in model._meta.many_to_many if f.name in data}
        with transaction.atomic():
            if serializer.instance is None:
                obj = model.objects.insert(**data)
            else:
                obj = model.objects.update_by_id(serializer.instance.pk, **data)
            for name, value in related.items():
                getattr(obj, name).set(value)
        serializer.instance = obj
        return obj

    def perform_create(self, serializer):
        self.write(serializer)

    def perform_update(self, serializer):
        self.write(serializer)

    def perform_destroy(self, instance):
        type(instance).objects.delete_by_id(instance.pk)


class ReorderMixin:
    @extend_schema(request=ReorderItemSerializer(many=True), responses={200: None})
    @action(detail=False, methods=["put"])
    def reorder(self, request):
        """Apply ``[{"id", "order"}, ...]`` (or ``{"items": [...]}``) order weights."""
        payload = request.data.get("items") if isinstance(request.data, dict) else request.data
        serializer = ReorderItemSerializer(data=payload, many=True)
        serializer.is_valid(raise_exception=True)
        model = self.get_queryset().model
        touched = model.objects.reorder(serializer.validated_data)
        return Response({"message": f"{touched} items reordered"})


class SkillCategoryViewSet(ReorderMixin, ContentViewSet):
    queryset = SkillCategory.objects.all()
    serializer_class = SkillCategorySerializer

    def perform_destroy(self, instance):
        if instance.skills.exists():
            raise exceptions.ValidationError(
                "Cannot delete a category that still has skills. Move or delete its skills first."
            )
        super().perform_destroy(instance)


class SkillViewSet(ReorderMixin, ContentViewSet):
    queryset = Skill.objects.select_related("category")
    serializer_class = SkillSerializer

    def _categories(self):
        return SkillCategory.objects.prefetch_related(Prefetch("skills", queryset=Skill.objects.all()))

    @extend_schema(responses={200: SkillCategoryWithSkillsSerializer(many=True)})
    def list(self, request, *args, **kwargs):
        """Skills grouped under their categories."""
        return Response(SkillCategoryWithSkillsSerializer(self._categories(), many=True).data)

    @extend_schema(responses={200: SkillSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path=r"category/(?P<category_id>[^/.]+)")
    def by_category(self, request, category_id=None):
        category = SkillCategory.objects.find_by_id(category_id)
        return Response(self.get_serializer(self.get_queryset().filter(category=category), many=True).data)


class ProjectViewSet(ReorderMixin, ContentViewSet):
    queryset = Project.objects.prefetch_related("skills")
    serializer_class = ProjectSerializer
    filterset_fields = ["show_on_home", "status"]

    toggle_show_on_home = flag_toggle("show_on_home", "toggle-home")


def _document_action(field, label):
    def document(self, request, pk=None):
        experience = self.get_object()
        if request.method == "DELETE":
            experience = Experience.objects.update_by_id(experience.pk, **{field: None})
            return Response(self.get_serializer(experience).data)
        upload = ExperienceDocumentSerializer(data=request.data)
        upload.is_valid(raise_exception=True)
        experience = Experience.objects.update_by_id(experience.pk, **{field: upload.validated_data["file"]})
        logger.info("Experience %s: %s uploaded", experience.pk, label)
        return Response(self.get_serializer(experience).data)

    document.__name__ = field
    document.__doc__ = f"Upload (POST) or clear (DELETE) the {label}."
    return extend_schema(request=ExperienceDocumentSerializer, responses={200: ExperienceSerializer})(
        action(detail=True, methods=["post", "delete"], url_path=field.replace("_", "-"))(document)
    )


class ExperienceViewSet(ReorderMixin, ContentViewSet):
    serializer_class = ExperienceSerializer
    filterset_fields = ["category", "status"]

    def get_queryset(self):
        return (
            Experience.objects.prefetch_related("technologies")
            .annotate(start_month_ordinal=month_ordinal_expression("start_month"))
            .find_many(ordering=["order", "-start_year", "-start_month_ordinal", "-id"])
        )

    offer_letter = _document_action("offer_letter", "offer letter")
    completion_certificate = _document_action("completion_certificate", "completion certificate")


class EducationViewSet(ReorderMixin, ContentViewSet):
    queryset = Education.objects.all()
    serializer_class = EducationSerializer
    filterset_fields = ["status"]


class CertificationViewSet(ReorderMixin, ContentViewSet):
    serializer_class = CertificationSerializer
    filterset_fields = ["pinned", "organization"]

    def get_queryset(self):
        return Certification.objects.annotate(
            completion_month_ordinal=month_ordinal_expression("completion_month")
        ).find_many(ordering=["-pinned", "-completion_year", "-completion_month_ordinal", "order", "-created_at"])

    toggle_pinned = flag_toggle("pinned", "toggle-pinned")

    @extend_schema(responses={200: OrganizationSerializer(many=True)})
    @action(detail=False, methods=["get"], permission_classes=[IsAdminUser])
    def organizations(self, request):
        """Issuing organizations already on file, with their latest logo."""
        certs = Certification.objects.only("organization", "image_url", "created_at")
        return Response(OrganizationSerializer(services.distinct_organizations(certs), many=True).data)


class AwardViewSet(ReorderMixin, ContentViewSet):
    serializer_class = AwardSerializer
    filterset_fields = ["featured", "associated_type"]

    def get_queryset(self):
        return Award.objects.annotate(
            issue_month_ordinal=month_ordinal_expression("issue_month")
        ).find_many(ordering=["order", "-issue_year", "-issue_month_ordinal", "-created_at"])

    toggle_featured = flag_toggle("featured", "toggle-featured")

    @extend_schema(responses={200: None})
    @action(detail=False, methods=["get"], permission_classes=[IsAdminUser])
    def associations(self, request):
        """Experiences and education records an award can be attached to."""
        return Response(services.association_choices())


class ArticleFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")

    class Meta:
        model = Article
        fields = ["status"]


class ArticleViewSet(ReorderMixin, ContentViewSet):
    queryset = Article.objects.all()
    serializer_class = ArticleSerializer
    filterset_class = ArticleFilter

    @action(detail=True, methods=["put"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):
        """Draft <-> Published."""
        article = services.toggle_article_status(self.get_object())
        logger.info("Article %s is now %s", article.pk, article.status)
        return Response(self.get_serializer(article).data)


class TestimonialViewSet(ReorderMixin, ContentViewSet):
    """Visitors read approved testimonials and may submit new, unapproved ones."""

    filterset_fields = ["is_approved", "rating"]

    def get_queryset(self):
        return Testimonial.objects.find_many(filters=None if is_admin(self.request) else {"is_approved": True})

    def get_serializer_class(self):
        return TestimonialSerializer if is_admin(self.request) else PublicTestimonialSerializer

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        return super().get_permissions()

    def get_throttles(self):
        if self.action == "create":
            return [TestimonialThrottle()]
        return super().get_throttles()

    def create(self, request, *args, **kwargs):
        response = super().create(request, *args, **kwargs)
        response.data = {
            "message": "Thank you for your feedback! It will appear once approved.",
            "testimonial": response.data,
        }
        return response

    toggle_is_approved = flag_toggle("is_approved", "toggle-approval")


class ContactMessageFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=[("read", "read"), ("unread", "unread")], method="filter_status")

    class Meta:
        model = ContactMessage
        fields = ["reason"]

    def filter_status(self, queryset, name, value):
        return queryset.filter(is_read=(value == "read"))


class ContactMessageViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Public contact form plus the admin inbox."""

    queryset = ContactMessage.objects.all()
    serializer_class = ContactMessageSerializer
    filterset_class = ContactMessageFilter

    get_object = ContentViewSet.get_object
    perform_destroy = ContentViewSet.perform_destroy

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        return [IsAdminUser()]

    def get_throttles(self):
        if self.action == "create":
            return [ContactThrottle()]
        return super().get_throttles()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = services.submit_contact_message(serializer.validated_data)
        return Response(
            {
                "message": "Thank you for your message! I will get back to you soon.",
                "contact": self.get_serializer(message).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["put"])
    def read(self, request, pk=None):
        message = self.get_object()
        if not message.is_read:
            message.is_read = True
            message.save(update_fields=["is_read", "updated_at"])
        return Response(self.get_serializer(message).data)

    @extend_schema(request=ContactBulkReadSerializer, responses={200: None})
    @action(detail=False, methods=["put"], url_path="read")
    def read_many(self, request):
        """Mark ``{"ids": [...]}`` read in one request."""
        serializer = ContactBulkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = services.mark_contact_messages_read(serializer.validated_data["ids"])
        return Response({"message": "Contacts marked as read successfully", "updated": updated})

    @extend_schema(responses={200: ContactStatsSerializer})
    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(ContactStatsSerializer(services.contact_stats()).data)


class FloatingMessageView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: PublicFloatingMessageSerializer})
    def get(self, request):
        current = services.current_floating_message()
        if current is None:
            return Response({"message": None, "highlight_text": ""})
        return Response({"message": current.message, "highlight_text": current.highlight_text})


class FloatingMessageAdminViewSet(ContentViewSet):
    """Banner management. Saving or toggling one active deactivates the rest."""

    queryset = FloatingMessage.objects.all()
    serializer_class = FloatingMessageSerializer
    permission_classes = [IsAdminUser]

    def _save(self, serializer):
        with transaction.atomic():
            message = self.write(serializer)
            if message.is_active:
                services.activate_floating_message(message)

    def perform_create(self, serializer):
        self._save(serializer)

    def perform_update(self, serializer):
        self._save(serializer)

    @action(detail=True, methods=["patch"])
    def toggle(self, request, pk=None):
        message = services.toggle_floating_message(self.get_object())
        return Response(self.get_serializer(message).data)


class ProfileView(APIView):
    """The singleton profile: public read, admin multipart update."""

    @extend_schema(responses={200: ProfileSerializer})
    def get(self, request):
        return Response(ProfileSerializer(Profile.load()).data)

    @extend_schema(request=ProfileSerializer, responses={200: ProfileSerializer})
    def put(self, request):
        serializer = ProfileSerializer(Profile.load(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


PROFILE_ASSETS = {
    "profile-image": "profile_image",
    "resume": "resume",
    "about-image": "about_image",
    "logo": "logo",
}


class ProfileAssetView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(
        parameters=[OpenApiParameter("asset", str, OpenApiParameter.PATH, enum=list(PROFILE_ASSETS))],
        responses={200: ProfileSerializer},
    )
    def delete(self, request, asset):
        field = PROFILE_ASSETS.get(asset)
        if field is None:
            raise exceptions.NotFound(f"Unknown profile asset '{asset}'")
        profile = Profile.load()
        setattr(profile, field, None)
        profile.save()
        return Response(ProfileSerializer(profile).data)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer})
    def get(self, request):
        return Response(UserSerializer(request.user).data)


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ChangePasswordSerializer, responses={200: None})
    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data["new_password"])
        request.user.save(update_fields=["password"])
        logger.info("Password changed for %s", request.user.get_username())
        return Response({"message": "Password updated"})


class AdminUserViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Staff logins: list, add and remove admin accounts."""

    queryset = User.objects.filter(is_staff=True).order_by("-date_joined", "-id")
    permission_classes = [IsAdminUser]
    filterset_fields = ["is_active"]

    def get_serializer_class(self):
        return AdminUserCreateSerializer if self.action == "create" else UserSerializer

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info("Admin %s created by %s", user.get_username(), self.request.user.get_username())

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise exceptions.ValidationError("Cannot delete your own account")
        logger.info("Admin %s deleted by %s", instance.get_username(), self.request.user.get_username())
        instance.delete()

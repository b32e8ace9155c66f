"""
URL configuration for the portfolio_site project.

Every API route lives under ``/api/``; the trailing slash is optional so the
same paths work for the admin UI, the public site and plain curl.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
import os
from rest_framework import routers
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
)
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from portfolio import views as portfolio_views
from django.conf import settings
from django.conf.urls.static import static

router = routers.DefaultRouter()
# DRF only takes a boolean here; the pattern itself makes the slash optional
router.trailing_slash = "/?"
router.register(r"skill-categories", portfolio_views.SkillCategoryViewSet, basename="skill-category")
router.register(r"skills", portfolio_views.SkillViewSet, basename="skill")
router.register(r"projects", portfolio_views.ProjectViewSet, basename="project")
router.register(r"experiences", portfolio_views.ExperienceViewSet, basename="experience")
router.register(r"education", portfolio_views.EducationViewSet, basename="education")
router.register(r"certifications", portfolio_views.CertificationViewSet, basename="certification")
router.register(r"awards", portfolio_views.AwardViewSet, basename="award")
router.register(r"articles", portfolio_views.ArticleViewSet, basename="article")
router.register(r"testimonials", portfolio_views.TestimonialViewSet, basename="testimonial")
router.register(r"contact", portfolio_views.ContactMessageViewSet, basename="contact")
router.register(r"floating-message/admin", portfolio_views.FloatingMessageAdminViewSet, basename="floating-message-admin")
router.register(r"auth/users", portfolio_views.AdminUserViewSet, basename="admin-user")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health", lambda request: JsonResponse({"status": "ok"})),
    path(
        "api/info",
        lambda request: JsonResponse(
            {
                "app": "portfolio-site",
                "env": os.environ.get("DJANGO_ENV", "dev"),
                "debug": os.environ.get("DEBUG", "True"),
                "version": "1.0.0",
            }
        ),
    ),
    path("api/floating-message", portfolio_views.FloatingMessageView.as_view(), name="floating-message"),
    path("api/profile", portfolio_views.ProfileView.as_view(), name="profile"),
    path("api/profile/<str:asset>", portfolio_views.ProfileAssetView.as_view(), name="profile-asset"),
    path("api/auth/jwt/create", TokenObtainPairView.as_view(), name="jwt-create"),
    path("api/auth/jwt/refresh", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("api/auth/me", portfolio_views.MeView.as_view(), name="auth-me"),
    path("api/auth/change-password", portfolio_views.ChangePasswordView.as_view(), name="auth-change-password"),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
    path("api/", include(router.urls)),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

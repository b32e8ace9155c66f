import io

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework.test import APIClient, RequestsClient
from rest_framework_simplejwt.tokens import RefreshToken

from portfolio.admin_client import PortfolioClient
from portfolio.models import SkillCategory, Skill

STAFF_PASSWORD = "correct-horse-battery"


def make_image(name="image.png", color=(102, 126, 234)):
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buf, format="PNG")
    return SimpleUploadedFile(name, buf.getvalue(), content_type="image/png")


@pytest.fixture
def image():
    return make_image()


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(
        username="owner", email="owner@example.com", password=STAFF_PASSWORD, is_staff=True
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(staff_user):
    client = APIClient()
    token = RefreshToken.for_user(staff_user).access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def http_client(db):
    """``PortfolioClient`` wired to the Django app in-process."""
    return PortfolioClient("http://testserver/api", session=RequestsClient())


@pytest.fixture
def staff_http_client(http_client, staff_user):
    http_client.login(staff_user.username, STAFF_PASSWORD)
    return http_client


@pytest.fixture
def category(db):
    return SkillCategory.objects.create(name="Backend")


@pytest.fixture
def skill(category):
    return Skill.objects.create(name="Django", category=category, image=make_image("django.png"))

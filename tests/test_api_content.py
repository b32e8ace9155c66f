import json

import pytest

from portfolio.managers import ContentManager, ContentQuerySet
from portfolio.models import Article, Award, Certification, Education, Experience, Project, Skill, SkillCategory

from .conftest import make_image

pytestmark = pytest.mark.django_db


def _project_payload(**overrides):
    payload = {
        "title": "Portfolio",
        "description": "Personal site",
        "status": "Ongoing",
        "image": make_image("cover.png"),
        "links": json.dumps([{"type": "GitHub", "url": "https://github.com/me/site"}]),
    }
    payload.update(overrides)
    return payload


# Projects

def test_create_ongoing_project_without_completion_date(auth_client):
    resp = auth_client.post("/api/projects", _project_payload(), format="multipart")
    assert resp.status_code == 201, resp.json()
    project = Project.objects.get(pk=resp.json()["id"])
    assert project.completion_month is None
    assert project.completion_year is None
    assert project.image_url
    assert project.links == [{"type": "GitHub", "url": "https://github.com/me/site", "custom_name": ""}]


def test_completed_project_requires_completion_month(auth_client):
    resp = auth_client.post(
        "/api/projects", _project_payload(status="Completed", completion_year=2024), format="multipart"
    )
    assert resp.status_code == 400
    assert "required" in resp.json()["message"]
    assert not Project.objects.exists()


def test_project_image_required_on_create(auth_client):
    payload = _project_payload()
    del payload["image"]
    resp = auth_client.post("/api/projects", payload, format="multipart")
    assert resp.status_code == 400
    assert "image" in resp.json()["errors"]


def test_switching_project_to_ongoing_clears_completion(auth_client):
    resp = auth_client.post(
        "/api/projects",
        _project_payload(status="Completed", completion_month="May", completion_year=2024),
        format="multipart",
    )
    pk = resp.json()["id"]
    resp = auth_client.put(f"/api/projects/{pk}", {"status": "Ongoing"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["completion_month"] is None
    assert resp.json()["title"] == "Portfolio"


def test_custom_link_needs_name(auth_client):
    links = json.dumps([{"type": "Custom", "url": "https://example.com"}])
    resp = auth_client.post("/api/projects", _project_payload(links=links), format="multipart")
    assert resp.status_code == 400


def test_project_skills_are_returned_nested(auth_client, skill):
    resp = auth_client.post("/api/projects", _project_payload(skills=json.dumps([skill.pk])), format="multipart")
    assert resp.status_code == 201
    assert resp.json()["skills"] == [{"id": skill.pk, "name": "Django", "image_url": skill.image_url}]


def test_delete_missing_project_is_404_and_harmless(auth_client):
    auth_client.post("/api/projects", _project_payload(), format="multipart")
    resp = auth_client.delete("/api/projects/987654")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Project not found"
    assert Project.objects.count() == 1


def test_home_filter_and_toggle(auth_client, api_client):
    pk = auth_client.post("/api/projects", _project_payload(), format="multipart").json()["id"]
    assert api_client.get("/api/projects", {"show_on_home": "true"}).json() == []

    assert auth_client.put(f"/api/projects/{pk}/toggle-home").json()["show_on_home"] is True
    assert [p["id"] for p in api_client.get("/api/projects", {"show_on_home": "true"}).json()] == [pk]


def test_limit_slices_collection(auth_client, api_client):
    for i in range(4):
        auth_client.post("/api/projects", _project_payload(title=f"P{i}", order=i), format="multipart")
    resp = api_client.get("/api/projects", {"limit": 2})
    assert [p["title"] for p in resp.json()] == ["P0", "P1"]
    assert resp["X-Total-Count"] == "4"


def test_routes_resolve_with_and_without_trailing_slash(auth_client, api_client):
    pk = auth_client.post("/api/projects", _project_payload(), format="multipart").json()["id"]
    for path in ("/api/projects", "/api/projects/", f"/api/projects/{pk}", f"/api/projects/{pk}/"):
        assert api_client.get(path).status_code == 200, path
    assert auth_client.put(f"/api/projects/{pk}/toggle-home").status_code == 200
    assert auth_client.put(f"/api/projects/{pk}/toggle-home/").status_code == 200
    assert auth_client.delete("/api/projects/424242").status_code == 404
    assert auth_client.delete(f"/api/projects/{pk}").status_code == 204


def test_api_writes_go_through_repository(auth_client, api_client, monkeypatch):
    calls = []

    def spy_on(cls, name):
        original = getattr(cls, name)

        def spy(self, *args, **kwargs):
            calls.append(name)
            return original(self, *args, **kwargs)

        monkeypatch.setattr(cls, name, spy)

    for name in ("insert", "update_by_id", "delete_by_id"):
        spy_on(ContentManager, name)
    spy_on(ContentQuerySet, "find_many")

    pk = auth_client.post("/api/projects", _project_payload(), format="multipart").json()["id"]
    auth_client.put(f"/api/projects/{pk}", {"title": "Renamed"}, format="json")
    api_client.get("/api/projects")
    auth_client.delete(f"/api/projects/{pk}")

    writes = [c for c in calls if c != "find_many"]
    assert writes == ["insert", "update_by_id", "delete_by_id"]
    assert "find_many" in calls
    assert not Project.objects.exists()


def test_reorder_projects(auth_client, api_client):
    a = auth_client.post("/api/projects", _project_payload(title="A"), format="multipart").json()["id"]
    b = auth_client.post("/api/projects", _project_payload(title="B"), format="multipart").json()["id"]
    resp = auth_client.put("/api/projects/reorder", [{"id": a, "order": 5}, {"id": b, "order": 1}], format="json")
    assert resp.status_code == 200
    assert [p["title"] for p in api_client.get("/api/projects").json()] == ["B", "A"]


# Auth gate

def test_writes_require_token(api_client):
    resp = api_client.post("/api/projects", _project_payload(), format="multipart")
    assert resp.status_code == 401
    assert "message" in resp.json()


def test_invalid_token_is_401(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
    assert api_client.get("/api/auth/me").status_code == 401


def test_non_staff_cannot_write(api_client, django_user_model):
    user = django_user_model.objects.create_user(username="visitor", password="pw-12345-long")
    api_client.force_authenticate(user)
    resp = api_client.post("/api/education", {"degree": "x"}, format="json")
    assert resp.status_code == 403


# Skills

def test_skills_grouped_by_category(api_client, skill):
    data = api_client.get("/api/skills").json()
    assert data[0]["name"] == "Backend"
    assert data[0]["skills"][0]["name"] == "Django"


def test_skill_name_unique_within_category(auth_client, skill):
    resp = auth_client.post(
        "/api/skills",
        {"name": "django", "category_id": skill.category_id, "image": make_image()},
        format="multipart",
    )
    assert resp.status_code == 400
    assert "already exists" in resp.json()["message"]


def test_skills_by_category(api_client, skill):
    other = SkillCategory.objects.create(name="Frontend")
    Skill.objects.create(name="React", category=other, image=make_image("react.png"))
    data = api_client.get(f"/api/skills/category/{skill.category_id}").json()
    assert [s["name"] for s in data] == ["Django"]


def test_category_with_skills_cannot_be_deleted(auth_client, skill):
    resp = auth_client.delete(f"/api/skill-categories/{skill.category_id}")
    assert resp.status_code == 400
    assert SkillCategory.objects.filter(pk=skill.category_id).exists()


def test_category_name_unique_case_insensitive(auth_client, category):
    resp = auth_client.post("/api/skill-categories", {"name": "backend"}, format="json")
    assert resp.status_code == 400


# Experience

def _experience_payload(**overrides):
    payload = {
        "category": "Job",
        "company_name": "Acme",
        "role": "Engineer",
        "employment_type": "Full-time",
        "location": "Remote",
        "status": "Completed",
        "start_month": "January",
        "start_year": 2021,
        "end_month": "June",
        "end_year": 2023,
        "description": "Built things",
        "skill_tags": json.dumps([" Python ", "", "Celery"]),
    }
    payload.update(overrides)
    return payload


def test_completed_experience_requires_end_date(auth_client):
    payload = _experience_payload()
    del payload["end_year"]
    resp = auth_client.post("/api/experiences", payload, format="multipart")
    assert resp.status_code == 400
    assert "required" in resp.json()["message"]


def test_ongoing_experience_drops_end_date(auth_client):
    resp = auth_client.post("/api/experiences", _experience_payload(status="Ongoing"), format="multipart")
    assert resp.status_code == 201
    body = resp.json()
    assert body["end_month"] is None and body["end_year"] is None
    assert body["skill_tags"] == ["Python", "Celery"]


def test_invalid_month_rejected(auth_client):
    resp = auth_client.post("/api/experiences", _experience_payload(start_month="Smarch"), format="multipart")
    assert resp.status_code == 400


def test_experience_offer_letter_upload_and_clear(auth_client):
    pk = auth_client.post("/api/experiences", _experience_payload(), format="multipart").json()["id"]
    from django.core.files.uploadedfile import SimpleUploadedFile

    pdf = SimpleUploadedFile("offer.pdf", b"%PDF-1.4 test", content_type="application/pdf")
    resp = auth_client.post(f"/api/experiences/{pk}/offer-letter", {"file": pdf}, format="multipart")
    assert resp.status_code == 200
    assert resp.json()["offer_letter_url"]

    resp = auth_client.delete(f"/api/experiences/{pk}/offer-letter")
    assert resp.json()["offer_letter_url"] == ""
    assert not Experience.objects.get(pk=pk).offer_letter


def test_experience_list_newest_start_first(api_client):
    base = dict(category="Job", company_name="C", role="R", employment_type="Full-time", location="L",
                status="Ongoing", description="d")
    Experience.objects.create(start_month="February", start_year=2022, **base)
    Experience.objects.create(start_month="October", start_year=2022, **{**base, "company_name": "Newer"})
    Experience.objects.create(start_month="May", start_year=2019, **{**base, "company_name": "Oldest"})
    names = [e["company_name"] for e in api_client.get("/api/experiences").json()]
    assert names == ["Newer", "C", "Oldest"]


# Education

def test_education_completed_and_pursuing(auth_client):
    resp = auth_client.post(
        "/api/education",
        {"degree": "B.Tech", "institute_name": "Uni", "status": "Completed", "completion_year": 2020,
         "expected_completion_year": 2021},
        format="json",
    )
    assert resp.status_code == 201
    assert resp.json()["expected_completion_year"] is None

    resp = auth_client.post(
        "/api/education",
        {"degree": "M.Tech", "institute_name": "Uni", "status": "Pursuing", "completion_year": 2020},
        format="json",
    )
    assert resp.status_code == 400
    assert "required" in resp.json()["message"]


def test_education_switch_to_pursuing(auth_client):
    edu = Education.objects.create(degree="B", institute_name="U", status="Completed", completion_year=2020)
    resp = auth_client.put(
        f"/api/education/{edu.pk}", {"status": "Pursuing", "expected_completion_year": 2027}, format="json"
    )
    assert resp.status_code == 200
    edu.refresh_from_db()
    assert edu.completion_year is None
    assert edu.expected_completion_year == 2027


# Certifications and awards

def test_toggle_pinned_twice_is_identity(auth_client):
    cert = Certification.objects.create(title="AWS", organization="Amazon", completion_month="May", completion_year=2023)
    assert auth_client.put(f"/api/certifications/{cert.pk}/toggle-pinned").json()["pinned"] is True
    assert auth_client.put(f"/api/certifications/{cert.pk}/toggle-pinned").json()["pinned"] is False


def test_pinned_filter_and_organizations(auth_client, api_client):
    Certification.objects.create(title="A", organization="Amazon", completion_month="May", completion_year=2023, pinned=True)
    Certification.objects.create(title="B", organization="Google", completion_month="May", completion_year=2022)
    assert [c["title"] for c in api_client.get("/api/certifications", {"pinned": "true"}).json()] == ["A"]

    assert api_client.get("/api/certifications/organizations").status_code == 401
    orgs = auth_client.get("/api/certifications/organizations").json()
    assert [o["name"] for o in orgs] == ["Amazon", "Google"]


def test_award_requires_reference_unless_independent(auth_client):
    base = {"title": "Best", "organization": "Org", "description": "d", "issue_month": "May", "issue_year": 2023}
    resp = auth_client.post("/api/awards", {**base, "associated_type": "experience"}, format="json")
    assert resp.status_code == 400

    resp = auth_client.post("/api/awards", {**base, "associated_type": "none", "associated_id": 5}, format="json")
    assert resp.status_code == 201
    assert resp.json()["associated_id"] is None
    assert resp.json()["association_label"] == "Independent Achievement"


def test_award_reference_is_not_checked(auth_client):
    base = {"title": "Best", "organization": "Org", "description": "d", "issue_month": "May", "issue_year": 2023}
    resp = auth_client.post("/api/awards", {**base, "associated_type": "education", "associated_id": 31337}, format="json")
    assert resp.status_code == 201
    assert resp.json()["association"] is None


def test_toggle_featured_and_filter(auth_client, api_client):
    award = Award.objects.create(title="A", organization="O", description="d", issue_month="May", issue_year=2023)
    auth_client.put(f"/api/awards/{award.pk}/toggle-featured")
    assert [a["id"] for a in api_client.get("/api/awards", {"featured": "true"}).json()] == [award.pk]
    auth_client.put(f"/api/awards/{award.pk}/toggle-featured")
    assert api_client.get("/api/awards", {"featured": "true"}).json() == []


def test_award_associations_for_admin(auth_client):
    Education.objects.create(degree="B", institute_name="U", status="Completed", completion_year=2020)
    data = auth_client.get("/api/awards/associations").json()
    assert data["experiences"] == []
    assert data["education"][0]["degree"] == "B"


# Articles

def test_article_status_filter_is_case_insensitive(auth_client, api_client):
    draft = Article.objects.create(title="Draft", description="d")
    published = Article.objects.create(title="Live", description="d", status="Published")
    assert [a["id"] for a in api_client.get("/api/articles", {"status": "published"}).json()] == [published.pk]

    body = auth_client.put(f"/api/articles/{draft.pk}/toggle-status").json()
    assert body["status"] == "Published"
    assert body["published_at"] is not None


def test_article_social_links_from_form(auth_client):
    links = [{"platform": "Medium", "url": "https://medium.com/@me/post"}]
    resp = auth_client.post(
        "/api/articles",
        {"title": "Post", "description": "d", "social_links": json.dumps(links), "thumbnail": make_image()},
        format="multipart",
    )
    assert resp.status_code == 201
    assert resp.json()["social_links"][0]["platform"] == "Medium"
    assert resp.json()["thumbnail_url"]


# Profile

def test_profile_read_update_and_clear_asset(auth_client, api_client):
    assert api_client.get("/api/profile").json()["title"] == "Full Stack Developer"

    resp = auth_client.put(
        "/api/profile",
        {"title": "Backend Developer", "tags": json.dumps(["Django", "DRF"]), "logo": make_image("logo.png")},
        format="multipart",
    )
    assert resp.status_code == 200
    assert resp.json()["tags"] == ["Django", "DRF"]
    assert resp.json()["logo_url"]

    resp = auth_client.delete("/api/profile/logo")
    assert resp.json()["logo_url"] == ""
    assert api_client.delete("/api/profile/logo").status_code == 401


def test_unexpected_errors_are_generic_500(auth_client, monkeypatch):
    from portfolio import views

    def boom(*args, **kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(views.services, "contact_stats", boom)
    auth_client.raise_request_exception = False
    resp = auth_client.get("/api/contact/stats")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Server error"}

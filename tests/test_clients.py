import io
import json

import pytest

from portfolio.admin_client import AdminWorkflow, ApiError, encode_form
from portfolio.display import EMPTY, READY, ExpansionState, PublicDisplay
from portfolio.models import Certification, FloatingMessage, Project
from portfolio.ordering import certification_sort_key

from .conftest import make_image

pytestmark = pytest.mark.django_db

PROJECT_FORM = {
    "title": "",
    "description": "",
    "status": "Ongoing",
    "completion_month": None,
    "completion_year": None,
    "links": [],
    "show_on_home": False,
    "image": None,
}


def _png():
    upload = make_image("cover.png")
    return ("cover.png", io.BytesIO(upload.read()), "image/png")


def _workflow(client, confirm=None):
    return AdminWorkflow(
        client,
        "projects",
        initial=PROJECT_FORM,
        required_fields=("title", "description", "status", "image"),
        file_fields=("image",),
        confirm=confirm,
    )


def test_encode_form():
    upload = io.BytesIO(b"x")
    fields, files = encode_form(
        {"title": "T", "links": [{"type": "Live"}], "show_on_home": True, "completion_year": None, "order": 2, "image": upload}
    )
    assert fields == {
        "title": "T",
        "links": json.dumps([{"type": "Live"}]),
        "show_on_home": "true",
        "completion_year": "",
        "order": "2",
    }
    assert files == {"image": upload}


def test_missing_required_fields_make_no_request(http_client, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(http_client, "request", fail)
    flow = _workflow(http_client)
    flow.form["title"] = "Only a title"
    assert flow.submit() is None
    assert flow.last_notice.level == "error"
    assert "description" in flow.last_notice.text and "image" in flow.last_notice.text


def test_create_refreshes_list_and_clears_form(staff_http_client):
    flow = _workflow(staff_http_client)
    flow.form.update(title="Site", description="My site", image=_png(), links=[{"type": "Live", "url": "https://me.dev"}])
    saved = flow.submit()

    assert saved["title"] == "Site"
    assert flow.form == PROJECT_FORM
    assert [p["title"] for p in flow.items] == ["Site"]
    assert flow.last_notice.level == "success"
    assert Project.objects.get().links[0]["url"] == "https://me.dev"


def test_server_error_is_shown_verbatim_and_form_kept(staff_http_client):
    flow = _workflow(staff_http_client)
    flow.form.update(title="Site", description="My site", image=_png(), status="Completed")
    assert flow.submit() is None
    assert flow.last_notice.level == "error"
    assert "required" in flow.last_notice.text
    assert flow.form["title"] == "Site"
    assert not Project.objects.exists()


def test_edit_keeps_stored_image(staff_http_client):
    flow = _workflow(staff_http_client)
    flow.form.update(title="Site", description="My site", image=_png())
    saved = flow.submit()
    image_url = Project.objects.get().image_url

    flow.edit(saved)
    flow.form["title"] = "Renamed"
    assert flow.submit()["title"] == "Renamed"
    assert Project.objects.get().image_url == image_url


def test_delete_needs_confirmation(staff_http_client):
    prompts = []
    answers = iter([False, True])

    def confirm(text):
        prompts.append(text)
        return next(answers)

    flow = _workflow(staff_http_client, confirm=confirm)
    flow.form.update(title="Site", description="My site", image=_png())
    item = flow.submit()

    assert flow.remove(item) is False
    assert Project.objects.exists()
    assert flow.remove(item) is True
    assert not Project.objects.exists()
    assert 'project "Site"' in prompts[0]
    assert flow.items == []


def test_writes_without_login_fail_with_server_message(http_client):
    with pytest.raises(ApiError) as exc:
        http_client.create("education", {"degree": "x"})
    assert exc.value.status == 401
    assert exc.value.message == "Authentication credentials were not provided."


def test_toggle_through_workflow(staff_http_client):
    cert = Certification.objects.create(title="AWS", organization="Amazon", completion_month="May", completion_year=2023)
    flow = AdminWorkflow(staff_http_client, "certifications", initial={"title": ""})
    assert flow.toggle({"id": cert.pk}, "toggle-pinned")["pinned"] is True
    assert flow.items[0]["pinned"] is True


# Public display

def _certs():
    rows = [
        ("Old", False, 2020, "May"),
        ("Pinned", True, 2019, "May"),
        ("New", False, 2024, "March"),
        ("Newer", False, 2024, "June"),
        ("Mid", False, 2022, "January"),
        ("Early", False, 2021, "January"),
        ("Earliest", False, 2018, "January"),
    ]
    for title, pinned, year, month in rows:
        Certification.objects.create(
            title=title, organization="Org", pinned=pinned, completion_year=year, completion_month=month
        )


def test_display_states_and_show_more(http_client):
    _certs()
    section = PublicDisplay(http_client, "certifications", sort_key=certification_sort_key)
    assert section.load() == READY
    assert [c["title"] for c in section.visible] == ["Pinned", "Newer", "New", "Mid", "Early"]
    assert section.has_more and section.hidden_count == 2

    assert len(section.show_more()) == 7
    assert not section.has_more
    assert len(section.show_less()) == 5


def test_display_empty_collection(http_client):
    section = PublicDisplay(http_client, "awards")
    assert section.load() == EMPTY
    assert section.visible == []


def test_display_fetch_failure_renders_empty(http_client):
    section = PublicDisplay(http_client, "no-such-section")
    assert section.load() == EMPTY
    assert section.items == []
    assert section.visible == []


def test_display_limit_matches_server_slice(http_client):
    _certs()
    section = PublicDisplay(http_client, "certifications", sort_key=certification_sort_key)
    section.load()
    server = http_client.list("certifications", limit=5)
    assert [c["id"] for c in server] == [c["id"] for c in section.visible]


def test_home_flag_and_partition(http_client, auth_client):
    for i, home in enumerate([True, False, True]):
        auth_client.post(
            "/api/projects",
            {"title": f"P{i}", "description": "d", "status": "Ongoing", "image": make_image(), "order": i,
             "show_on_home": home},
            format="multipart",
        )
    section = PublicDisplay(http_client, "projects", home_flag="show_on_home")
    section.load()
    assert [p["title"] for p in section.visible] == ["P0", "P2"]
    assert [p["title"] for p in section.show_more()] == ["P0", "P1", "P2"]

    featured, everything = section.partition("show_on_home")
    assert [p["title"] for p in featured] == ["P0", "P2"]
    assert len(everything) == 3


def test_expansion_state():
    state = ExpansionState()
    assert state.toggle(3) is True
    assert state.is_expanded(3)
    assert state.toggle(3) is False
    state.toggle(1)
    state.toggle(2)
    state.collapse_all()
    assert not state.is_expanded(1)


def test_banner_toggle_uses_patch(staff_http_client):
    banner = FloatingMessage.objects.create(message="Open to work", is_active=False)
    flow = AdminWorkflow(staff_http_client, "floating-message/admin", initial={"message": ""}, label="floating message")
    assert flow.toggle({"id": banner.pk}, "toggle", method="PATCH")["is_active"] is True
    assert flow.last_notice.text == "Floating message updated"
    banner.refresh_from_db()
    assert banner.is_active is True

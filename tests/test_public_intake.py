import pytest
from django.core import mail

from portfolio import tasks
from portfolio.models import ContactMessage, FloatingMessage, Testimonial

pytestmark = pytest.mark.django_db


# Testimonials

def test_submitted_testimonial_waits_for_approval(api_client, auth_client):
    resp = api_client.post(
        "/api/testimonials",
        {"full_name": "Jo Doe", "email": "Jo@Example.com", "rating": 5, "feedback": "Great work", "is_approved": True},
        format="json",
    )
    assert resp.status_code == 201
    assert "email" not in resp.json()["testimonial"]
    testimonial = Testimonial.objects.get()
    assert testimonial.is_approved is False
    assert testimonial.email == "jo@example.com"

    assert api_client.get("/api/testimonials").json() == []
    assert len(auth_client.get("/api/testimonials").json()) == 1

    auth_client.put(f"/api/testimonials/{testimonial.pk}/toggle-approval")
    public = api_client.get("/api/testimonials").json()
    assert [t["full_name"] for t in public] == ["Jo Doe"]


def test_toggle_approval_twice_is_identity(auth_client):
    t = Testimonial.objects.create(full_name="A", email="a@x.com", rating=4, feedback="ok")
    auth_client.put(f"/api/testimonials/{t.pk}/toggle-approval")
    body = auth_client.put(f"/api/testimonials/{t.pk}/toggle-approval").json()
    assert body["is_approved"] is False


def test_rating_out_of_range(api_client):
    resp = api_client.post(
        "/api/testimonials",
        {"full_name": "A", "email": "a@x.com", "rating": 6, "feedback": "ok"},
        format="json",
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "rating: Rating must be between 1 and 5"


def test_unapproved_testimonial_hidden_from_public_detail(api_client):
    t = Testimonial.objects.create(full_name="A", email="a@x.com", rating=4, feedback="ok")
    assert api_client.get(f"/api/testimonials/{t.pk}").status_code == 404


def test_public_cannot_moderate(api_client):
    t = Testimonial.objects.create(full_name="A", email="a@x.com", rating=4, feedback="ok")
    assert api_client.put(f"/api/testimonials/{t.pk}/toggle-approval").status_code == 401
    assert api_client.delete(f"/api/testimonials/{t.pk}").status_code == 401


# Contact

CONTACT = {
    "full_name": "Sam Lee",
    "email": "Sam@Example.com",
    "phone": "+1 (555) 123-4567",
    "reason": "hire me",
    "message": "Let's work together",
}


def test_contact_submission_stores_and_sends_both_emails(api_client):
    resp = api_client.post("/api/contact", CONTACT, format="json")
    assert resp.status_code == 201
    message = ContactMessage.objects.get()
    assert message.email == "sam@example.com"
    assert message.is_read is False

    subjects = sorted(m.subject for m in mail.outbox)
    assert subjects == ["New contact form submission from Sam Lee", "Thank you for contacting me, Sam Lee!"]
    to_admin = next(m for m in mail.outbox if m.to == ["owner@example.com"])
    assert "Let's work together" in to_admin.body
    assert to_admin.alternatives


def test_contact_succeeds_when_mail_fails(api_client, monkeypatch):
    def broken_send(*args, **kwargs):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(tasks, "send_mail", broken_send)
    resp = api_client.post("/api/contact", CONTACT, format="json")
    assert resp.status_code == 201
    assert ContactMessage.objects.count() == 1
    assert mail.outbox == []


def test_contact_rejects_bad_phone(api_client):
    resp = api_client.post("/api/contact", {**CONTACT, "phone": "call me"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["message"] == "phone: Please provide a valid phone number"


def test_contact_inbox_is_admin_only(api_client, auth_client):
    api_client.post("/api/contact", CONTACT, format="json")
    assert api_client.get("/api/contact").status_code == 401

    pk = auth_client.get("/api/contact").json()[0]["id"]
    assert auth_client.get("/api/contact", {"status": "unread"}).json()[0]["id"] == pk
    assert auth_client.put(f"/api/contact/{pk}/read").json()["is_read"] is True
    assert auth_client.get("/api/contact", {"status": "unread"}).json() == []
    assert auth_client.get("/api/contact/stats").json() == {"total": 1, "unread": 0, "this_month": 1}

    assert auth_client.delete(f"/api/contact/{pk}").status_code == 204
    assert not ContactMessage.objects.exists()


def test_mark_several_messages_read(auth_client):
    first, _, third = (
        ContactMessage.objects.create(full_name=f"P{i}", email=f"p{i}@x.com", phone="5551234", reason="others", message="m")
        for i in range(3)
    )
    resp = auth_client.put("/api/contact/read", {"ids": [first.pk, third.pk, 999999]}, format="json")
    assert resp.status_code == 200
    assert resp.json()["updated"] == 2
    assert [m.full_name for m in ContactMessage.objects.filter(is_read=False)] == ["P1"]
    assert auth_client.get("/api/contact/stats").json()["unread"] == 1


def test_mark_read_needs_id_list(auth_client, api_client):
    resp = auth_client.put("/api/contact/read", {"ids": "all"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["message"] == "ids: Contact IDs array is required"
    assert api_client.put("/api/contact/read", {"ids": [1]}, format="json").status_code == 401


# Floating message

def test_public_floating_message_when_none_active(api_client):
    FloatingMessage.objects.create(message="old", is_active=False)
    assert api_client.get("/api/floating-message").json() == {"message": None, "highlight_text": ""}


def test_second_active_message_replaces_first(auth_client, api_client):
    a = auth_client.post(
        "/api/floating-message/admin", {"message": "Hiring season", "highlight_text": "Hiring"}, format="json"
    ).json()
    b = auth_client.post(
        "/api/floating-message/admin", {"message": "  New article out  ", "is_active": True}, format="json"
    ).json()

    assert api_client.get("/api/floating-message").json() == {"message": "New article out", "highlight_text": ""}
    assert FloatingMessage.objects.get(pk=a["id"]).is_active is False
    assert FloatingMessage.objects.get(pk=b["id"]).is_active is True


def test_toggle_and_update_keep_single_active(auth_client):
    a = auth_client.post("/api/floating-message/admin", {"message": "A"}, format="json").json()
    b = auth_client.post("/api/floating-message/admin", {"message": "B", "is_active": False}, format="json").json()

    auth_client.patch(f"/api/floating-message/admin/{b['id']}/toggle")
    assert list(FloatingMessage.objects.filter(is_active=True).values_list("pk", flat=True)) == [b["id"]]

    auth_client.put(f"/api/floating-message/admin/{a['id']}", {"is_active": True}, format="json")
    assert list(FloatingMessage.objects.filter(is_active=True).values_list("pk", flat=True)) == [a["id"]]


def test_floating_message_length_limit(auth_client):
    resp = auth_client.post("/api/floating-message/admin", {"message": "x" * 201}, format="json")
    assert resp.status_code == 400
    assert resp.json()["message"] == "message: Message must be less than 200 characters"


def test_floating_message_admin_requires_auth(api_client):
    assert api_client.get("/api/floating-message/admin").status_code == 401

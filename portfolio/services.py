"""Content rules layered over the repositories.

Views stay thin: anything beyond plain CRUD (flag toggles, the single active
floating message, article publishing, award associations, contact
notifications) lives here.
"""

import logging
from datetime import datetime

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from .models import Article, Award, ContactMessage, Education, Experience, FloatingMessage
from .tasks import send_contact_confirmation, send_contact_notification

logger = logging.getLogger(__name__)

INDEPENDENT_ACHIEVEMENT = "Independent Achievement"


def toggle_flag(instance, field: str) -> bool:
    """Invert a boolean column on one row and return its new value."""
    value = not getattr(instance, field)
    setattr(instance, field, value)
    instance.save(update_fields=[field, "updated_at"])
    return value


# Floating message: at most one active row

def activate_floating_message(message: FloatingMessage) -> FloatingMessage:
    """Deactivate every floating message, then mark ``message`` active.

    Both writes share one transaction, so a failure in between rolls back to
    the previous state instead of leaving the banner empty.
    """
    with transaction.atomic():
        FloatingMessage.objects.deactivate_all("is_active")
        message.is_active = True
        message.save()
    logger.info("Floating message %s activated", message.pk)
    return message


def save_floating_message(message: FloatingMessage) -> FloatingMessage:
    if message.is_active:
        return activate_floating_message(message)
    message.save()
    return message


def toggle_floating_message(message: FloatingMessage) -> FloatingMessage:
    if message.is_active:
        message.is_active = False
        message.save(update_fields=["is_active", "updated_at"])
        return message
    return activate_floating_message(message)


def current_floating_message():
    return FloatingMessage.objects.filter(is_active=True).order_by("-updated_at", "-id").first()


# Article status: Draft <-> Published

def set_article_status(article: Article, status: str) -> Article:
    article.status = status
    # Article.save stamps or clears published_at
    article.save(update_fields=["status", "updated_at"])
    return article


def toggle_article_status(article: Article) -> Article:
    target = Article.DRAFT if article.status == Article.PUBLISHED else Article.PUBLISHED
    return set_article_status(article, target)


# Award associations

def _experience_summary(exp: Experience):
    return {
        "id": exp.pk,
        "company_name": exp.company_name,
        "role": exp.role,
        "start_month": exp.start_month,
        "start_year": exp.start_year,
        "end_month": exp.end_month,
        "end_year": exp.end_year,
        "status": exp.status,
    }


def _education_summary(edu: Education):
    return {
        "id": edu.pk,
        "institute_name": edu.institute_name,
        "degree": edu.degree,
        "specialization": edu.specialization,
        "completion_year": edu.completion_year,
        "expected_completion_year": edu.expected_completion_year,
        "status": edu.status,
    }


def resolve_association(award: Award):
    """Summary of the experience/education row an award points at.

    ``None`` when the award is independent or the referenced row no longer
    exists; ids are not checked when the award is written.
    """
    if award.associated_type == Award.EXPERIENCE and award.associated_id:
        exp = Experience.objects.filter(pk=award.associated_id).first()
        return _experience_summary(exp) if exp else None
    if award.associated_type == Award.EDUCATION and award.associated_id:
        edu = Education.objects.filter(pk=award.associated_id).first()
        return _education_summary(edu) if edu else None
    return None


def association_label(award: Award, summary=None) -> str:
    if award.associated_type == Award.NONE:
        return INDEPENDENT_ACHIEVEMENT
    summary = summary if summary is not None else resolve_association(award)
    if summary is None:
        return ""
    if award.associated_type == Award.EXPERIENCE:
        return f"{summary['role']} at {summary['company_name']}"
    return f"{summary['degree']} at {summary['institute_name']}"


def association_choices():
    experiences = Experience.objects.order_by("-start_year", "-id")
    education = Education.objects.order_by("-completion_year", "-expected_completion_year", "-id")
    return {
        "experiences": [_experience_summary(e) for e in experiences],
        "education": [_education_summary(e) for e in education],
    }


# Certifications

def distinct_organizations(certifications):
    """One entry per organization name with the most recent non-empty logo.

    ``certifications`` may be model instances or serialized dicts.
    """
    groups = {}
    for cert in certifications:
        get = cert.get if isinstance(cert, dict) else (lambda key, default=None, c=cert: getattr(c, key, default))
        name = get("organization")
        if not name:
            continue
        entry = groups.setdefault(name, {"name": name, "image_url": "", "count": 0, "_seen": None})
        entry["count"] += 1
        image_url = get("image_url") or ""
        stamp = get("created_at")
        if isinstance(stamp, str):
            stamp = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
        if image_url and (entry["_seen"] is None or (stamp is not None and stamp >= entry["_seen"])):
            entry["image_url"] = image_url
            entry["_seen"] = stamp
    result = []
    for entry in groups.values():
        entry.pop("_seen")
        result.append(entry)
    return sorted(result, key=lambda e: e["name"].lower())


# Contact messages

def submit_contact_message(data) -> ContactMessage:
    """Persist a contact message, then queue the two notification emails.

    The message is stored first; mail problems are logged and never fail the
    submission.
    """
    message = ContactMessage.objects.insert(**data)
    for task in (send_contact_notification, send_contact_confirmation):
        try:
            task.delay(message.pk)
        except Exception:  # broker down, SMTP failure in eager mode, ...
            logger.exception("Could not queue %s for contact message %s", task.name, message.pk)
    return message


def mark_contact_messages_read(ids) -> int:
    """Mark every message in ``ids`` read; unknown ids are ignored."""
    return ContactMessage.objects.filter(pk__in=ids, is_read=False).update(is_read=True, updated_at=timezone.now())


def contact_stats():
    start_of_month = timezone.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return ContactMessage.objects.aggregate(
        total=Count("id"),
        unread=Count("id", filter=Q(is_read=False)),
        this_month=Count("id", filter=Q(created_at__gte=start_of_month)),
    )

import logging
from datetime import datetime, timezone

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def _render(template, message):
    context = {
        "contact": message,
        "reason": message.get_reason_display(),
        "client_url": settings.CLIENT_URL,
        "year": datetime.now(timezone.utc).year,
    }
    text = render_to_string(f"portfolio/emails/{template}.txt", context)
    html = render_to_string(f"portfolio/emails/{template}.html", context)
    return text, html


def _deliver(subject, template, message, recipient):
    text, html = _render(template, message)
    try:
        send_mail(subject, text, settings.DEFAULT_FROM_EMAIL, [recipient], html_message=html)
    except Exception:  # SMTP errors must never surface to the visitor
        logger.exception("Email '%s' to %s failed", template, recipient)
        return "failed"
    logger.info("Email '%s' sent to %s", template, recipient)
    return f"sent:{datetime.now(timezone.utc).isoformat()}"


@shared_task
def send_contact_notification(message_id: int) -> str:
    from .models import ContactMessage

    message = ContactMessage.objects.filter(pk=message_id).first()
    if message is None:
        return "missing"
    subject = f"New contact form submission from {message.full_name}"
    return _deliver(subject, "contact_notification", message, settings.ADMIN_EMAIL)


@shared_task
def send_contact_confirmation(message_id: int) -> str:
    from .models import ContactMessage

    message = ContactMessage.objects.filter(pk=message_id).first()
    if message is None:
        return "missing"
    subject = f"Thank you for contacting me, {message.full_name}!"
    return _deliver(subject, "contact_confirmation", message, message.email)

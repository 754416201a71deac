# noticias/services/contact.py

import logging
import re
from typing import List, Tuple

from sqlalchemy.orm import Session

from noticias import crud, models
from noticias.core.exceptions import MailDeliveryError
from noticias.schemas import ContactForm
from noticias.services.mail import EmailPriority, MailSender

logger = logging.getLogger(__name__)

_LINK_RE = re.compile(r"https?://|www\.", re.IGNORECASE)
BLOCKED_WORDS = ("casino", "viagra", "crypto", "bitcoin", "loan", "prestamo rapido", "seo services")


def score_spam(form: ContactForm) -> Tuple[float, List[str]]:
    """
    Heuristic spam score in [0, 1] with the reasons that contributed to it.

    Only informs moderation; messages are stored whatever the score.
    """
    score = 0.0
    reasons = []
    text = f"{form.subject} {form.message}"

    links = len(_LINK_RE.findall(text))
    if links >= 3:
        score += 0.4
        reasons.append(f"{links} links")
    elif links:
        score += 0.1
        reasons.append("contains link")

    letters = [ch for ch in form.message if ch.isalpha()]
    if len(letters) >= 20 and sum(1 for ch in letters if ch.isupper()) / len(letters) > 0.6:
        score += 0.2
        reasons.append("mostly uppercase")

    lowered = text.lower()
    hits = [word for word in BLOCKED_WORDS if word in lowered]
    if hits:
        score += 0.3 * len(hits)
        reasons.append("blocked words: " + ", ".join(hits))

    return min(score, 1.0), reasons


class ContactService:

    def __init__(self, mail_sender: MailSender, admin_email: str, project_name: str = "Noticias Pachuca"):
        self.mail_sender = mail_sender
        self.admin_email = admin_email
        self.project_name = project_name

    def submit(self, db: Session, form: ContactForm, user_agent: str = "", ip_address: str = "",
               site_domain: str = None) -> models.ContactMessage:
        spam_score, spam_reasons = score_spam(form)
        message = crud.create_contact_message(
            db,
            name=form.name,
            email=form.email,
            subject=form.subject,
            message=form.message,
            status="pending",
            spam_score=spam_score,
            spam_reasons=spam_reasons,
            user_agent=user_agent or "",
            ip_address=ip_address or "",
            site_domain=site_domain,
        )

        self._notify_admin(message)
        self._confirm_to_sender(message)
        return message

    def _notify_admin(self, message: models.ContactMessage) -> None:
        # Failure here reaches the caller: the newsroom must learn about every message
        self.mail_sender.send(
            to=self.admin_email,
            subject=f"📬 Nuevo mensaje de contacto: {message.subject}",
            template="contact_notification",
            context={
                "message_id": message.id,
                "name": message.name,
                "email": message.email,
                "subject": message.subject,
                "message": message.message,
                "spam_score": message.spam_score,
                "spam_reasons": message.spam_reasons or [],
            },
            priority=EmailPriority.HIGH,
        )
        logger.info(f"Contact notification sent for message ID: {message.id}")

    def _confirm_to_sender(self, message: models.ContactMessage) -> None:
        try:
            self.mail_sender.send(
                to=message.email,
                subject=f"Recibimos tu mensaje - {self.project_name}",
                template="contact_confirmation",
                context={
                    "name": message.name,
                    "subject": message.subject,
                    "project_name": self.project_name,
                },
                priority=EmailPriority.LOW,
            )
            logger.info(f"Contact confirmation sent to: {message.email}")
        except MailDeliveryError:
            logger.error(f"Contact confirmation to {message.email} failed", exc_info=True)

import pytest

from noticias import crud
from noticias.core.exceptions import MailDeliveryError
from noticias.schemas import ContactForm
from noticias.services.contact import score_spam


def _form(**fields):
    values = {
        "name": "Lucía",
        "email": "lucia@example.com",
        "subject": "Bache en la avenida",
        "message": "Hay un bache enorme frente al mercado desde hace semanas.",
    }
    values.update(fields)
    return ContactForm(**values)


def test_submit_stores_message_and_notifies_both_sides(db, mailer, contact_service):
    message = contact_service.submit(db, _form(), user_agent="pytest", ip_address="10.0.0.1",
                                     site_domain="noticiaspachuca.com")

    stored = crud.get_contact_message(db, message.id)
    assert stored.status == "pending"
    assert stored.spam_score == 0.0
    assert stored.site_domain == "noticiaspachuca.com"
    assert stored.ip_address == "10.0.0.1"
    assert [m.to for m, _ in mailer.sent] == ["redaccion@example.com", "lucia@example.com"]
    assert "Bache en la avenida" in mailer.sent_to("redaccion@example.com")[0]


def test_admin_notification_failure_propagates(db, mailer, contact_service):
    mailer.fail_for.add("redaccion@example.com")

    with pytest.raises(MailDeliveryError):
        contact_service.submit(db, _form())


def test_sender_confirmation_failure_is_swallowed(db, mailer, contact_service):
    mailer.fail_for.add("lucia@example.com")

    message = contact_service.submit(db, _form())

    assert message.id is not None
    assert [m.to for m, _ in mailer.sent] == ["redaccion@example.com"]


def test_spam_score():
    assert score_spam(_form()) == (0.0, [])

    score, reasons = score_spam(_form(
        subject="GANA DINERO",
        message="VISITA HTTPS://A.EXAMPLE HTTPS://B.EXAMPLE WWW.C.EXAMPLE CASINO CRYPTO AHORA MISMO",
    ))
    assert score == 1.0
    assert "3 links" in reasons
    assert "mostly uppercase" in reasons
    assert "blocked words: casino, crypto" in reasons

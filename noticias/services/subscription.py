# noticias/services/subscription.py

import logging
from typing import Union

from sqlalchemy.orm import Session

from noticias import crud, models
from noticias.core.exceptions import ExpiredOrInvalidTokenError, SubscriberNotFoundError
from noticias.models.subscriber import PREFERENCE_FIELDS
from noticias.schemas import PreferencesUpdate, SubscribeRequest
from noticias.services.mail import EmailPriority, MailSender
from noticias.utils.dates import utcnow
from noticias.utils.tokens import generate_token, token_expiry

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Double opt-in newsletter subscriptions.

    A subscriber is created unconfirmed with a time-boxed confirmation token
    and a permanent unsubscribe token. The confirmation token is single use;
    the unsubscribe token also authorizes preference changes.
    """

    def __init__(self, mail_sender: MailSender, frontend_url: str, token_ttl_hours: int = 24,
                 project_name: str = "Noticias Pachuca"):
        self.mail_sender = mail_sender
        self.frontend_url = frontend_url.rstrip("/")
        self.token_ttl_hours = token_ttl_hours
        self.project_name = project_name

    def subscribe(self, db: Session, request: SubscribeRequest) -> models.Subscriber:
        """
        Create or update a subscription for ``request.email``.

        - active and confirmed: preferences are overwritten, no email is sent.
        - unconfirmed: the confirmation email is sent again with the same token.
        - unsubscribed: the record is reactivated and must confirm again.
        - unknown: a new unconfirmed subscriber is created.

        Raises:
            MailDeliveryError: the confirmation email could not be sent.
        """
        email = request.email
        preferences = {field: getattr(request, field) for field in PREFERENCE_FIELDS}
        subscriber = crud.get_subscriber_by_email(db, email)

        if subscriber is not None:
            if subscriber.is_confirmed and subscriber.is_active:
                for field, value in preferences.items():
                    setattr(subscriber, field, value)
                if request.name:
                    subscriber.name = request.name
                crud.save_subscriber(db, subscriber)
                logger.info(f"Preferences updated for: {email}")
                return subscriber

            if not subscriber.is_confirmed:
                self._prepare_resend(subscriber)
                crud.save_subscriber(db, subscriber)
                self._send_confirmation_email(subscriber)
                logger.info(f"Confirmation resent to: {email}")
                return subscriber

            self._reactivate(subscriber, preferences, request.name)
            crud.save_subscriber(db, subscriber)
            self._send_confirmation_email(subscriber)
            logger.info(f"Subscription reactivated, confirmation sent to: {email}")
            return subscriber

        now = utcnow()
        subscriber = crud.create_subscriber(
            db,
            email=email,
            name=request.name,
            is_active=True,
            is_confirmed=False,
            subscribed_at=now,
            unsubscribe_token=generate_token(),
            confirmation_token=generate_token(),
            confirmation_token_expires=token_expiry(self.token_ttl_hours, now),
            source=request.source or "api",
            **preferences,
        )
        self._send_confirmation_email(subscriber)
        logger.info(f"New subscription: {email}")
        return subscriber

    def _prepare_resend(self, subscriber: models.Subscriber) -> None:
        """Keep the existing token; only reopen its window when it already lapsed."""
        now = utcnow()
        if subscriber.confirmation_token is None:
            subscriber.confirmation_token = generate_token()
            subscriber.confirmation_token_expires = token_expiry(self.token_ttl_hours, now)
        elif subscriber.confirmation_token_expires <= now:
            subscriber.confirmation_token_expires = token_expiry(self.token_ttl_hours, now)
        if not subscriber.is_active:
            subscriber.is_active = True
            subscriber.unsubscribed_at = None
            subscriber.unsubscribe_reason = None

    def _reactivate(self, subscriber: models.Subscriber, preferences: dict, name: str = None) -> None:
        now = utcnow()
        for field, value in preferences.items():
            setattr(subscriber, field, value)
        if name:
            subscriber.name = name
        subscriber.is_active = True
        subscriber.is_confirmed = False
        subscriber.confirmed_at = None
        subscriber.subscribed_at = now
        subscriber.unsubscribed_at = None
        subscriber.unsubscribe_reason = None
        subscriber.confirmation_token = generate_token()
        subscriber.confirmation_token_expires = token_expiry(self.token_ttl_hours, now)

    def confirm_subscription(self, db: Session, token: str) -> models.Subscriber:
        subscriber = crud.get_subscriber_by_confirmation_token(db, token, utcnow())
        if subscriber is None:
            logger.warning("Confirmation attempted with an invalid or expired token")
            raise ExpiredOrInvalidTokenError("Token inválido o expirado")

        subscriber.is_confirmed = True
        subscriber.confirmed_at = utcnow()
        subscriber.confirmation_token = None
        subscriber.confirmation_token_expires = None
        crud.save_subscriber(db, subscriber)

        logger.info(f"Subscription confirmed: {subscriber.email}")
        return subscriber

    def _get_by_unsubscribe_token(self, db: Session, token: str) -> models.Subscriber:
        subscriber = crud.get_subscriber_by_unsubscribe_token(db, token)
        if subscriber is None:
            logger.warning("No subscriber found for unsubscribe token")
            raise SubscriberNotFoundError("Suscriptor no encontrado")
        return subscriber

    def unsubscribe(self, db: Session, token: str, reason: str = None) -> None:
        subscriber = self._get_by_unsubscribe_token(db, token)

        subscriber.is_active = False
        subscriber.unsubscribed_at = utcnow()
        if reason:
            subscriber.unsubscribe_reason = reason
        crud.save_subscriber(db, subscriber)

        logger.info(f"Unsubscribed: {subscriber.email}")

    def update_preferences(self, db: Session, token: str,
                           update: Union[PreferencesUpdate, dict]) -> models.Subscriber:
        """Apply only the flags present in ``update``; absent or None flags stay as they are."""
        subscriber = self._get_by_unsubscribe_token(db, token)

        if isinstance(update, PreferencesUpdate):
            update = update.model_dump(exclude_unset=True)
        for field in PREFERENCE_FIELDS:
            if update.get(field) is not None:
                setattr(subscriber, field, update[field])
        crud.save_subscriber(db, subscriber)

        logger.info(f"Preferences updated: {subscriber.email}")
        return subscriber

    def get_subscriber(self, db: Session, email: str) -> models.Subscriber:
        subscriber = crud.get_subscriber_by_email(db, email)
        if subscriber is None:
            raise SubscriberNotFoundError("Suscriptor no encontrado")
        return subscriber

    def _send_confirmation_email(self, subscriber: models.Subscriber) -> None:
        confirmation_url = f"{self.frontend_url}/confirmar-suscripcion?token={subscriber.confirmation_token}"
        self.mail_sender.send(
            to=subscriber.email,
            subject=f"✅ Confirma tu suscripción - {self.project_name}",
            template="confirm_subscription",
            context={
                "recipient_name": subscriber.name or "Lector",
                "recipient_email": subscriber.email,
                "confirmation_url": confirmation_url,
                "expires_in_hours": self.token_ttl_hours,
                "project_name": self.project_name,
            },
            priority=EmailPriority.HIGH,
        )
        logger.info(f"Confirmation sent to: {subscriber.email}")

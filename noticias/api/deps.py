# noticias/api/deps.py

from functools import lru_cache

from fastapi import Depends

from noticias.core.config import settings
from noticias.db.session import get_db
from noticias.services.bulletin import BulletinService
from noticias.services.category_cache import CategoryCache
from noticias.services.contact import ContactService
from noticias.services.mail import MailSender
from noticias.services.public_content import PublicContentService
from noticias.services.subscription import SubscriptionService

__all__ = [
    "get_db",
    "category_cache",
    "get_mail_sender",
    "get_public_content_service",
    "get_subscription_service",
    "get_bulletin_service",
    "get_contact_service",
]

# Shared by every request in this process
category_cache = CategoryCache(settings.CATEGORY_CACHE_TTL_SECONDS)


@lru_cache
def get_mail_sender() -> MailSender:
    return MailSender(
        api_key=settings.EMAIL_API.get_secret_value(),
        sender_email=settings.SENDER_EMAIL,
        sender_name=settings.SENDER_NAME,
        max_workers=settings.MAIL_MAX_WORKERS,
    )


def get_public_content_service() -> PublicContentService:
    return PublicContentService(category_cache)


def get_subscription_service(mail_sender: MailSender = Depends(get_mail_sender)) -> SubscriptionService:
    return SubscriptionService(
        mail_sender,
        frontend_url=settings.FRONTEND_URL,
        token_ttl_hours=settings.CONFIRMATION_TOKEN_TTL_HOURS,
        project_name=settings.PROJECT_NAME,
    )


def get_bulletin_service(mail_sender: MailSender = Depends(get_mail_sender)) -> BulletinService:
    return BulletinService(
        mail_sender,
        frontend_url=settings.FRONTEND_URL,
        timezone_name=settings.BULLETIN_TIMEZONE,
        project_name=settings.PROJECT_NAME,
    )


def get_contact_service(mail_sender: MailSender = Depends(get_mail_sender)) -> ContactService:
    return ContactService(mail_sender, admin_email=settings.ADMIN_EMAIL, project_name=settings.PROJECT_NAME)

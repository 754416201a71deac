# noticias/crud/__init__.py

from .crud_category import (
    create_category,
    get_active_categories,
    get_category_by_slug,
    count_published_articles,
    count_published_by_label,
    seed_initial_categories,
)
from .crud_article import (
    create_article,
    get_article,
    list_published,
    count_published,
    get_published_since,
)
from .crud_subscriber import (
    create_subscriber,
    save_subscriber,
    get_subscriber_by_email,
    get_subscriber_by_confirmation_token,
    get_subscriber_by_unsubscribe_token,
    get_bulletin_recipients,
)
from .crud_bulletin import (
    create_bulletin,
    get_bulletin,
    get_bulletin_by_type_and_date,
    update_bulletin,
)
from .crud_contact_message import create_contact_message, get_contact_message

__all__ = [
    "create_category", "get_active_categories", "get_category_by_slug",
    "count_published_articles", "count_published_by_label", "seed_initial_categories",
    "create_article", "get_article", "list_published", "count_published", "get_published_since",
    "create_subscriber", "save_subscriber", "get_subscriber_by_email",
    "get_subscriber_by_confirmation_token", "get_subscriber_by_unsubscribe_token",
    "get_bulletin_recipients",
    "create_bulletin", "get_bulletin", "get_bulletin_by_type_and_date", "update_bulletin",
    "create_contact_message", "get_contact_message",
]

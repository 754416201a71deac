from .category import CategoryResponse
from .article import PublicArticle, SearchResult, Page
from .subscriber import (
    Preferences,
    PreferencesUpdate,
    SubscribeRequest,
    SubscriberOut,
    SubscriptionResponse,
    MessageResponse,
)
from .bulletin import BulletinType, BULLETIN_TYPE_ALIASES, ArticleSnapshot, BulletinContent
from .contact import ContactForm, ContactResponse

__all__ = [
    "CategoryResponse",
    "PublicArticle", "SearchResult", "Page",
    "Preferences", "PreferencesUpdate", "SubscribeRequest", "SubscriberOut",
    "SubscriptionResponse", "MessageResponse",
    "BulletinType", "BULLETIN_TYPE_ALIASES", "ArticleSnapshot", "BulletinContent",
    "ContactForm", "ContactResponse",
]

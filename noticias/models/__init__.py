# noticias/models/__init__.py
from noticias.models.category import Category
from noticias.models.article import Article, ArticleTag, ArticleKeyword
from noticias.models.subscriber import Subscriber
from noticias.models.bulletin import Bulletin
from noticias.models.contact_message import ContactMessage

__all__ = [
    "Category",
    "Article",
    "ArticleTag",
    "ArticleKeyword",
    "Subscriber",
    "Bulletin",
    "ContactMessage",
]

# noticias/db/base.py
# Import every model so Base.metadata knows all tables before create_all.

from noticias.db.base_class import Base
from noticias.models.category import Category
from noticias.models.article import Article, ArticleTag, ArticleKeyword
from noticias.models.subscriber import Subscriber
from noticias.models.bulletin import Bulletin
from noticias.models.contact_message import ContactMessage

__all__ = [
    "Base",
    "Category",
    "Article",
    "ArticleTag",
    "ArticleKeyword",
    "Subscriber",
    "Bulletin",
    "ContactMessage",
]

# noticias/models/article.py

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, JSON, func
from sqlalchemy.orm import relationship
from noticias.core.config import settings
from noticias.db.base_class import Base
from noticias.utils.dates import utcnow


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(255), index=True, nullable=False)
    title = Column(String(500), nullable=False)
    summary = Column(Text, default="")
    content = Column(Text, default="")
    # {"original": ..., "thumbnail": ..., "medium": ..., "large": ..., "alt": ...}
    featured_image = Column(JSON)

    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=True)
    # Raw category name from before categories had their own table
    category_label = Column(String(120), index=True, nullable=True)
    author = Column(String(255))

    status = Column(String(20), default="published", index=True, nullable=False)
    published_at = Column(DateTime, default=utcnow, index=True, nullable=False)
    views = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    category = relationship("Category", back_populates="articles")
    tags = relationship("ArticleTag", cascade="all, delete-orphan", lazy="selectin")
    keywords = relationship("ArticleKeyword", cascade="all, delete-orphan", lazy="selectin")

    @property
    def tag_names(self):
        return [tag.name for tag in self.tags]

    def image(self, size: str):
        if not self.featured_image:
            return None
        return self.featured_image.get(size)

    def __repr__(self):
        return f"<Article {self.slug}>"


class ArticleTag(Base):
    __tablename__ = "article_tags"

    id = Column(Integer, primary_key=True)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(120), index=True, nullable=False)


class ArticleKeyword(Base):
    __tablename__ = "article_keywords"

    id = Column(Integer, primary_key=True)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(120), index=True, nullable=False)


def search_document():
    """tsvector over title, summary and content; shared by the GIN index and the search query."""
    return func.to_tsvector(
        settings.SEARCH_LANGUAGE,
        func.coalesce(Article.title, "")
        + " "
        + func.coalesce(Article.summary, "")
        + " "
        + func.coalesce(Article.content, ""),
    )


Index("ix_articles_search", search_document(), postgresql_using="gin").ddl_if(dialect="postgresql")

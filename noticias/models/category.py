# noticias/models/category.py

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.orm import relationship
from noticias.db.base_class import Base
from noticias.utils.dates import utcnow

DEFAULT_CATEGORY_COLOR = "#854836"


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(120), unique=True, index=True, nullable=False)
    name = Column(String(120), nullable=False)
    description = Column(Text)
    color = Column(String(16), default=DEFAULT_CATEGORY_COLOR)
    icon = Column(String(64))
    is_active = Column(Boolean, default=True, nullable=False)
    order = Column(Integer, default=0, nullable=False)

    seo_title = Column(String(255))
    seo_description = Column(Text)
    seo_keywords = Column(Text)

    # Denormalized counters, maintained by the publishing side
    article_count = Column(Integer, default=0, nullable=False)
    total_views = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    articles = relationship("Article", back_populates="category")

    def __repr__(self):
        return f"<Category {self.slug}>"

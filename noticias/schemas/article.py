# noticias/schemas/article.py
import math
from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class PublicArticle(BaseModel):
    id: str
    slug: str
    title: str
    summary: Optional[str] = None
    featured_image: Optional[str] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    category_color: Optional[str] = None
    tags: List[str] = []
    published_at: datetime
    author: Optional[str] = None
    read_time: int = 1


class SearchResult(BaseModel):
    id: str
    slug: str
    title: str
    summary: Optional[str] = None
    featured_image: Optional[str] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    published_at: datetime
    score: Optional[float] = None
    highlight: str = ""


class Page(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, data: List[T], total: int, page: int, limit: int) -> "Page[T]":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )

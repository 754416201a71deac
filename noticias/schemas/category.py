# noticias/schemas/category.py
from typing import Optional
from pydantic import BaseModel


class CategoryResponse(BaseModel):
    id: str
    slug: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    count: int = 0
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None

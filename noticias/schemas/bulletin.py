# noticias/schemas/bulletin.py
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel


class BulletinType(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
    WEEKLY = "weekly"
    SPORTS = "sports"


# Path names used by the public site
BULLETIN_TYPE_ALIASES = {
    "manana": BulletinType.MORNING,
    "tarde": BulletinType.EVENING,
    "semanal": BulletinType.WEEKLY,
    "deportes": BulletinType.SPORTS,
}


class ArticleSnapshot(BaseModel):
    id: str
    title: str
    slug: str
    category: str
    featured_image: Optional[str] = None


class BulletinContent(BaseModel):
    type: BulletinType
    subject: str
    html: str
    text: str
    articles: List[ArticleSnapshot]


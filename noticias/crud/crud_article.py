# noticias/crud/crud_article.py
from datetime import datetime
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session, joinedload
from noticias import models


def create_article(db: Session, tags: Iterable[str] = (), keywords: Iterable[str] = (), **fields) -> models.Article:
    db_article = models.Article(**fields)
    db_article.tags = [models.ArticleTag(name=tag) for tag in tags]
    db_article.keywords = [models.ArticleKeyword(name=keyword) for keyword in keywords]
    db.add(db_article)
    db.commit()
    db.refresh(db_article)
    return db_article


def get_article(db: Session, article_id: int) -> Optional[models.Article]:
    return db.query(models.Article).filter(models.Article.id == article_id).first()


def published_query(db: Session, *criteria):
    return db.query(models.Article)\
             .filter(models.Article.status == "published", *criteria)


def list_published(db: Session, criteria=(), skip: int = 0, limit: int = 20) -> List[models.Article]:
    return published_query(db, *criteria)\
             .options(joinedload(models.Article.category))\
             .order_by(models.Article.published_at.desc())\
             .offset(skip)\
             .limit(limit)\
             .all()


def count_published(db: Session, criteria=()) -> int:
    return published_query(db, *criteria).count()


def get_published_since(db: Session, since: datetime, order_by, limit: int, criteria=()) -> List[models.Article]:
    return published_query(db, models.Article.published_at >= since, *criteria)\
             .order_by(order_by)\
             .limit(limit)\
             .all()

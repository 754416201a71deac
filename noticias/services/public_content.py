# noticias/services/public_content.py

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from noticias import crud, models
from noticias.core.config import settings
from noticias.core.exceptions import NotFoundError
from noticias.models.article import search_document
from noticias.models.category import DEFAULT_CATEGORY_COLOR
from noticias.schemas import CategoryResponse, Page, PublicArticle, SearchResult
from noticias.services.category_cache import CategoryCache
from noticias.utils.text import (
    accent_insensitive_pattern,
    capitalize_first,
    exact_match_pattern,
    extract_highlight,
    read_time_minutes,
    slug_to_name,
    slugify,
    strip_accents,
)

logger = logging.getLogger(__name__)

CATEGORY_BY_ID = "id"
CATEGORY_BY_LEGACY_STRING = "legacy-string"

SORT_RELEVANCE = "relevance"
SORT_DATE = "date"


@dataclass(frozen=True)
class CategoryMatch:
    """
    How a category slug resolves against articles.

    ``id``: a row in the categories table, articles reference it by key.
    ``legacy-string``: no such row, articles are matched on their raw category
    name with an accent-insensitive pattern.
    """
    kind: str
    value: Union[models.Category, str]

    def criterion(self):
        if self.kind == CATEGORY_BY_ID:
            return models.Article.category_id == self.value.id
        return models.Article.category_label.regexp_match(self.value)


def resolve_category(db: Session, slug: str, active_only: bool = True) -> CategoryMatch:
    category = crud.get_category_by_slug(db, slug, active_only=active_only)
    if category is not None:
        return CategoryMatch(kind=CATEGORY_BY_ID, value=category)
    return CategoryMatch(kind=CATEGORY_BY_LEGACY_STRING, value=accent_insensitive_pattern(slug))


def _category_fields(article: models.Article):
    """(name, slug, color) for either a linked category or a legacy string."""
    if article.category is not None:
        return article.category.name, article.category.slug, article.category.color
    if article.category_label:
        label = article.category_label
        return capitalize_first(label), slugify(label), DEFAULT_CATEGORY_COLOR
    return None, None, None


def to_public_article(article: models.Article) -> PublicArticle:
    name, slug, color = _category_fields(article)
    return PublicArticle(
        id=str(article.id),
        slug=article.slug,
        title=article.title,
        summary=article.summary,
        featured_image=article.image("medium"),
        category_name=name,
        category_slug=slug,
        category_color=color,
        tags=article.tag_names,
        published_at=article.published_at,
        author=article.author,
        read_time=read_time_minutes(article.content),
    )


def to_search_result(article: models.Article, query: str, score: Optional[float] = None) -> SearchResult:
    name, slug, _ = _category_fields(article)
    return SearchResult(
        id=str(article.id),
        slug=article.slug,
        title=article.title,
        summary=article.summary,
        featured_image=article.image("medium"),
        category_name=name,
        category_slug=slug,
        published_at=article.published_at,
        score=score,
        highlight=extract_highlight(article.content, query),
    )


class PublicContentService:
    """Categories, paginated listings and search for the public site."""

    def __init__(self, cache: CategoryCache):
        self.cache = cache

    def invalidate_cache(self) -> None:
        self.cache.invalidate()

    def get_categories(self, db: Session) -> List[CategoryResponse]:
        cached = self.cache.get()
        if cached is not None:
            logger.info("Returning categories from cache")
            return cached

        categories = crud.get_active_categories(db)
        if categories:
            result = [
                CategoryResponse(
                    id=str(category.id),
                    slug=category.slug,
                    name=category.name,
                    description=category.description,
                    color=category.color,
                    icon=category.icon,
                    count=crud.count_published_articles(db, category.id),
                    seo_title=category.seo_title,
                    seo_description=category.seo_description,
                )
                for category in categories
            ]
        else:
            logger.warning("No categories found in categories table, deriving them from published articles")
            result = []
            for label, count in crud.count_published_by_label(db):
                name = capitalize_first(label)
                slug = slugify(label)
                result.append(CategoryResponse(
                    id=slug,
                    slug=slug,
                    name=name,
                    description=f"Noticias de {label}",
                    color=DEFAULT_CATEGORY_COLOR,
                    icon="",
                    count=count,
                    seo_title=f"{name} - {settings.PROJECT_NAME}",
                    seo_description=f"Las mejores noticias de {label} en Hidalgo",
                ))
            result.sort(key=lambda category: strip_accents(category.name).casefold())

        self.cache.set(result)
        logger.info(f"Returning {len(result)} active categories")
        return result

    def _paginate(self, db: Session, criteria, page: int, limit: int) -> Page[PublicArticle]:
        skip = (page - 1) * limit
        articles = crud.list_published(db, criteria=criteria, skip=skip, limit=limit)
        total = crud.count_published(db, criteria=criteria)
        return Page[PublicArticle].build(
            data=[to_public_article(article) for article in articles],
            total=total,
            page=page,
            limit=limit,
        )

    def get_articles_by_category(self, db: Session, slug: str, page: int = 1, limit: int = 20) -> Page[PublicArticle]:
        match = resolve_category(db, slug)
        logger.info(f"Category '{slug}' resolved by {match.kind}")
        result = self._paginate(db, (match.criterion(),), page, limit)
        if result.total == 0:
            logger.warning(f"Category '{slug}' not found or empty")
            raise NotFoundError(f'Categoría "{slug}" no encontrada o sin noticias')
        return result

    def get_articles_by_tag(self, db: Session, slug: str, page: int = 1, limit: int = 20) -> Page[PublicArticle]:
        tag = slug_to_name(slug)
        criterion = models.Article.tags.any(models.ArticleTag.name.regexp_match(exact_match_pattern(tag)))
        result = self._paginate(db, (criterion,), page, limit)
        if result.total == 0:
            logger.warning(f"No articles found for tag '{tag}'")
            raise NotFoundError(f'No se encontraron noticias con el tag "{tag}"')
        return result

    def get_articles_by_author(self, db: Session, slug: str, page: int = 1, limit: int = 20) -> Page[PublicArticle]:
        author = slug_to_name(slug)
        criterion = models.Article.author.regexp_match(exact_match_pattern(author))
        result = self._paginate(db, (criterion,), page, limit)
        if result.total == 0:
            logger.warning(f"No articles found for author '{author}'")
            raise NotFoundError(f'No se encontraron noticias del autor "{author}"')
        return result

    def _text_search(self, db: Session, query: str):
        """
        Full-text clause and score expression for ``query``.

        PostgreSQL ranks with its text-search index. Other engines have no
        native ranking here and fall back to substring matching without score.
        """
        if db.get_bind().dialect.name == "postgresql":
            ts_query = func.plainto_tsquery(settings.SEARCH_LANGUAGE, query)
            document = search_document()
            return document.op("@@")(ts_query), func.ts_rank(document, ts_query)
        clause = or_(
            models.Article.title.icontains(query, autoescape=True),
            models.Article.summary.icontains(query, autoescape=True),
            models.Article.content.icontains(query, autoescape=True),
        )
        return clause, None

    def build_search_query(self, db: Session, query: str, category_slug: Optional[str] = None,
                           sort_by: str = SORT_RELEVANCE):
        """
        Ordered search query, its filter criteria, and whether rows carry a score.

        Rows are ``Article`` instances, or ``(Article, score)`` pairs when ranked.
        """
        clause, score = self._text_search(db, query)
        criteria = [models.Article.status == "published", clause]

        if category_slug:
            match = resolve_category(db, category_slug, active_only=False)
            criteria.append(match.criterion())

        rank = score.label("score") if score is not None and sort_by == SORT_RELEVANCE else None
        columns = [models.Article] if rank is None else [models.Article, rank]
        search_query = db.query(*columns).filter(*criteria).options(joinedload(models.Article.category))

        if rank is not None:
            search_query = search_query.order_by(rank.desc(), models.Article.published_at.desc())
        else:
            search_query = search_query.order_by(models.Article.published_at.desc())
        return search_query, criteria, rank is not None

    def search_articles(self, db: Session, query: str, category_slug: Optional[str] = None,
                        sort_by: str = SORT_RELEVANCE, page: int = 1, limit: int = 20) -> Page[SearchResult]:
        skip = (page - 1) * limit
        search_query, criteria, ranked = self.build_search_query(db, query, category_slug, sort_by)
        rows = search_query.offset(skip).limit(limit).all()
        total = db.query(models.Article).filter(*criteria).count()

        if ranked:
            data = [to_search_result(article, query, float(row_score)) for article, row_score in rows]
        else:
            data = [to_search_result(article, query) for article in rows]

        logger.info(f"Search '{query}': {total} results")
        return Page[SearchResult].build(data=data, total=total, page=page, limit=limit)

import re
from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Session

from noticias import crud, models
from noticias.core.exceptions import NotFoundError
from noticias.models.category import DEFAULT_CATEGORY_COLOR
from noticias.services.public_content import (
    CATEGORY_BY_ID,
    CATEGORY_BY_LEGACY_STRING,
    resolve_category,
    to_public_article,
)
from noticias.utils.dates import utcnow


def test_categories_are_ordered_and_counted(db, make_category, make_article, content_service):
    deportes = make_category("deportes", "Deportes", order=2)
    politica = make_category("politica", "Política", order=1)
    make_category("oculta", "Oculta", order=0, is_active=False)
    make_article(category_id=deportes.id)
    make_article(category_id=deportes.id)
    make_article(category_id=deportes.id, status="draft")
    make_article(category_id=politica.id)

    categories = content_service.get_categories(db)

    assert [c.slug for c in categories] == ["politica", "deportes"]
    assert [c.count for c in categories] == [1, 2]
    assert categories[0].id == str(politica.id)


def test_categories_are_served_from_cache_until_ttl(db, clock, make_category, content_service):
    make_category("politica", "Política")
    first = content_service.get_categories(db)

    make_category("cultura", "Cultura")
    assert content_service.get_categories(db) == first

    clock.advance(299)
    assert len(content_service.get_categories(db)) == 1

    clock.advance(2)
    assert len(content_service.get_categories(db)) == 2


def test_explicit_invalidation_refreshes_categories(db, make_category, content_service):
    make_category("politica", "Política")
    content_service.get_categories(db)
    make_category("cultura", "Cultura")

    content_service.invalidate_cache()

    assert len(content_service.get_categories(db)) == 2


def test_category_changes_invalidate_cache(db, cache, make_category, content_service):
    cache.listen()
    politica = make_category("politica", "Política")
    assert len(content_service.get_categories(db)) == 1

    make_category("cultura", "Cultura")
    assert len(content_service.get_categories(db)) == 2

    politica.name = "Política Local"
    db.commit()
    assert content_service.get_categories(db)[1].name == "Política Local"


def test_category_cache_waits_for_commit(db, cache, make_category, content_service):
    cache.listen()
    make_category("politica", "Política")
    assert len(content_service.get_categories(db)) == 1

    db.add(models.Category(slug="cultura", name="Cultura"))
    db.flush()
    assert len(content_service.get_categories(db)) == 1

    db.commit()
    assert len(content_service.get_categories(db)) == 2


def test_rolled_back_category_changes_keep_cache(db, cache, make_category, content_service):
    cache.listen()
    make_category("politica", "Política")
    first = content_service.get_categories(db)

    db.add(models.Category(slug="cultura", name="Cultura"))
    db.flush()
    db.rollback()

    assert cache.get() == first
    db.commit()
    assert content_service.get_categories(db) == first


def test_pseudo_categories_from_legacy_strings(db, make_article, content_service):
    make_article(category_label="política")
    make_article(category_label="política")
    make_article(category_label="deportes")
    make_article(category_label="cultura", status="draft")

    categories = content_service.get_categories(db)

    assert [c.name for c in categories] == ["Deportes", "Política"]
    assert [c.slug for c in categories] == ["deportes", "politica"]
    assert [c.count for c in categories] == [1, 2]
    assert categories[1].color == DEFAULT_CATEGORY_COLOR
    assert categories[1].description == "Noticias de política"
    assert categories[1].seo_title == "Política - Noticias Pachuca"


def test_resolve_category(db, make_category):
    make_category("deportes", "Deportes")

    assert resolve_category(db, "deportes").kind == CATEGORY_BY_ID
    legacy = resolve_category(db, "politica")
    assert legacy.kind == CATEGORY_BY_LEGACY_STRING
    assert legacy.value == "(?i)^p[oóòöô]l[iíìïî]t[iíìïî]c[aáàäâ]$"


def test_articles_by_category_id(db, make_category, make_article, content_service):
    deportes = make_category("deportes", "Deportes", color="#00C853")
    make_article(title="Tuzos", category_id=deportes.id)
    make_article(title="Cabildo", category_label="politica")

    page = content_service.get_articles_by_category(db, "deportes")

    assert page.total == 1
    assert page.data[0].title == "Tuzos"
    assert page.data[0].category_name == "Deportes"
    assert page.data[0].category_color == "#00C853"


def test_articles_by_legacy_category_ignore_accents_and_case(db, make_article, content_service):
    make_article(title="Con acento", category_label="Política")
    make_article(title="Sin acento", category_label="politica")
    make_article(title="Plural", category_label="Políticas")

    page = content_service.get_articles_by_category(db, "politica")

    assert sorted(a.title for a in page.data) == ["Con acento", "Sin acento"]
    article = next(a for a in page.data if a.title == "Con acento")
    assert article.category_name == "Política"
    assert article.category_slug == "politica"
    assert article.category_color == DEFAULT_CATEGORY_COLOR


def test_unknown_category_is_not_found(db, make_article, content_service):
    make_article(category_label="deportes")

    with pytest.raises(NotFoundError):
        content_service.get_articles_by_category(db, "nonexistent-slug")


def test_articles_by_tag_match_whole_tag(db, make_article, content_service):
    make_article(title="Completo", tags=["Tuzos del Pachuca"])
    make_article(title="Parcial", tags=["Tuzos"])

    page = content_service.get_articles_by_tag(db, "tuzos-del-pachuca")

    assert [a.title for a in page.data] == ["Completo"]
    assert page.data[0].tags == ["Tuzos del Pachuca"]

    with pytest.raises(NotFoundError):
        content_service.get_articles_by_tag(db, "beisbol")


def test_articles_by_author(db, make_article, content_service):
    make_article(title="Una", author="Carlos Ramirez")
    make_article(title="Dos", author="CARLOS RAMIREZ")
    make_article(title="Otra", author="Carlos Ramirez Soto")

    page = content_service.get_articles_by_author(db, "carlos-ramirez")

    assert sorted(a.title for a in page.data) == ["Dos", "Una"]

    with pytest.raises(NotFoundError):
        content_service.get_articles_by_author(db, "nadie")


def test_listing_pagination(db, make_article, content_service):
    now = utcnow()
    for i in range(5):
        make_article(title=f"Nota {i}", tags=["obras"], published_at=now - timedelta(hours=i))

    page = content_service.get_articles_by_tag(db, "obras", page=2, limit=2)

    assert [a.title for a in page.data] == ["Nota 2", "Nota 3"]
    assert page.total == 5
    assert page.total_pages == 3
    assert page.has_next_page is True
    assert page.has_prev_page is True

    last = content_service.get_articles_by_tag(db, "obras", page=3, limit=2)
    assert last.has_next_page is False
    assert len(last.data) == 1


def test_public_article_fields(db, make_article):
    image = {"original": "o.jpg", "medium": "m.jpg"}
    article = make_article(content="<p>" + "palabra " * 450 + "</p>", featured_image=image)

    item = to_public_article(crud.get_article(db, article.id))

    assert item.read_time == 3
    assert item.featured_image == "m.jpg"
    assert item.category_name is None


def test_search_by_date_without_score(db, make_article, content_service):
    now = utcnow()
    make_article(title="El alcalde inaugura obra", published_at=now - timedelta(hours=3))
    make_article(title="Tráfico", content="<p>Declaraciones del Alcalde sobre el tráfico</p>",
                 published_at=now - timedelta(hours=1))
    make_article(title="Alcalde en borrador", status="draft")
    make_article(title="Clima")

    page = content_service.search_articles(db, "alcalde", sort_by="date")

    assert page.total == 2
    assert [r.title for r in page.data] == ["Tráfico", "El alcalde inaugura obra"]
    assert page.data[0].score is None
    assert page.data[0].highlight == "Declaraciones del Alcalde sobre el tráfico"


def test_search_relevance_falls_back_to_date_order(db, make_article, content_service):
    now = utcnow()
    make_article(title="Feria de Pachuca", published_at=now - timedelta(hours=2))
    make_article(title="Pachuca campeón", published_at=now - timedelta(hours=1))

    page = content_service.search_articles(db, "pachuca")

    assert [r.title for r in page.data] == ["Pachuca campeón", "Feria de Pachuca"]


def test_search_filtered_by_category(db, make_category, make_article, content_service):
    deportes = make_category("deportes", "Deportes", is_active=False)
    make_article(title="Gol de los Tuzos", category_id=deportes.id)
    make_article(title="Tuzos en el cabildo", category_label="politica")

    page = content_service.search_articles(db, "tuzos", category_slug="deportes")

    assert [r.title for r in page.data] == ["Gol de los Tuzos"]
    assert page.data[0].category_slug == "deportes"


def test_pseudo_categories_sort_ignoring_accents(db, make_article, content_service):
    for label in ("zona", "ámbito", "cultura"):
        make_article(category_label=label)

    categories = content_service.get_categories(db)

    assert [c.name for c in categories] == ["Ámbito", "Cultura", "Zona"]


@pytest.fixture
def pg_session():
    # Never connects: queries are only compiled
    session = Session(bind=create_engine("postgresql+psycopg2://noticias@localhost/noticias"))
    yield session
    session.close()


def _postgres_sql(search_query):
    compiled = search_query.statement.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True})
    return " ".join(str(compiled).split())


def test_postgres_search_ranks_with_text_index(pg_session, content_service):
    search_query, _, ranked = content_service.build_search_query(pg_session, "tuzos", sort_by="relevance")
    sql = _postgres_sql(search_query)

    assert ranked is True
    assert "@@ plainto_tsquery('spanish', 'tuzos')" in sql
    assert "ts_rank(to_tsvector('spanish'" in sql
    assert re.search(r"ORDER BY (score|ts_rank\(.*\)) DESC, articles\.published_at DESC", sql)


def test_postgres_search_by_date_ignores_score(pg_session, content_service):
    search_query, _, ranked = content_service.build_search_query(pg_session, "tuzos", sort_by="date")
    sql = _postgres_sql(search_query)

    assert ranked is False
    assert "@@ plainto_tsquery('spanish', 'tuzos')" in sql
    assert "ts_rank" not in sql
    assert sql.endswith("ORDER BY articles.published_at DESC")

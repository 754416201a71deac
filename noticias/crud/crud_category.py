# noticias/crud/crud_category.py

import logging
from sqlalchemy import func
from sqlalchemy.orm import Session
from noticias import models

logger = logging.getLogger(__name__)

INITIAL_CATEGORIES = [
    {
        "slug": "politica",
        "name": "Política",
        "description": "Noticias sobre política local, estatal y nacional en Pachuca e Hidalgo",
        "color": "#FF0000",
        "icon": "IconNews",
        "order": 1,
        "seo_title": "Noticias de Política en Pachuca e Hidalgo - Noticias Pachuca",
        "seo_description": "Las últimas noticias políticas de Pachuca, Hidalgo y México.",
        "seo_keywords": "política pachuca, política hidalgo, gobierno pachuca",
    },
    {
        "slug": "deportes",
        "name": "Deportes",
        "description": "Cobertura deportiva: fútbol, Tuzos del Pachuca, y más deportes locales",
        "color": "#00C853",
        "icon": "IconBallFootball",
        "order": 2,
        "seo_title": "Deportes en Pachuca - Tuzos del Pachuca y Más - Noticias Pachuca",
        "seo_description": "Últimas noticias deportivas de Pachuca. Tuzos del Pachuca, Liga MX y más.",
        "seo_keywords": "deportes pachuca, tuzos pachuca, fútbol pachuca, liga mx",
    },
    {
        "slug": "cultura",
        "name": "Cultura",
        "description": "Eventos culturales, arte, música, teatro y tradiciones de Pachuca e Hidalgo",
        "color": "#9333EA",
        "icon": "IconPalette",
        "order": 3,
        "seo_title": "Cultura en Pachuca e Hidalgo - Eventos y Tradiciones",
        "seo_description": "Descubre la cultura de Pachuca: eventos, arte, música y teatro.",
        "seo_keywords": "cultura pachuca, eventos pachuca, arte hidalgo",
    },
    {
        "slug": "economia",
        "name": "Economía",
        "description": "Economía local, negocios, empleo y desarrollo económico en la región",
        "color": "#FFB22C",
        "icon": "IconCoin",
        "order": 4,
        "seo_title": "Economía y Negocios en Pachuca e Hidalgo - Noticias Pachuca",
        "seo_description": "Noticias de economía, negocios y empleo en Pachuca e Hidalgo.",
        "seo_keywords": "economía pachuca, negocios hidalgo, empleo pachuca",
    },
    {
        "slug": "seguridad",
        "name": "Seguridad",
        "description": "Noticias de seguridad pública, justicia y prevención del delito",
        "color": "#6B7280",
        "icon": "IconShield",
        "order": 5,
        "seo_title": "Seguridad en Pachuca e Hidalgo - Noticias de Seguridad Pública",
        "seo_description": "Seguridad pública, justicia y prevención del delito en Pachuca e Hidalgo.",
        "seo_keywords": "seguridad pachuca, seguridad hidalgo, policía pachuca",
    },
    {
        "slug": "salud",
        "name": "Salud",
        "description": "Salud pública, servicios médicos, prevención y bienestar en Pachuca",
        "color": "#3B82F6",
        "icon": "IconHeartbeat",
        "order": 6,
        "seo_title": "Salud en Pachuca e Hidalgo - Servicios Médicos y Bienestar",
        "seo_description": "Salud pública, servicios médicos y bienestar en Pachuca e Hidalgo.",
        "seo_keywords": "salud pachuca, salud hidalgo, hospitales pachuca",
    },
]


def create_category(db: Session, **fields) -> models.Category:
    logger.info(f"Creating new category: {fields.get('slug')}")
    db_category = models.Category(**fields)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    logger.info(f"Category created successfully. ID: {db_category.id}")
    return db_category


def get_active_categories(db: Session):
    categories = db.query(models.Category)\
                   .filter(models.Category.is_active.is_(True))\
                   .order_by(models.Category.order.asc(), models.Category.name.asc())\
                   .all()
    logger.info(f"Retrieved {len(categories)} active categories")
    return categories


def get_category_by_slug(db: Session, slug: str, active_only: bool = True):
    query = db.query(models.Category).filter(models.Category.slug == slug)
    if active_only:
        query = query.filter(models.Category.is_active.is_(True))
    return query.first()


def count_published_articles(db: Session, category_id: int) -> int:
    return db.query(models.Article)\
             .filter(models.Article.category_id == category_id,
                     models.Article.status == "published")\
             .count()


def count_published_by_label(db: Session):
    """(category_label, count) for published articles that carry a legacy string category."""
    return db.query(models.Article.category_label, func.count(models.Article.id))\
             .filter(models.Article.status == "published",
                     models.Article.category_label.isnot(None),
                     models.Article.category_label != "")\
             .group_by(models.Article.category_label)\
             .all()


def seed_initial_categories(db: Session):
    logger.info("Checking if initial categories need to be seeded")
    if db.query(models.Category).count() == 0:
        logger.info("No categories found. Seeding initial categories.")
        for fields in INITIAL_CATEGORIES:
            db.add(models.Category(**fields))
        db.commit()
        logger.info(f"Seeded {len(INITIAL_CATEGORIES)} initial categories")
    else:
        logger.info("Categories already exist. No need to seed.")

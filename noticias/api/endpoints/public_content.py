# noticias/api/endpoints/public_content.py

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Header, Query, Request
from sqlalchemy.orm import Session

from noticias import schemas
from noticias.api import deps
from noticias.services.bulletin import BulletinService
from noticias.services.contact import ContactService
from noticias.services.public_content import PublicContentService
from noticias.services.subscription import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/categories", response_model=List[schemas.CategoryResponse])
def read_categories(
    db: Session = Depends(deps.get_db),
    service: PublicContentService = Depends(deps.get_public_content_service),
):
    return service.get_categories(db)


@router.get("/categoria/{slug}", response_model=schemas.Page[schemas.PublicArticle])
def read_articles_by_category(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    service: PublicContentService = Depends(deps.get_public_content_service),
):
    logger.info(f"Fetching articles for category: {slug}, page: {page}, limit: {limit}")
    return service.get_articles_by_category(db, slug, page, limit)


@router.get("/tag/{slug}", response_model=schemas.Page[schemas.PublicArticle])
def read_articles_by_tag(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    service: PublicContentService = Depends(deps.get_public_content_service),
):
    logger.info(f"Fetching articles for tag: {slug}, page: {page}, limit: {limit}")
    return service.get_articles_by_tag(db, slug, page, limit)


@router.get("/autor/{slug}", response_model=schemas.Page[schemas.PublicArticle])
def read_articles_by_author(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    service: PublicContentService = Depends(deps.get_public_content_service),
):
    logger.info(f"Fetching articles for author: {slug}, page: {page}, limit: {limit}")
    return service.get_articles_by_author(db, slug, page, limit)


@router.get("/busqueda/{query}", response_model=schemas.Page[schemas.SearchResult])
def search_articles(
    query: str,
    category: Optional[str] = None,
    sort_by: str = Query("relevance", alias="sortBy", pattern="^(relevance|date)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    service: PublicContentService = Depends(deps.get_public_content_service),
):
    return service.search_articles(db, query, category, sort_by, page, limit)


@router.post("/contacto", response_model=schemas.ContactResponse)
def submit_contact(
    form: schemas.ContactForm,
    request: Request,
    user_agent: str = Header(default=""),
    x_site_domain: Optional[str] = Header(default=None),
    db: Session = Depends(deps.get_db),
    service: ContactService = Depends(deps.get_contact_service),
):
    ip_address = request.client.host if request.client else ""
    message = service.submit(db, form, user_agent=user_agent, ip_address=ip_address, site_domain=x_site_domain)
    return schemas.ContactResponse(
        message="Mensaje enviado exitosamente. Te responderemos pronto.",
        id=str(message.id),
    )


@router.post("/suscribir-boletin", response_model=schemas.SubscriptionResponse)
def subscribe_newsletter(
    subscription: schemas.SubscribeRequest,
    db: Session = Depends(deps.get_db),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    logger.info(f"Received request to subscribe: {subscription.email}")
    subscriber = service.subscribe(db, subscription)
    if subscriber.is_confirmed:
        message = "Ya estás suscrito. Hemos actualizado tus preferencias."
    else:
        message = "Revisa tu email para confirmar tu suscripción."
    return schemas.SubscriptionResponse(message=message, email=subscriber.email, is_confirmed=subscriber.is_confirmed)


@router.get("/confirmar-suscripcion", response_model=schemas.SubscriptionResponse)
def confirm_subscription(
    token: str = Query(..., min_length=1),
    db: Session = Depends(deps.get_db),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    subscriber = service.confirm_subscription(db, token)
    return schemas.SubscriptionResponse(
        message="¡Suscripción confirmada! Comenzarás a recibir nuestros boletines.",
        email=subscriber.email,
        is_confirmed=True,
    )


@router.get("/desuscribir", response_model=schemas.MessageResponse)
def unsubscribe(
    token: str = Query(..., min_length=1),
    reason: Optional[str] = Query(None, max_length=500),
    db: Session = Depends(deps.get_db),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    service.unsubscribe(db, token, reason)
    return schemas.MessageResponse(message="Te has desuscrito exitosamente. Lamentamos verte partir.")


@router.put("/preferencias", response_model=schemas.SubscriberOut)
def update_preferences(
    preferences: schemas.PreferencesUpdate,
    token: str = Query(..., min_length=1),
    db: Session = Depends(deps.get_db),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    return service.update_preferences(db, token, preferences)


@router.get("/boletin/{tipo}", response_model=Union[schemas.BulletinContent, schemas.MessageResponse])
def preview_bulletin(
    tipo: str,
    db: Session = Depends(deps.get_db),
    service: BulletinService = Depends(deps.get_bulletin_service),
):
    content = service.generate(db, tipo)
    if content is None:
        return schemas.MessageResponse(message="No hay noticias de deportes disponibles")
    return content

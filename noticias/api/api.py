# noticias/api/api.py

import logging
from fastapi import APIRouter
from noticias.api.endpoints import public_content

logger = logging.getLogger(__name__)

api_router = APIRouter()

api_router.include_router(public_content.router, prefix="/public-content", tags=["public content"])
logger.info("Public content router included successfully")

logger.info(f"API routes configured: {[route.path for route in api_router.routes]}")

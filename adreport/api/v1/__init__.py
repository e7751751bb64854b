"""
API v1 router configuration.
"""
from fastapi import APIRouter
from .endpoints import reports, search_terms, placements

api_router = APIRouter()

api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(search_terms.router, prefix="/search-terms", tags=["search-terms"])
api_router.include_router(placements.router, prefix="/placements", tags=["placements"])

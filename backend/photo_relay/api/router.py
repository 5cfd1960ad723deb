"""
API router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from photo_relay.api import diagnostics, uploads

api_router = APIRouter()

# Include route modules
api_router.include_router(diagnostics.router, prefix="/test", tags=["diagnostics"])
api_router.include_router(uploads.router, prefix="/upload", tags=["uploads"])

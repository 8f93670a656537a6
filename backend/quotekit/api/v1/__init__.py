"""Versioned API router."""

from fastapi import APIRouter

from . import clients, health, pricing, quotes, rates, team

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(pricing.router, tags=["pricing"])
router.include_router(rates.router, prefix="/rates", tags=["rates"])
router.include_router(clients.router, prefix="/clients", tags=["clients"])
router.include_router(quotes.router, prefix="/quotes", tags=["quotes"])
router.include_router(team.router, prefix="/team", tags=["team"])

__all__ = ["router"]

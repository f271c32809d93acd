"""Versioned API router."""

from fastapi import APIRouter

from . import health, invoices, owners, reservations

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(invoices.router, tags=["invoices"])
api_router.include_router(reservations.router, tags=["reservations"])
api_router.include_router(owners.router, tags=["owners"])

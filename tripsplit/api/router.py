"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from tripsplit.api.routes import events, expenses, allocations, settlements, fx_rates

api_router = APIRouter()

# Include all route modules
api_router.include_router(events.router)
api_router.include_router(expenses.router)
api_router.include_router(allocations.router)
api_router.include_router(settlements.router)
api_router.include_router(fx_rates.router)

"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from stock_advisor.api.v1.endpoints import analytics, indicators, risk

router = APIRouter()

# Include all endpoint routers
router.include_router(analytics.router, prefix="/analytics", tags=["Market Analytics"])
router.include_router(indicators.router, prefix="/indicators", tags=["Indicators"])
router.include_router(risk.router, prefix="/risk", tags=["Risk"])

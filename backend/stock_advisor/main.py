"""
Stock Advisor Pro Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stock_advisor.core.config import settings
from stock_advisor.core.logging_config import setup_logging
from stock_advisor.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"MACD signal mode: {settings.macd_signal_mode}")
    if not settings.finnhub_api_key:
        logger.warning("FINNHUB_API_KEY not set - analytics requests will return 404")

    # Initialize Redis cache
    from stock_advisor.services.cache.redis_client import init_redis, close_redis
    redis_client = await init_redis()
    if redis_client:
        logger.info("Redis cache connected")
    else:
        logger.info("Redis unavailable - using in-memory cache")

    yield

    # Shutdown
    logger.info("Shutting down...")
    from stock_advisor.services.data_ingestion import get_historical_data_service
    from stock_advisor.services.risk import get_risk_service
    await get_historical_data_service().provider.close()
    await get_risk_service().provider.close()
    await close_redis()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Stock Advisor Pro Analytics API

    ## Architecture
    - **Data Ingestion**: Daily candles, quotes and company data from Finnhub
    - **Technical Analysis**: SMA, EMA, RSI, MACD, Bollinger Bands, ATR (pure NumPy)
    - **Signals & Trend**: BUY/SELL signals, trend classification, support/resistance
    - **Market Analytics**: Composite per-ticker record with performance, volatility, volume
    - **Risk**: Earnings, volatility, float, valuation and sector concentration flags
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow both frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Stock Advisor Pro Backend API",
        "docs": "/docs",
        "health": "/health",
    }

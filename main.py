"""
PoliMarket - Products, Sellers & HR Backend
FastAPI Application Entry Point
"""
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from contextlib import asynccontextmanager
import logging

from polimarket.core import settings, engine, Base, SessionLocal
from polimarket.core.logging import configure_logging
from polimarket.api import api_router
from polimarket.seed import seed_database

logger = logging.getLogger("polimarket")

# Lifespan for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} API...")

    # Startup: Create tables if not exist
    Base.metadata.create_all(bind=engine)

    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_database(db)
        except Exception:
            # The API is still usable without demo data
            logger.exception("Database seeding failed, continuing without complete seed data")
        finally:
            db.close()

    logger.info(f"{settings.APP_NAME} API is ready on port {settings.APP_PORT}")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")

# Create FastAPI app
app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Products, inventory ledger, seller authorization and HR employees",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(api_router, prefix="/api")

# Root redirect to API docs
@app.get("/")
async def root():
    return RedirectResponse(url="/docs")

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.DEBUG
    )

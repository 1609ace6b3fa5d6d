import logging

from fastapi import FastAPI

from portfolio.core.cache import MemoryCache
from portfolio.core.config import settings
from portfolio.routers import cache, content
from portfolio.services.content_service import ContentService

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)
app.include_router(content.router)
app.include_router(cache.router)


@app.on_event("startup")
async def on_startup():
    # One store per process, shared by every request through app.state.
    app.state.cache = MemoryCache()
    app.state.content = ContentService(app.state.cache)
    logger.info(f"Content cache ready, upstream {settings.PORTFOLIO_API_URL}")


@app.on_event("shutdown")
async def on_shutdown():
    await app.state.content.close()
    app.state.cache.clear_all()
    logger.info("Content cache cleared on shutdown")


@app.get("/health")
async def health():
    return {"status": "ok", "cache": app.state.cache.stats()}


@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} is running"}

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from analytics import router as analytics_router
from core import db, settings
from images.resolvers import build_resolver

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One DB pool and one image resolver per process.
    image_settings = settings.image_settings()
    app.state.image_resolver = build_resolver(image_settings)
    app.state.image_resolve_concurrency = image_settings.resolve_concurrency
    logger.info(
        "startup image_strategy=%s resolve_concurrency=%s",
        app.state.image_resolver.strategy,
        image_settings.resolve_concurrency,
    )

    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


configure_logging()

app = FastAPI(lifespan=lifespan)

# Allow the frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics_router.router, tags=["analytics"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

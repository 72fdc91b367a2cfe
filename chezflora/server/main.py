"""
The ChezFlora ASGI application.

Wires CORS and request timing, the exception handlers, every ``/api/v1``
router and the blog publication scheduler into one ``app``; ``run()`` serves
it with uvicorn.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chezflora.core.database import async_session_maker, init_db
from chezflora.core.logging_config import get_logger, setup_logging
from chezflora.core.monitoring import initialize_logfire

from .api.v1 import (
    addresses,
    auth,
    blog,
    cart,
    categories,
    favorites,
    health,
    newsletter,
    orders,
    products,
    quotes,
    tags,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestTimingMiddleware
from .services.scheduler import BlogPublicationScheduler

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup and shutdown.

    Prepares the database on startup and runs the scheduled-post publisher
    for as long as the application lives.
    """
    # Startup
    logger.info("Starting up ChezFlora Server...")
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    publisher = None
    if settings.blog.scheduler_enabled:
        publisher = BlogPublicationScheduler(async_session_maker, settings.blog.publish_interval_seconds)
        publisher.start()
    app.state.blog_publisher = publisher

    yield

    # Shutdown
    logger.info("Shutting down ChezFlora Server...")
    if publisher is not None:
        publisher.shutdown()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ChezFlora Server API

    Backend of the ChezFlora flower shop: catalog, carts and checkout, customer
    accounts, custom arrangement quotes, the blog with threaded comments and the
    administration back-office.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Browsers need the guest cart token header exposed to read it
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
    expose_headers=[constant.GUEST_CART_HEADER, "X-Process-Time"],
)
app.add_middleware(RequestTimingMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth")
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users")
app.include_router(categories.router, prefix=f"{constant.API_V1_STR}/categories")
app.include_router(products.router, prefix=f"{constant.API_V1_STR}/products")
app.include_router(tags.router, prefix=f"{constant.API_V1_STR}/tags")
app.include_router(favorites.router, prefix=f"{constant.API_V1_STR}/favorites")
app.include_router(cart.router, prefix=f"{constant.API_V1_STR}/cart")
app.include_router(addresses.router, prefix=f"{constant.API_V1_STR}/addresses")
app.include_router(orders.router, prefix=f"{constant.API_V1_STR}/orders")
app.include_router(quotes.router, prefix=f"{constant.API_V1_STR}/quotes")
app.include_router(blog.router, prefix=f"{constant.API_V1_STR}/blog")
app.include_router(newsletter.router, prefix=f"{constant.API_V1_STR}/newsletter")

initialize_logfire(app)


def run() -> None:
    """Console entry point serving the application with uvicorn."""
    uvicorn.run(
        "chezflora.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

"""
# `ekart/main.py` - Application entry point

## Routers
- `/user`            accounts, verification, sessions
- `/market`          catalog (products, categories)
- `/market/cart`     buyer cart
- `/market/buy`, `/market/orders`   checkout and order history
- `/market/profile`  shipping address / business details
- `/market/seller`   seller inventory and sales history

## Background scheduler
- Library: APScheduler (`AsyncIOScheduler`)
- Job: `run_cleanup_job` removes registrations never verified within
  `UNVERIFIED_ACCOUNT_TTL_HOURS`, every `CLEANUP_INTERVAL_MINUTES`.
- Started on app startup, stopped on shutdown.

Errors are answered as `{"success": false, "message": "..."}` (see `ekart.core.errors`).
"""
import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ekart.config import settings
from ekart.core.errors import register_exception_handlers
from ekart.routers import carts, orders, products, profile, seller, users
from ekart.services.cleanup import run_cleanup_job

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

scheduler = AsyncIOScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not scheduler.running:
        scheduler.add_job(
            run_cleanup_job,
            "interval",
            minutes=settings.cleanup_interval_minutes,
            id="purge-unverified",
            replace_existing=True,
        )
        scheduler.start()
    yield
    if scheduler.running:
        scheduler.shutdown(wait=False)


def create_app(with_scheduler: bool = True) -> FastAPI:
    app = FastAPI(
        title="EKart API",
        description="Two-sided marketplace: buyers shop and check out, sellers list products and track sales.",
        version="1.0.0",
        redirect_slashes=False,
        lifespan=lifespan if with_scheduler else None,
    )

    # Configure CORS (allow front-end domain or all origins as specified)
    allow_origins = [origin.strip() for origin in settings.allowed_origins.split(',')] if settings.allowed_origins else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(profile.router)
    app.include_router(seller.router)
    return app


app = create_app()

# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("ekart.main:app", host="0.0.0.0", port=8001, reload=True)

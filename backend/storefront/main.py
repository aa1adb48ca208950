"""
# `storefront/main.py` — Application Entry Point

## Overview
Starts the FastAPI application: logging, CORS and routers.

---

## Routers
**Public:**
- `/products` (catalog view with effective prices)
- `/products/{id}/reviews`
- `/cart` (session scoped via `X-Session-Id`)

**Admin (prefix `/admin`):**
- `/products` (product and discount authoring)

Storage backend is chosen by `STORAGE_BACKEND` (`memory` | `firestore`), see `config.py`.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.config import settings
from storefront.routers import carts, products, reviews

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Grocery Storefront Commerce API",
    description="Cart, pricing and rating core of the grocery storefront.",
    version="1.0.0",
    debug=settings.debug,
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

# Include public routers
app.include_router(products.router)
app.include_router(reviews.router)
app.include_router(carts.router)

# Include admin routers (with prefix /admin)
app.include_router(products.admin_router, prefix="/admin")


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=True)

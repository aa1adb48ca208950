"""
# `storefront/routers/products.py` — Product Endpoints

## Public Endpoints

### `GET /products/`
Lists active products with their current `final_price` and `on_sale` flag.

### `GET /products/{product_id}`
Single product. `final_price` is evaluated against the discount window at request time.

---

## Admin Endpoints (prefix `/admin`)

### `PUT /products/{product_id}`
Create or update a product. Reviews, rating and review_count are kept / re-derived; SKU is
generated from the category when not given.

### `PUT /products/{product_id}/discount`
Set the discount descriptor. A bad window or value is rejected with `400`.

### `DELETE /products/{product_id}/discount`
Remove the discount.
"""
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.core.deps import get_catalog
from storefront.core.errors import InvalidDiscount, ProductNotFound
from storefront.schemas.product import DiscountIn, ProductIn, ProductOut, ProductSnapshot
from storefront.services.catalog import Catalog
from storefront.services.pricing import quote

router = APIRouter(prefix="/products", tags=["Products"])
admin_router = APIRouter(prefix="/products", tags=["Admin: Products"])


def _to_out(product: ProductSnapshot) -> ProductOut:
    q = quote(product, datetime.now(timezone.utc))
    return ProductOut(**product.model_dump(), final_price=q.final_price, on_sale=q.on_sale)


@router.get("/", response_model=List[ProductOut], summary="List Products")
def list_products(
    category: Optional[str] = Query(None, description="Category name (optional)"),
    catalog: Catalog = Depends(get_catalog),
):
    products = catalog.list_products()
    if category:
        products = [p for p in products if p.category == category]
    return [_to_out(p) for p in products]


@router.get("/{product_id}", response_model=ProductOut, summary="Get Product")
def get_product(product_id: str, catalog: Catalog = Depends(get_catalog)):
    try:
        return _to_out(catalog.get_by_id(product_id))
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")


# ---------- Admin ----------

@admin_router.put("/{product_id}", response_model=ProductOut, summary="Create/Update Product")
def save_product(product_id: str, body: ProductIn, catalog: Catalog = Depends(get_catalog)):
    return _to_out(catalog.save_product(product_id, body))


@admin_router.put("/{product_id}/discount", response_model=ProductOut, summary="Set Discount")
def set_discount(product_id: str, body: DiscountIn, catalog: Catalog = Depends(get_catalog)):
    try:
        return _to_out(catalog.set_discount(product_id, body))
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    except InvalidDiscount as e:
        raise HTTPException(status_code=400, detail=str(e))


@admin_router.delete("/{product_id}/discount", response_model=ProductOut, summary="Remove Discount")
def clear_discount(product_id: str, catalog: Catalog = Depends(get_catalog)):
    try:
        return _to_out(catalog.clear_discount(product_id))
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")

from typing import List

from fastapi import APIRouter, Depends

from app.core.config import Settings
from products.domain.entities.product import ErrorOut, ProductListOut, ProductOut
from products.services.read_through import ReadThroughHandler
from shared.entities.fetch_result import Provenance
from shared.wiring import get_products_handler, get_settings

router = APIRouter(prefix="/api/products", tags=["products"])

# Provenance -> wire name of the producing layer.
_SOURCE_NAMES = {Provenance.cache: "cache", Provenance.source: "db"}


@router.get(
    "",
    summary="List products",
    description=(
        "Returns the product catalog. Served from the cache when it is enabled, reachable "
        "and holds a valid entry; otherwise read from the database and written back to "
        "the cache for `CACHE_TTL_SECONDS` (60s by default).\n\n"
        "`source` tells which layer answered: `cache` or `db`. The response body is the "
        "same either way; a cache outage only makes requests slower."
    ),
    response_model=ProductListOut,
    responses={
        200: {
            "description": "Product list.",
            "content": {
                "application/json": {
                    "examples": {
                        "from_db": {
                            "summary": "Cold cache",
                            "value": {"source": "db", "data": [{"id": 1, "name": "Laptop"}, {"id": 2, "name": "Phone"}]},
                        },
                        "from_cache": {
                            "summary": "Warm cache",
                            "value": {"source": "cache", "data": [{"id": 1, "name": "Laptop"}, {"id": 2, "name": "Phone"}]},
                        },
                    }
                }
            },
        },
        500: {"description": "The database could not be read.", "model": ErrorOut},
    },
)
async def list_products(
    handler: ReadThroughHandler[List[ProductOut]] = Depends(get_products_handler),
    cfg: Settings = Depends(get_settings),
):
    result = await handler.fetch(cfg.products_cache_key)
    return ProductListOut(source=_SOURCE_NAMES[result.provenance], data=result.value)

from typing import List

from fastapi import Depends, Request
from pydantic import TypeAdapter

from app.core.config import Settings, settings
from products.adapters.source_inmemory import InMemoryProductSource
from products.domain.entities.product import ProductOut
from products.ports.cache_port import CachePort
from products.ports.source_port import SourcePort
from products.services.read_through import ReadThroughHandler
from users.repositories.user_repository import InMemoryUserRepository

PRODUCT_LIST = TypeAdapter(List[ProductOut])


def get_settings() -> Settings:
    return settings


def get_cache(request: Request) -> CachePort:
    """The one adapter built in the app lifespan; never a module-level client."""
    return request.app.state.cache


def get_product_source(cfg: Settings = Depends(get_settings)) -> SourcePort:
    return InMemoryProductSource(cfg)


def get_products_handler(
    cache: CachePort = Depends(get_cache),
    source: SourcePort = Depends(get_product_source),
    cfg: Settings = Depends(get_settings),
) -> ReadThroughHandler[List[ProductOut]]:
    return ReadThroughHandler(cache, source, PRODUCT_LIST, ttl_seconds=cfg.cache_ttl_seconds)


def get_user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class Provenance(str, Enum):
    cache = "cache"
    source = "source"


class FetchResult(BaseModel, Generic[T]):
    """A served value plus the layer that produced it. Built once per request."""

    model_config = ConfigDict(frozen=True)

    value: T
    provenance: Provenance

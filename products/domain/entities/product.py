from typing import List, Literal

from pydantic import BaseModel

# Wire name of each provenance: the authoritative source is reported as "db".
ResponseSource = Literal["cache", "db"]


class ProductOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProductListOut(BaseModel):
    source: ResponseSource
    data: List[ProductOut]


class ErrorOut(BaseModel):
    error: str

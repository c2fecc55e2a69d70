from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Annotated, NewType
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

ProductId = NewType("ProductId", UUID)

Price = Annotated[Decimal, Field(gt=0, max_digits=18, decimal_places=6), PlainSerializer(float, when_used="json")]


class SortField(StrEnum):
    NAME = "name"
    PRICE = "price"
    CATEGORY = "category"
    STOCK = "stock"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductCreate(_ApiModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    price: Price
    category: str = Field(min_length=1, max_length=100)
    stock: int = Field(default=0, ge=0)
    is_active: bool = True


class ProductUpdate(_ApiModel):
    """Partial update; only fields present in the payload are written."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    price: Price | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    stock: int | None = Field(default=None, ge=0)
    is_active: bool | None = None

    @field_validator("name", "price", "category", "stock", "is_active", mode="before")
    @classmethod
    def _reject_null(cls, value: object) -> object:
        # Only description may be cleared explicitly.
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class Product(_ApiModel):
    model_config = ConfigDict(from_attributes=True)

    id: ProductId
    name: str
    description: str | None
    price: Price
    category: str
    stock: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProductQuery:
    categories: tuple[str, ...] = ()
    is_active: bool | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    page: int = 1
    limit: int = 10
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @staticmethod
    def parse_categories(raw: str | None) -> tuple[str, ...]:
        if not raw:
            return ()
        return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class ProductPage:
    items: list[Product]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit)


__all__ = [
    "Product",
    "ProductCreate",
    "ProductId",
    "ProductPage",
    "ProductQuery",
    "ProductUpdate",
    "SortField",
    "SortOrder",
]

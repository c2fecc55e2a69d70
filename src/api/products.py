from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from starlette import status

from api.dependencies import get_product_repository
from api.errors import NotFoundError
from db.repositories import ProductRepository
from domain.product import Product, ProductCreate, ProductQuery, ProductUpdate, SortField, SortOrder

DECIMAL_PATTERN = r"^\d+(\.\d+)?$"
POSITIVE_INT_PATTERN = r"^[1-9]\d*$"

router = APIRouter(prefix="/api/products", tags=["products"])

Repository = Annotated[ProductRepository, Depends(get_product_repository)]


def _dump(product: Product) -> dict[str, Any]:
    return product.model_dump(mode="json", by_alias=True)


def _get_or_404(repository: ProductRepository, product_id: UUID) -> Product:
    product = repository.get(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, repository: Repository) -> dict[str, Any]:
    product = repository.create(payload)
    return {"message": "Product created successfully", "data": _dump(product)}


@router.get("")
def list_products(
    repository: Repository,
    category: Annotated[str | None, Query()] = None,
    is_active: Annotated[Literal["true", "false"] | None, Query(alias="isActive")] = None,
    min_price: Annotated[str | None, Query(alias="minPrice", pattern=DECIMAL_PATTERN)] = None,
    max_price: Annotated[str | None, Query(alias="maxPrice", pattern=DECIMAL_PATTERN)] = None,
    page: Annotated[str | None, Query(pattern=POSITIVE_INT_PATTERN)] = None,
    limit: Annotated[str | None, Query(pattern=POSITIVE_INT_PATTERN)] = None,
    sort_by: Annotated[SortField, Query(alias="sortBy")] = SortField.CREATED_AT,
    sort_order: Annotated[SortOrder, Query(alias="sortOrder")] = SortOrder.DESC,
) -> dict[str, Any]:
    query = ProductQuery(
        categories=ProductQuery.parse_categories(category),
        is_active=None if is_active is None else is_active == "true",
        min_price=Decimal(min_price) if min_price else None,
        max_price=Decimal(max_price) if max_price else None,
        page=int(page) if page else 1,
        limit=int(limit) if limit else 10,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = repository.list(query)
    return {
        "message": "Products retrieved successfully",
        "data": [_dump(product) for product in result.items],
        "pagination": {
            "page": result.page,
            "limit": result.limit,
            "total": result.total,
            "totalPages": result.total_pages,
        },
    }


@router.get("/{product_id}")
def get_product(product_id: UUID, repository: Repository) -> dict[str, Any]:
    product = _get_or_404(repository, product_id)
    return {"message": "Product retrieved successfully", "data": _dump(product)}


@router.put("/{product_id}")
def update_product(product_id: UUID, payload: ProductUpdate, repository: Repository) -> dict[str, Any]:
    product = repository.update(product_id, payload)
    if product is None:
        raise NotFoundError("Product not found")
    return {"message": "Product updated successfully", "data": _dump(product)}


@router.delete("/{product_id}")
def delete_product(product_id: UUID, repository: Repository) -> dict[str, str]:
    if not repository.delete(product_id):
        raise NotFoundError("Product not found")
    return {"message": "Product deleted successfully"}

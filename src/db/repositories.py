from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from db import models
from domain.product import Product, ProductCreate, ProductPage, ProductQuery, ProductUpdate, SortField, SortOrder

_SORT_COLUMNS: dict[SortField, InstrumentedAttribute] = {
    SortField.NAME: models.ProductOrm.name,
    SortField.PRICE: models.ProductOrm.price,
    SortField.CATEGORY: models.ProductOrm.category,
    SortField.STOCK: models.ProductOrm.stock,
    SortField.CREATED_AT: models.ProductOrm.created_at,
    SortField.UPDATED_AT: models.ProductOrm.updated_at,
}


class ProductRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, product: ProductCreate) -> Product:
        orm_product = models.ProductOrm(**product.model_dump())
        self._session.add(orm_product)
        self._session.commit()
        self._session.refresh(orm_product)
        return self._to_domain(orm_product)

    def get(self, product_id: UUID) -> Product | None:
        orm_product = self._session.get(models.ProductOrm, product_id)
        if orm_product is None:
            return None
        return self._to_domain(orm_product)

    def list(self, query: ProductQuery) -> ProductPage:
        filters = self._filters(query)
        total = self._session.scalar(select(func.count()).select_from(models.ProductOrm).where(*filters)) or 0

        sort_column = _SORT_COLUMNS[query.sort_by]
        ordering = sort_column.asc() if query.sort_order == SortOrder.ASC else sort_column.desc()
        stmt = (
            select(models.ProductOrm)
            .where(*filters)
            .order_by(ordering, models.ProductOrm.id)
            .offset(query.offset)
            .limit(query.limit)
        )
        items = [self._to_domain(row) for row in self._session.scalars(stmt)]
        return ProductPage(items=items, total=total, page=query.page, limit=query.limit)

    def update(self, product_id: UUID, changes: ProductUpdate) -> Product | None:
        orm_product = self._session.get(models.ProductOrm, product_id)
        if orm_product is None:
            return None
        for key, value in changes.changes().items():
            setattr(orm_product, key, value)
        orm_product.updated_at = datetime.now(timezone.utc)
        self._session.commit()
        self._session.refresh(orm_product)
        return self._to_domain(orm_product)

    def delete(self, product_id: UUID) -> bool:
        orm_product = self._session.get(models.ProductOrm, product_id)
        if orm_product is None:
            return False
        self._session.delete(orm_product)
        self._session.commit()
        return True

    @staticmethod
    def _filters(query: ProductQuery) -> list[ColumnElement[bool]]:
        filters: list[ColumnElement[bool]] = []
        if query.categories:
            filters.append(models.ProductOrm.category.in_(query.categories))
        if query.is_active is not None:
            filters.append(models.ProductOrm.is_active == query.is_active)
        if query.min_price is not None:
            filters.append(models.ProductOrm.price >= query.min_price)
        if query.max_price is not None:
            filters.append(models.ProductOrm.price <= query.max_price)
        return filters

    @staticmethod
    def _to_domain(orm_product: models.ProductOrm) -> Product:
        product = Product.model_validate(orm_product)
        # SQLite drops tzinfo on round trip.
        updates = {}
        if product.created_at.tzinfo is None:
            updates["created_at"] = product.created_at.replace(tzinfo=timezone.utc)
        if product.updated_at.tzinfo is None:
            updates["updated_at"] = product.updated_at.replace(tzinfo=timezone.utc)
        return product.model_copy(update=updates) if updates else product

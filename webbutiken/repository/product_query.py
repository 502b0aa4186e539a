"""Typed SQL builders for the product listing and partial updates.

Every identifier that ends up interpolated into SQL comes from a fixed
allow-list in this module; user input only ever travels as bound parameters.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Tuple


class ProductSort(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"

    @property
    def order_by(self) -> str:
        return _ORDER_BY[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ProductSort"]:
        """Unknown or empty values are ignored rather than rejected."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


_ORDER_BY = {
    ProductSort.PRICE_ASC: "p.price ASC",
    ProductSort.PRICE_DESC: "p.price DESC",
    ProductSort.NAME_ASC: "p.name ASC",
    ProductSort.NAME_DESC: "p.name DESC",
}


@dataclass(frozen=True)
class ProductFilter:
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort: Optional[ProductSort] = None
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


_LIST_SELECT = (
    "SELECT p.product_id, p.name, p.price, "
    "m.name AS manufacturers_name, c.name AS category_name"
)
_LIST_FROM = (
    " FROM products p"
    " LEFT JOIN manufacturers m ON m.manufacturer_id = p.manufacturer_id"
    " LEFT JOIN products_categories pc ON pc.product_id = p.product_id"
    " LEFT JOIN categories c ON c.category_id = pc.category_id"
)


def build_list_query(f: ProductFilter) -> Tuple[str, str, dict]:
    """Return (count_sql, page_sql, params) for the product listing.

    The count query shares FROM/WHERE with the page query, so totalResults is
    the size of the filtered set before LIMIT/OFFSET.
    """
    where = []
    params: dict = {}
    if f.min_price is not None:
        where.append("p.price >= :min_price")
        params["min_price"] = f.min_price
    if f.max_price is not None:
        where.append("p.price <= :max_price")
        params["max_price"] = f.max_price
    wh = " WHERE " + " AND ".join(where) if where else ""

    count_sql = f"SELECT COUNT(*) AS total{_LIST_FROM}{wh}"
    # product_id as tiebreaker keeps pages stable across LIMIT/OFFSET
    order = f" ORDER BY {f.sort.order_by}, p.product_id" if f.sort else " ORDER BY p.product_id"
    page_sql = f"{_LIST_SELECT}{_LIST_FROM}{wh}{order} LIMIT :limit OFFSET :offset"
    return count_sql, page_sql, params


def build_search_query(name: Optional[str], category: Optional[str]) -> Tuple[str, list]:
    sql = (
        "SELECT p.product_id, m.name AS manufacturers_name, p.name, p.description, "
        "p.price, p.stock_quantity "
        "FROM products p "
        "LEFT JOIN manufacturers m ON m.manufacturer_id = p.manufacturer_id"
    )
    where = []
    params: list = []
    # SQLite LIKE is case-insensitive for ASCII
    if name:
        where.append("p.name LIKE ?")
        params.append(f"%{name}%")
    if category:
        where.append(
            "p.product_id IN (SELECT pc.product_id FROM products_categories pc "
            "JOIN categories c ON c.category_id = pc.category_id WHERE c.name LIKE ?)"
        )
        params.append(f"%{category}%")
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY p.product_id"
    return sql, params


def build_update(
    table: str,
    key_column: str,
    key: Any,
    fields: Mapping[str, Any],
    allowed: Iterable[str],
) -> Tuple[str, list]:
    """UPDATE ... SET col=? for exactly the supplied columns, in allow-list order."""
    allowed = list(allowed)
    unknown = [k for k in fields if k not in allowed]
    if unknown:
        raise ValueError(f"column(s) not updatable: {', '.join(sorted(unknown))}")
    cols = [c for c in allowed if c in fields]
    if not cols:
        raise ValueError("at least one field must be provided")
    sql = f"UPDATE {table} SET {', '.join(f'{c}=?' for c in cols)} WHERE {key_column}=?"
    params = [fields[c] for c in cols]
    params.append(key)
    return sql, params

# backend/ecommerce/schemas/pagination_schema.py
"""
Esquemas y utilidades de paginación compartidos por los listados.
"""

import math

from pydantic import BaseModel


class Pagination(BaseModel):
    page: int
    limit: int
    total_pages: int


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Calcula el bloque de paginación (total_pages = ceil(total / limit))."""
    return Pagination(page=page, limit=limit, total_pages=math.ceil(total / limit) if limit else 0)


def page_to_skip(page: int, limit: int) -> int:
    """Convierte una página (empezando en 1) al offset de la consulta."""
    return (max(page, 1) - 1) * limit

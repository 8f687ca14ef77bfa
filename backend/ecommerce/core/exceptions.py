# backend/ecommerce/core/exceptions.py
"""
Excepciones de dominio.

Los errores de reglas de negocio se comunican con HTTPException desde la capa
de servicios; este módulo contiene únicamente los errores que nacen en el
núcleo puro (sin HTTP) y que el llamador debe poder distinguir.
"""

from typing import Optional


class CategoryHierarchyError(Exception):
    """Error base de la jerarquía de categorías."""


class CategoryCycleError(CategoryHierarchyError):
    """
    La cadena de parent_id contiene un ciclo (o supera la profundidad máxima).

    Indica un problema de integridad en los datos almacenados, no un error del
    cliente: ninguna categoría puede ser ancestro de sí misma.
    """

    def __init__(self, category_id: Optional[int], depth: int, message: Optional[str] = None):
        self.category_id = category_id
        self.depth = depth
        super().__init__(
            message or f"Category hierarchy cycle detected at category {category_id} (depth {depth})"
        )

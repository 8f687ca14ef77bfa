# backend/ecommerce/services/category_tree.py
"""
Construcción del árbol de categorías y resolución de IDs descendientes.

Funciones puras sobre una lista plana de categorías ya obtenida por la capa
CRUD (filas ORM o cualquier objeto con category_id, parent_id, name,
display_order...). No hacen I/O ni filtran: si el llamador quiere solo
categorías activas, debe pasar la lista ya filtrada.

- build_category_tree(): árbol anidado, hermanos ordenados por
  (display_order, name). Profundidad ilimitada, con detección de ciclos.
- resolve_descendant_ids(): la categoría raíz más sus hijos directos
  (un solo nivel), usado para agregar productos en la página de una categoría.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ecommerce.core.exceptions import CategoryCycleError
from ecommerce.schemas.category_schema import CategoryTreeNode

# Profundidad máxima admitida antes de considerar la jerarquía corrupta
MAX_TREE_DEPTH = 1000


def _check_record(record: Any) -> None:
    # Solo activo en modo debug (se elimina con python -O)
    assert isinstance(record.category_id, int) and record.category_id > 0, (
        f"Invalid category id: {record.category_id!r}"
    )
    assert record.parent_id is None or (isinstance(record.parent_id, int) and record.parent_id > 0), (
        f"Invalid parent id for category {record.category_id}: {record.parent_id!r}"
    )


def _sort_siblings(records: Iterable[Any], presorted: bool = False) -> List[Any]:
    if presorted:
        # Ya ordenados por (display_order, name) con la collation de la base de datos
        return list(records)
    # sorted() es estable: los empates conservan el orden de entrada
    return sorted(records, key=lambda r: (r.display_order or 0, r.name))


def _to_node(record: Any) -> CategoryTreeNode:
    return CategoryTreeNode(
        category_id=record.category_id,
        name=record.name,
        slug=record.slug,
        description=record.description,
        image_url=record.image_url,
        display_order=record.display_order or 0,
        children=[],
    )


def group_by_parent(records: Iterable[Any]) -> Dict[Optional[int], List[Any]]:
    """Indexa las categorías por parent_id conservando el orden de entrada."""
    children_by_parent: Dict[Optional[int], List[Any]] = defaultdict(list)
    for record in records:
        _check_record(record)
        children_by_parent[record.parent_id].append(record)
    return children_by_parent


def build_category_tree(
    records: Sequence[Any],
    root_parent_id: Optional[int] = None,
    max_depth: int = MAX_TREE_DEPTH,
    presorted: bool = False,
) -> List[CategoryTreeNode]:
    """
    Construye el árbol de categorías a partir de una lista plana.

    Parte de las categorías cuyo parent_id es igual a root_parent_id (None
    para las raíces) y desciende recursivamente por los hijos. Las categorías
    con un padre inexistente en la lista no son alcanzables y simplemente no
    aparecen; no es un error.

    Args:
        records: Lista plana de categorías.
        root_parent_id: parent_id del nivel superior del árbol.
        max_depth: Profundidad máxima antes de abortar.
        presorted: True si records ya viene ordenada por (display_order, name)
            desde la base de datos; se conserva ese orden, que respeta la
            collation de los datos, en lugar de comparar nombres en Python.

    Returns:
        Lista ordenada de nodos raíz, cada uno con sus hijos ya construidos.

    Raises:
        CategoryCycleError: si una categoría se alcanza dos veces (ciclo en la
            cadena de padres) o se supera max_depth.
    """
    children_by_parent = group_by_parent(records)

    roots: List[CategoryTreeNode] = []
    visited = set()
    if root_parent_id is not None:
        # Volver al nodo de partida también es un ciclo
        visited.add(root_parent_id)

    # Pila explícita: (parent_id a expandir, lista destino, profundidad)
    stack = [(root_parent_id, roots, 1)]
    while stack:
        parent_id, siblings, depth = stack.pop()
        children = children_by_parent.get(parent_id)
        if not children:
            continue
        if depth > max_depth:
            raise CategoryCycleError(parent_id, depth, f"Category tree exceeds maximum depth of {max_depth}")

        for record in _sort_siblings(children, presorted):
            if record.category_id in visited:
                raise CategoryCycleError(record.category_id, depth)
            visited.add(record.category_id)
            node = _to_node(record)
            siblings.append(node)
            stack.append((record.category_id, node.children, depth + 1))

    return roots


def resolve_descendant_ids(records: Iterable[Any], root_id: int) -> List[int]:
    """
    Devuelve [root_id] seguido de los IDs de sus hijos directos.

    Solo un nivel: los nietos no se incluyen. Si root_id no aparece en la
    lista (borrada o inactiva), el resultado es simplemente [root_id].
    """
    ids = [root_id]
    for record in records:
        if record.parent_id == root_id and record.category_id != root_id:
            ids.append(record.category_id)
    return ids


def collect_subtree_ids(records: Iterable[Any], root_id: int, max_depth: int = MAX_TREE_DEPTH) -> List[int]:
    """
    IDs de todos los descendientes de root_id (sin incluirlo), a cualquier
    profundidad. Se usa para impedir mover una categoría bajo uno de sus
    propios descendientes.
    """
    return list(_walk_ids(build_category_tree(list(records), root_id, max_depth)))


def _walk_ids(nodes: List[CategoryTreeNode]):
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node.category_id
        stack.extend(reversed(node.children))

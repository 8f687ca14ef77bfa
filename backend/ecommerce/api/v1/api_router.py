# backend/ecommerce/api/v1/api_router.py
"""
Este archivo contiene el router principal para la API versión 1.

Se encarga de registrar y configurar todos los routers de la versión 1 de la API.
"""

from fastapi import APIRouter

# Importación de routers especializados por dominio de negocio
from ecommerce.api.v1.endpoints import (
    auth,
    categories,
    courier,
    orders,
    packages,
    products,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL V1
# ========================================

# Crear router principal para la versión 1 de la API
# Este router actuará como contenedor para todos los sub-routers de la v1
api_router_v1 = APIRouter()

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO DE NEGOCIO
# ========================================

# ROUTER DE AUTENTICACIÓN
# Registro, login/logout con JWT (cabecera o cookie) y perfil
api_router_v1.include_router(
    auth.router,
    prefix="/auth",                 # Prefijo: /api/v1/auth
    tags=["Auth"]                   # Tag para documentación OpenAPI/Swagger
)

# ROUTER DE CATEGORÍAS
# Maneja operaciones CRUD para el catálogo de categorías jerárquicas
api_router_v1.include_router(
    categories.router,
    prefix="/categories",
    tags=["Categories"]
)

# ROUTER DE PRODUCTOS
# Maneja operaciones CRUD para el catálogo de productos con filtros y ordenación
api_router_v1.include_router(
    products.router,
    prefix="/products",
    tags=["Products"]
)

# ROUTER DE PAQUETES
# Bundles de productos con precio conjunto y resumen de descuento
api_router_v1.include_router(
    packages.router,
    prefix="/packages",
    tags=["Packages"]
)

# ROUTER DE MENSAJERÍA
# Pedidos de entrega a instituciones
api_router_v1.include_router(
    courier.router,
    prefix="/courier",
    tags=["Courier"]
)

# ROUTER DEL HISTORIAL DE PEDIDOS
# Historial, seguimiento y devoluciones del usuario autenticado
api_router_v1.include_router(
    orders.router,
    prefix="/orders",
    tags=["Order History"]
)

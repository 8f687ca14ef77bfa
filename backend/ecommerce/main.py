# backend/ecommerce/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y inicializa la aplicación FastAPI completa,
incluyendo la configuración de rutas, middleware, manejadores de errores,
documentación automática y eventos del ciclo de vida de la aplicación.

Características principales:
- Configuración centralizada de la aplicación
- Registro de routers de la API con prefijos
- CORS, compresión GZip y registro de cada petición
- Traducción de errores de integridad de la jerarquía a 500
- Eventos del ciclo de vida de la aplicación (startup)
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette import status

from ecommerce.core.config import settings  # Configuración centralizada de la aplicación
from ecommerce.core.exceptions import CategoryCycleError
from ecommerce.core.logging_config import setup_logging
from ecommerce.api.v1.api_router import api_router_v1  # Router principal de la API v1

logger = logging.getLogger(__name__)

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    description="API de comercio electrónico: catálogo, paquetes, mensajería e historial de pedidos"
)

# ========================================
# MIDDLEWARE
# ========================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGIN.split(",") if origin.strip()],
    allow_credentials=True,  # Necesario para la cookie del token
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Registra método, ruta, código de estado y duración de cada petición."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response

# ========================================
# MANEJADORES DE ERRORES
# ========================================

@app.exception_handler(CategoryCycleError)
async def category_cycle_handler(request: Request, exc: CategoryCycleError):
    """Un ciclo en la jerarquía es un fallo de integridad de datos, no del cliente."""
    logger.error(f"❌ Jerarquía de categorías corrupta en {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Category hierarchy is corrupted: {exc}"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Error no controlado en {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )

# ========================================
# REGISTRO DE ROUTERS DE LA API
# ========================================

# El prefijo se obtiene de settings (típicamente "/api/v1")
app.include_router(api_router_v1, prefix=settings.API_V1_STR)

# ========================================
# ENDPOINTS RAÍZ Y VERIFICACIÓN DE ESTADO
# ========================================

@app.get("/", tags=["Root"])
async def read_root():
    """
    Endpoint raíz para verificación básica del estado de la API.

    Returns:
        dict: Mensaje de bienvenida, versión y ruta de la documentación
    """
    return {
        "message": f"Bienvenido a {settings.PROJECT_NAME}",
        "version": settings.PROJECT_VERSION,
        "docs": "/docs",
    }

# ========================================
# EVENTOS DEL CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@app.on_event("startup")
async def startup_event():
    """
    Evento ejecutado al iniciar la aplicación.

    Tareas de inicialización:
    - Configuración del logging
    - Creación de tablas si DB_CREATE_TABLES está activo
    """
    setup_logging()
    logger.info(f"🚀 {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} ({settings.APP_ENVIRONMENT})")

    if settings.DB_CREATE_TABLES:
        from ecommerce.db.database import create_tables

        await create_tables()
        logger.info("✅ Tablas de la base de datos verificadas")

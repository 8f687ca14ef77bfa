# backend/ecommerce/core/logging_config.py
"""
Configuración del logging de la aplicación a partir de settings.
"""

import logging
from pathlib import Path

from ecommerce.core.config import settings


def setup_logging() -> None:
    """
    Configura el logger raíz con el nivel y formato definidos en settings.

    Siempre escribe a consola; si LOG_FILE_PATH está definido, también a fichero.
    """
    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE_PATH:
        log_path = Path(settings.LOG_FILE_PATH)
        if not log_path.is_absolute():
            log_path = settings.BASE_DIR / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=settings.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    # SQLAlchemy es muy verboso en DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

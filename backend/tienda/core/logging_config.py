# backend/tienda/core/logging_config.py
"""
Configuración del logging de la aplicación a partir de Settings.
"""

import logging
from pathlib import Path

from tienda.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configura el logger raíz con el nivel, formato y fichero opcional de settings."""
    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE_PATH:
        log_path = Path(settings.LOG_FILE_PATH)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=settings.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    # SQLAlchemy tiene su propio flag de echo; evitamos duplicar sus mensajes
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

# backend/tienda/core/config.py
"""
Este archivo contiene la configuración de la aplicación.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

# Apunta al directorio 'backend/'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic BaseSettings.
    Variables sensibles desde .env, defaults seguros para el resto.
    """
    # Configuración general del proyecto
    BASE_DIR: Path = BASE_DIR
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Tienda API"
    PROJECT_VERSION: str = "0.1.0"

    # Configuración de la base de datos
    # DATABASE_URL explícita tiene prioridad; si no, PostgreSQL cuando hay
    # servidor configurado y SQLite local en cualquier otro caso.
    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_DB: str = "tienda_db"
    POSTGRES_PORT: str = "5432"
    DATABASE_ECHO: bool = False

    # Con True, un fingerprint de esquema distinto borra y recrea las tablas
    # en lugar de abortar el arranque.
    DESTRUCTIVE_MIGRATION_FALLBACK: bool = False

    # Carga los productos de ejemplo si el catálogo está vacío
    SEED_SAMPLE_PRODUCTS: bool = True

    # Valores pendientes por suscriptor de una consulta en vivo
    LIVE_QUERY_MAX_PENDING: int = 64

    # API remota de productos (opcional)
    PRODUCTS_API_URL: Optional[str] = None
    PRODUCTS_API_TIMEOUT: float = 10.0

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """URL de conexión a la base de datos asíncrona."""
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            # Algunos proveedores entregan postgres://, SQLAlchemy necesita el driver explícito
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql+asyncpg://", 1)
            elif url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return url
        if self.POSTGRES_SERVER:
            return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        return "sqlite+aiosqlite:///./tienda.db"

    # Logging - Defaults seguros
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE_PATH: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

# Instancia global de la configuración
settings = Settings()

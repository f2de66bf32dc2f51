# backend/tienda/db/database.py

"""
Configuración principal de la base de datos para la aplicación.

Este módulo establece la conexión asíncrona usando SQLAlchemy y define
los componentes básicos que serán utilizados por toda la aplicación:
- Motor de base de datos (engine)
- Fábrica de sesiones (session_factory)
- Clase base para modelos (Base)
- Ámbito transaccional con traducción de errores a excepciones de dominio
- Tracker de invalidación para las consultas en vivo

La dependencia get_db() vive en tienda/api/deps.py, separada de la configuración.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base

from tienda.core.config import settings # Importamos nuestra configuración
from tienda.core.exceptions import ConstraintViolationError, StorageUnavailableError
from tienda.services.live_query import DEFAULT_MAX_PENDING, InvalidationTracker

logger = logging.getLogger(__name__)

# Clase base declarativa para todos los modelos ORM
# Todos los modelos en db/models/ heredan de esta clase
Base = declarative_base()


class Database:
    """
    Agrupa el motor, la fábrica de sesiones y el tracker de invalidación
    de una base de datos concreta.

    Cada operación de escritura de los stores abre su propia transacción con
    transaction(); las lecturas usan session().
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        destructive_fallback: bool = False,
        live_query_max_pending: int = DEFAULT_MAX_PENDING,
    ):
        self.url = url
        self.destructive_fallback = destructive_fallback
        self.engine = create_async_engine(url, echo=echo, pool_pre_ping=True)

        # expire_on_commit=False es importante para que los objetos sigan siendo utilizables
        # después de que la transacción se haya confirmado.
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self.invalidation_tracker = InvalidationTracker(max_pending=live_query_max_pending)

    async def init(self) -> str:
        """
        Crea las tablas si no existen y valida el fingerprint del esquema.

        Devuelve el fingerprint vigente. Lanza SchemaMismatchError si el
        esquema guardado no coincide y no se permite la recreación destructiva.
        """
        # Registro de los modelos en Base.metadata antes de crear tablas
        from tienda.db.models import cart_model, product_model, schema_model  # noqa: F401
        from tienda.db.schema import ensure_schema

        try:
            async with self.engine.begin() as conn:
                identity_hash = await conn.run_sync(ensure_schema, self.destructive_fallback)
        except (OperationalError, InterfaceError) as exc:
            logger.error(f"No se pudo abrir la base de datos {self.engine.url!r}: {exc}")
            raise StorageUnavailableError(str(exc)) from exc

        logger.info(f"Base de datos lista (esquema {identity_hash})")
        return identity_hash

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Ámbito transaccional: confirma al salir, revierte ante cualquier excepción.

        Los errores de integridad se traducen a ConstraintViolationError y los
        de conectividad a StorageUnavailableError.
        """
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except IntegrityError as exc:
                logger.warning(f"Transacción revertida por restricción: {exc.orig}")
                raise ConstraintViolationError(str(exc.orig)) from exc
            except (OperationalError, InterfaceError) as exc:
                logger.error(f"Transacción revertida, almacenamiento no disponible: {exc}")
                raise StorageUnavailableError(str(exc)) from exc

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Sesión de solo lectura con la misma traducción de errores de conectividad."""
        async with self.session_factory() as session:
            try:
                yield session
            except (OperationalError, InterfaceError) as exc:
                logger.error(f"Lectura fallida, almacenamiento no disponible: {exc}")
                raise StorageUnavailableError(str(exc)) from exc

    async def dispose(self) -> None:
        """Cancela las suscripciones en vivo y cierra el pool de conexiones."""
        self.invalidation_tracker.cancel_all()
        await self.engine.dispose()


# Instancia por defecto construida a partir de la configuración global
database = Database(
    settings.SQLALCHEMY_DATABASE_URI,
    echo=settings.DATABASE_ECHO,
    destructive_fallback=settings.DESTRUCTIVE_MIGRATION_FALLBACK,
    live_query_max_pending=settings.LIVE_QUERY_MAX_PENDING,
)

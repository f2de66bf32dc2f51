# backend/tienda/db/schema.py

"""
Fingerprint del esquema persistido.

Al abrir la base de datos se compara el hash guardado en schema_master con
el calculado a partir de los modelos. Si difieren, el arranque falla con
SchemaMismatchError (o se recrean las tablas si se permite la recreación
destructiva).
"""

import hashlib
import logging
from typing import List

from sqlalchemy import MetaData, delete, inspect, insert, select
from sqlalchemy.engine import Connection

from tienda.core.exceptions import SchemaMismatchError
from tienda.db.database import Base
from tienda.db.models.schema_model import SchemaMaster

logger = logging.getLogger(__name__)

# Fila fija que guarda el fingerprint
SCHEMA_MASTER_ID = 42


def compute_identity_hash(metadata: MetaData) -> str:
    """Hash MD5 estable de tablas, columnas y restricciones (sin schema_master)."""
    parts = []
    for table in sorted(metadata.tables.values(), key=lambda t: t.name):
        if table.name == SchemaMaster.__tablename__:
            continue
        columns = ",".join(
            f"{c.name}:{c.type}:{'pk' if c.primary_key else ''}:{'null' if c.nullable else 'notnull'}"
            for c in table.columns
        )
        constraints = ",".join(sorted(str(c.name) for c in table.constraints if c.name))
        parts.append(f"{table.name}({columns})[{constraints}]")
    return hashlib.md5("|".join(parts).encode("utf-8")).hexdigest()


def _write_identity_hash(connection: Connection, identity_hash: str) -> None:
    connection.execute(delete(SchemaMaster).where(SchemaMaster.id == SCHEMA_MASTER_ID))
    connection.execute(insert(SchemaMaster).values(id=SCHEMA_MASTER_ID, identity_hash=identity_hash))


def _existing_model_tables(connection: Connection) -> List[str]:
    """Tablas de los modelos que ya existen en la base de datos."""
    present = set(inspect(connection).get_table_names())
    return sorted(
        name for name in Base.metadata.tables
        if name != SchemaMaster.__tablename__ and name in present
    )


def read_identity_hash(connection: Connection):
    """Devuelve el fingerprint guardado o None si la base de datos es nueva."""
    if not inspect(connection).has_table(SchemaMaster.__tablename__):
        return None
    return connection.execute(
        select(SchemaMaster.identity_hash).where(SchemaMaster.id == SCHEMA_MASTER_ID)
    ).scalar_one_or_none()


def ensure_schema(connection: Connection, destructive_fallback: bool = False) -> str:
    """
    Crea o valida el esquema. Pensado para AsyncConnection.run_sync().

    - Base de datos nueva: crea las tablas y guarda el fingerprint.
    - Tablas de los modelos sin fingerprint guardado: se trata como esquema
      distinto.
    - Fingerprint igual: no hace nada más que crear tablas ausentes.
    - Fingerprint distinto: SchemaMismatchError, o borrado y recreación
      de todas las tablas si destructive_fallback es True.
    """
    expected = compute_identity_hash(Base.metadata)
    found = read_identity_hash(connection)

    if found is None and not _existing_model_tables(connection):
        Base.metadata.create_all(connection)
        _write_identity_hash(connection, expected)
        logger.info(f"Esquema creado con fingerprint {expected}")
        return expected

    if found != expected:
        if not destructive_fallback:
            logger.error(f"Fingerprint de esquema distinto: esperado {expected}, encontrado {found}")
            raise SchemaMismatchError(expected, found)
        logger.warning(f"Fingerprint de esquema distinto ({found}), recreando todas las tablas")
        Base.metadata.drop_all(connection)
        Base.metadata.create_all(connection)
        _write_identity_hash(connection, expected)
        return expected

    Base.metadata.create_all(connection)
    return expected

# backend/tienda/core/exceptions.py
"""
Excepciones de dominio de la tienda.

Los stores nunca reintentan: cada error se propaga al llamador, que decide
la política (la capa HTTP los traduce a códigos de estado).
"""

from typing import Optional


class TiendaError(Exception):
    """Base de todos los errores de dominio."""


class NotFoundError(TiendaError):
    """El identificador consultado no existe."""

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} no encontrado")


class ConstraintViolationError(TiendaError):
    """Identificador explícito duplicado o campo inválido."""


class StorageUnavailableError(TiendaError):
    """La base de datos no es accesible o está corrupta."""


class SchemaMismatchError(TiendaError):
    """El fingerprint de esquema guardado no coincide con el esperado."""

    def __init__(self, expected: str, found: Optional[str]):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Esquema incompatible: se esperaba {expected} y la base de datos tiene {found or 'ninguno'}"
        )

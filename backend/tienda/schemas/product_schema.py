# backend/tienda/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.

Definen el mapeo tipado entre filas de 'productos' y objetos de la aplicación.
"""

from decimal import Decimal
from typing import List
from pydantic import BaseModel, Field, ConfigDict

# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    image_url: str = ""
    category: str = ""
    stock: int = Field(default=0, ge=0)


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """
    Esquema para insertar un producto.
    id=0 significa "nuevo" (se asigna automáticamente); un id explícito que ya
    existe reemplaza la fila.
    """
    id: int = Field(default=0, ge=0)


class ProductUpdate(ProductBase):
    """Esquema para reemplazar un producto existente."""
    id: int = Field(..., gt=0)


# ========================================
# ESQUEMA DE RESPUESTA
# ========================================

class ProductResponse(ProductBase):
    """Esquema de respuesta para un producto leído de la base de datos."""
    id: int

    model_config = ConfigDict(from_attributes=True)


class ProductIdsResponse(BaseModel):
    """Ids asignados por una inserción en lote, en el orden de entrada."""
    ids: List[int]

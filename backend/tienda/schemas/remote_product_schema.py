# backend/tienda/schemas/remote_product_schema.py
"""
Esquema del producto tal como lo expone la API remota (/api/productos).

Particularidades del formato remoto:
- 'precio' llega como texto ("15000.00").
- 'categoria_nombre' puede venir nulo.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from tienda.schemas.product_schema import ProductBase, ProductCreate

DEFAULT_CATEGORY = "General"


class RemoteProduct(BaseModel):
    id: int = 0
    name: str = Field(..., alias="nombre")
    description: str = Field(default="", alias="descripcion")
    price: str = Field(default="0", alias="precio")
    image_url: str = Field(default="", alias="imagen")
    category: Optional[str] = Field(default=None, alias="categoria_nombre")
    stock: int = 0

    model_config = ConfigDict(populate_by_name=True)

    def parsed_price(self) -> Decimal:
        """Precio como Decimal; 0 si el texto no es un número válido no negativo."""
        try:
            value = Decimal(self.price.strip())
        except (InvalidOperation, AttributeError):
            return Decimal("0")
        if not value.is_finite() or value < 0:
            return Decimal("0")
        return value

    def to_product(self) -> ProductCreate:
        return ProductCreate(
            id=max(self.id, 0),
            name=self.name,
            description=self.description,
            price=self.parsed_price(),
            image_url=self.image_url,
            category=self.category or DEFAULT_CATEGORY,
            stock=max(self.stock, 0),
        )

    @classmethod
    def from_product(cls, product: ProductBase, product_id: int = 0) -> "RemoteProduct":
        return cls(
            id=product_id,
            name=product.name,
            description=product.description,
            price=str(product.price),
            image_url=product.image_url,
            category=product.category,
            stock=product.stock,
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)

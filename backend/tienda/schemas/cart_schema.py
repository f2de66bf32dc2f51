# backend/tienda/schemas/cart_schema.py
"""
Esquemas Pydantic para la gestión del carrito de la compra.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, computed_field

from tienda.schemas.product_schema import ProductResponse

class CartLineBase(BaseModel):
    """Copia de los campos visibles del producto más la cantidad."""
    product_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    image_url: str = ""
    category: str = ""
    stock: int = Field(default=0, ge=0)
    quantity: int = Field(default=1, gt=0)


class CartLineCreate(CartLineBase):
    """Esquema para insertar una línea. id=0 significa "nuevo"."""
    id: int = Field(default=0, ge=0)

    @classmethod
    def from_product(cls, product: ProductResponse, quantity: int = 1) -> "CartLineCreate":
        """Toma una instantánea del producto tal y como está ahora."""
        return cls(
            product_id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            image_url=product.image_url,
            category=product.category,
            stock=product.stock,
            quantity=quantity,
        )


class CartLineResponse(CartLineBase):
    """Línea del carrito leída de la base de datos."""
    id: int

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class CartQuantityUpdate(BaseModel):
    """Esquema para cambiar la cantidad de una línea."""
    quantity: int = Field(..., gt=0)


class CartTotalResponse(BaseModel):
    """Total del carrito; None cuando el carrito está vacío (distinto de cero)."""
    total: Optional[Decimal] = None

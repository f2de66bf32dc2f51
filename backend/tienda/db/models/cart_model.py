# backend/tienda/db/models/cart_model.py
from sqlalchemy import Column, Integer, String, Text, Numeric, CheckConstraint

from tienda.db.database import Base

# Línea del carrito: copia desnormalizada del producto en el momento de añadirlo.
# product_id no es clave foránea; borrar el producto no borra la línea.
class CartLine(Base):
    __tablename__ = "carrito"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    stock = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_carrito_price_nonneg"),
        CheckConstraint("quantity > 0", name="ck_carrito_quantity_pos"),
    )

    def __repr__(self) -> str:
        return f"<CartLine id={self.id} product_id={self.product_id} quantity={self.quantity}>"

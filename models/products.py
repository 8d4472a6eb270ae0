from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import Base

# ✅ Modèle Product
class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)

    # Les noms de catégories ne sont jamais stockés ici : ils sont recalculés
    # à chaque lecture depuis la table d'association
    category_links = relationship(
        "ProductCategory",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, price={self.price}, stock={self.stock})>"

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from .base import Base

# ✅ Modèle Category
class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    # L'unicité insensible à la casse est vérifiée par CategoryService
    name = Column(String(100), unique=True, nullable=False)

    # Relation avec les associations produit-catégorie (supprimées avec la catégorie)
    product_links = relationship(
        "ProductCategory",
        back_populates="category",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"

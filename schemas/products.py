from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Prix minimal accepté par la validation des formulaires et de l'API
MIN_PRICE = Decimal("0.01")
# Bornes des colonnes : Numeric(10, 2) pour le prix, INTEGER 32 bits pour le stock
MAX_PRICE = Decimal("99999999.99")
MAX_STOCK = 2_147_483_647

# ✅ Schéma pour Product
class ProductCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=MIN_PRICE, le=MAX_PRICE, max_digits=10, decimal_places=2)
    stock: int = Field(..., ge=0, le=MAX_STOCK)
    category_ids: Optional[List[int]] = Field(default=None, description="Identifiants des catégories")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Product name is required")
        return value

    @field_validator("description")
    @classmethod
    def empty_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

class StockUpdate(BaseModel):
    stock: int = Field(..., ge=0, le=MAX_STOCK)

class PriceUpdate(BaseModel):
    price: Decimal = Field(..., ge=MIN_PRICE, le=MAX_PRICE, max_digits=10, decimal_places=2)

class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int
    categories: List[str] = Field(default_factory=list, description="Noms des catégories associées")

    model_config = ConfigDict(from_attributes=True)

class InventoryValueResponse(BaseModel):
    total_value: Decimal
